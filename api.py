"""
api.py

WHAT THIS FILE IS FOR
---------------------
This module defines the FastAPI application entrypoint for the
Mongo cluster tier scaler.

It is responsible for:
- Creating the FastAPI app instance
- Wiring settings -> tier catalog -> az CLI reader/writer -> ScalingService
- Registering middleware for correlation ID propagation (X-Correlation-Id),
  bound into structlog's context for every log line of the request
- Exposing HTTP endpoints:
    - GET /health and /healthz
    - GET|POST /api/ScaleFunction (scale one tier up or down)

SCALE ENDPOINT CONTRACT
-----------------------
Input: resourceGroup, mongoCluster, direction
       (query string first, JSON body fills whatever is missing)

Responses are text/plain:
- 400  missing/invalid parameters, invalid JSON body, unrecognized tier,
       read failure (settings.read_failure_status)
- 200  "Cannot scale up from tier X."
       "Scaled up from X to Y. Tool output: ..."
- 500  write failure (settings.write_failure_status) with a short message;
       any unexpected exception with an empty body

DESIGN INTENT
-------------
This file contains ONLY the HTTP layer:
- routing
- middleware
- outcome -> status code / response text mapping

Parsing lives in functions/orchestrator/request_parser.py, the
read/resolve/write flow in functions/orchestrator/scaling_service.py.
"""

from __future__ import annotations

import uuid
from typing import Tuple

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response

from functions.orchestrator.cluster_reader import AzCliClusterReader
from functions.orchestrator.cluster_writer import AzCliClusterWriter
from functions.orchestrator.request_parser import InvalidScalingRequest, parse_scaling_request
from functions.orchestrator.scaling_service import ScalingService
from functions.orchestrator.tier_catalog import TierCatalog
from functions.utils.logging_config import configure_logging
from functions.utils.settings import get_settings
from schemas.output_schema import OutcomeKind, ScalingOutcome

settings = get_settings()
configure_logging(settings.log_level, json_output=settings.environment != "local")

logger = structlog.get_logger(__name__)

catalog = TierCatalog.from_names(settings.tier_catalog)
svc = ScalingService(
    catalog=catalog,
    reader=AzCliClusterReader(settings),
    writer=AzCliClusterWriter(settings),
)

app = FastAPI(
    title="Mongo Cluster Tier Scaler",
    version="1.0.0",
    description="Scales an Azure Cosmos DB for MongoDB (vCore) cluster one tier up or down.",
)

CORRELATION_HEADER = "X-Correlation-Id"


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------
def _get_or_create_correlation_id(request: Request) -> str:
    incoming = request.headers.get(CORRELATION_HEADER)
    return incoming.strip() if incoming and incoming.strip() else f"corr_{uuid.uuid4().hex}"


def render_outcome(outcome: ScalingOutcome) -> Tuple[int, str]:
    """Map a ScalingOutcome to (HTTP status, plain-text body)."""
    direction = outcome.direction.value

    if outcome.kind is OutcomeKind.SCALED:
        return 200, (
            f"Scaled {direction} from {outcome.previous_tier} to {outcome.next_tier}. "
            f"Tool output: {outcome.raw_tool_output or ''}"
        )

    if outcome.kind is OutcomeKind.AT_BOUNDARY:
        return 200, (
            f"Cannot scale {direction} from tier {outcome.previous_tier}."
        )

    if outcome.kind is OutcomeKind.TIER_NOT_RECOGNIZED:
        return 400, f"Current tier '{outcome.previous_tier}' is not recognized."

    if outcome.kind is OutcomeKind.READ_FAILED:
        return settings.read_failure_status, "Failed to fetch or parse current tier."

    return settings.write_failure_status, f"Failed to update cluster tier to {outcome.next_tier}."


# -------------------------------------------------------------------
# Middleware
# -------------------------------------------------------------------
@app.middleware("http")
async def correlation_id_middleware(request: Request, call_next):
    correlation_id = _get_or_create_correlation_id(request)
    request.state.correlation_id = correlation_id
    with structlog.contextvars.bound_contextvars(correlation_id=correlation_id):
        response = await call_next(request)
    response.headers[CORRELATION_HEADER] = correlation_id
    return response


# -------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------
@app.get("/healthz")
@app.get("/health")
async def health():
    return {
        "status": "ok",
        "service": settings.service_name,
        "environment": settings.environment,
    }


@app.api_route("/api/ScaleFunction", methods=["GET", "POST"])
async def scale_function(request: Request) -> Response:
    logger.info("scale_request_received", method=request.method)

    try:
        # ---------------------------------------------------------------
        # 1) Parse + validate
        # ---------------------------------------------------------------
        body = await request.body()
        try:
            scaling_request = parse_scaling_request(request.query_params, body)
        except InvalidScalingRequest as exc:
            return PlainTextResponse(exc.message, status_code=400)

        # ---------------------------------------------------------------
        # 2) Read -> resolve -> write
        # ---------------------------------------------------------------
        outcome = await svc.scale(scaling_request)

        # ---------------------------------------------------------------
        # 3) Respond
        # ---------------------------------------------------------------
        status_code, message = render_outcome(outcome)
        logger.info(
            "scale_request_completed",
            outcome=outcome.kind.value,
            status_code=status_code,
            previous_tier=outcome.previous_tier,
            next_tier=outcome.next_tier,
        )
        return PlainTextResponse(message, status_code=status_code)

    except Exception:  # noqa: BLE001
        logger.exception("scale_request_unexpected_error")
        return Response(status_code=500)
