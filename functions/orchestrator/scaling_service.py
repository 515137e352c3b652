"""
functions/orchestrator/scaling_service.py

WHAT THIS FILE IS FOR
---------------------
Drives one scaling attempt for a validated ScalingRequest:

    read current tier -> resolve next tier -> write next tier

CALL FLOW CONTEXT
-----------------
FastAPI (api.py)
  -> parse_scaling_request()
  -> ScalingService.scale()
      -> ClusterReader.read_current_tier()
      -> TierCatalog.next_tier()
      -> ClusterWriter.update_tier()      (only when a next tier exists)

RULES
-----
- Strictly sequential, no retries, no loops
- Read failure, unknown tier, and boundary all stop before the write
- Every expected outcome comes back as a ScalingOutcome; only genuinely
  unexpected errors propagate (api.py turns those into a 500)

WHAT THIS FILE IS NOT FOR
-------------------------
- HTTP status codes / response text (api.py)
- Process execution (functions/utils/cli_runner.py)
"""

from __future__ import annotations

import structlog

from functions.orchestrator.cluster_ports import ClusterReader, ClusterWriter
from functions.orchestrator.tier_catalog import StepKind, TierCatalog
from schemas.input_schema import ScalingRequest
from schemas.output_schema import OutcomeKind, ScalingOutcome

logger = structlog.get_logger(__name__)


class ScalingService:
    def __init__(self, catalog: TierCatalog, reader: ClusterReader, writer: ClusterWriter) -> None:
        self.catalog = catalog
        self.reader = reader
        self.writer = writer

    async def scale(self, request: ScalingRequest) -> ScalingOutcome:
        log = logger.bind(
            resource_group=request.resource_group,
            cluster_name=request.cluster_name,
            direction=request.direction.value,
        )

        # 1) read
        read = await self.reader.read_current_tier(request.resource_group, request.cluster_name)
        if not read.ok:
            log.warning(
                "scale_read_failed",
                error_kind=read.error.kind.value if read.error else None,
                error=read.error.message if read.error else "empty tier",
            )
            return ScalingOutcome(kind=OutcomeKind.READ_FAILED, direction=request.direction, error=read.error)

        current = read.tier
        log.info("scale_current_tier", current_tier=current)

        # 2) resolve
        step = self.catalog.next_tier(current, request.direction)
        if not step.is_next:
            if step.kind is StepKind.NOT_FOUND:
                log.warning("scale_tier_not_recognized", current_tier=current, catalog=list(self.catalog.tiers))
                kind = OutcomeKind.TIER_NOT_RECOGNIZED
            else:
                log.info("scale_at_boundary", current_tier=current)
                kind = OutcomeKind.AT_BOUNDARY
            return ScalingOutcome(kind=kind, direction=request.direction, previous_tier=current)

        # 3) write
        log.info("scale_next_tier", current_tier=current, next_tier=step.tier)
        write = await self.writer.update_tier(request.resource_group, request.cluster_name, step.tier)
        if not write.ok:
            log.error(
                "scale_write_failed",
                current_tier=current,
                next_tier=step.tier,
                error=write.error.message if write.error else None,
            )
            return ScalingOutcome(
                kind=OutcomeKind.WRITE_FAILED,
                direction=request.direction,
                previous_tier=current,
                next_tier=step.tier,
                error=write.error,
            )

        log.info("scale_succeeded", previous_tier=current, next_tier=step.tier)
        return ScalingOutcome(
            kind=OutcomeKind.SCALED,
            direction=request.direction,
            previous_tier=current,
            next_tier=step.tier,
            raw_tool_output=write.output,
        )
