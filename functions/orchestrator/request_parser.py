"""
functions/orchestrator/request_parser.py

WHAT THIS FILE IS FOR
---------------------
Builds a validated ScalingRequest from the two places a caller may put
the parameters:

1) query string:  ?resourceGroup=..&mongoCluster=..&direction=..
2) JSON body:     {"resourceGroup": .., "mongoCluster": .., "direction": ..}

MERGE RULES
-----------
- Query parameters win, field by field
- The body is read only when at least one field is missing from the query
- Body values fill only the fields the query left empty
- Body present but not a JSON object (or a field that is not a string)
  -> InvalidScalingRequest("Invalid JSON body."); no further fallback

VALIDATION
----------
- Any field still empty -> "Missing required parameters: <names>."
- direction not exactly "up"/"down" -> "Direction must be either 'up' or 'down'."

InvalidScalingRequest.message is safe to return to the client as-is
(api.py maps it to a 400 plain-text response).
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional, Union

import structlog

from functions.orchestrator.tier_catalog import ScaleDirection
from schemas.input_schema import ScalingRequest

logger = structlog.get_logger(__name__)

# wire name -> ScalingRequest field
WIRE_FIELDS: Dict[str, str] = {
    "resourceGroup": "resource_group",
    "mongoCluster": "cluster_name",
    "direction": "direction",
}

INVALID_BODY_MESSAGE = "Invalid JSON body."
INVALID_DIRECTION_MESSAGE = "Direction must be either 'up' or 'down'."


class InvalidScalingRequest(ValueError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def _missing(values: Mapping[str, Optional[str]]) -> list[str]:
    return [name for name in WIRE_FIELDS if not values.get(name)]


def _parse_body(body: Union[bytes, str, None]) -> Dict[str, Any]:
    if body is None:
        return {}
    text = body.decode("utf-8") if isinstance(body, bytes) else body
    if not text.strip():
        return {}

    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def parse_scaling_request(query: Mapping[str, str], body: Union[bytes, str, None] = None) -> ScalingRequest:
    values: Dict[str, Optional[str]] = {name: query.get(name) or None for name in WIRE_FIELDS}

    if _missing(values):
        try:
            data = _parse_body(body)
        except (ValueError, UnicodeDecodeError) as exc:
            logger.info("scale_request_body_invalid", error=str(exc))
            raise InvalidScalingRequest(INVALID_BODY_MESSAGE) from exc

        for name in _missing(values):
            raw = data.get(name)
            if raw is None:
                continue
            if not isinstance(raw, str):
                logger.info("scale_request_body_field_not_string", field=name, type=type(raw).__name__)
                raise InvalidScalingRequest(INVALID_BODY_MESSAGE)
            values[name] = raw or None

    missing = _missing(values)
    if missing:
        logger.info("scale_request_missing_parameters", missing=missing)
        raise InvalidScalingRequest(f"Missing required parameters: {', '.join(missing)}.")

    if values["direction"] not in {d.value for d in ScaleDirection}:
        logger.info("scale_request_invalid_direction", direction=values["direction"])
        raise InvalidScalingRequest(INVALID_DIRECTION_MESSAGE)

    return ScalingRequest(**{WIRE_FIELDS[name]: value for name, value in values.items()})
