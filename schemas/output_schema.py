# -------------------------------------------------------------------
# schemas/output_schema.py
#
# WHAT THIS FILE IS FOR
# --------------------
# This module defines the **internal result** of one scaling attempt,
# as produced by ScalingService and consumed by api.py.
#
# It is transient: built per request, logged, turned into a plain-text
# HTTP response, then discarded. Nothing here is persisted.
#
# OUTCOME KINDS
# -------------
#   scaled               read ok, next tier resolved, update ok
#   at_boundary          already at the smallest/largest tier (no update)
#   tier_not_recognized  current tier not in the catalog (no update)
#   read_failed          current tier could not be read (no update)
#   write_failed         update command failed
#
# The HTTP status for each kind is decided in api.py, not here.
# -------------------------------------------------------------------

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from functions.orchestrator.cluster_ports import ClusterError
from functions.orchestrator.tier_catalog import ScaleDirection


class OutcomeKind(str, Enum):
    SCALED = "scaled"
    AT_BOUNDARY = "at_boundary"
    TIER_NOT_RECOGNIZED = "tier_not_recognized"
    READ_FAILED = "read_failed"
    WRITE_FAILED = "write_failed"


class ScalingOutcome(BaseModel):
    """
    Result of one read -> resolve -> write pass.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: OutcomeKind
    direction: ScaleDirection
    previous_tier: Optional[str] = None
    next_tier: Optional[str] = None
    raw_tool_output: Optional[str] = None

    # Set for read_failed / write_failed
    error: Optional[ClusterError] = None
