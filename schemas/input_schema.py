# -------------------------------------------------------------------
# schemas/input_schema.py
#
# WHAT THIS FILE IS FOR
# --------------------
# This module defines the **public request schema** for the
# scale endpoint.
#
# Wire names (query parameters or JSON body keys):
#   resourceGroup, mongoCluster, direction
#
# Python-side attribute names:
#   resource_group, cluster_name, direction
#
# Both are accepted (alias + populate_by_name=True).
#
# VALIDATION RULES
# ----------------
# - All three fields are required and must be non-empty
# - direction is case-sensitive: exactly "up" or "down"
#
# Merging query parameters with the body, and the plain-text error
# messages returned to clients, live in
# functions/orchestrator/request_parser.py. This module only declares
# the validated shape.
# -------------------------------------------------------------------

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from functions.orchestrator.tier_catalog import ScaleDirection


class ScalingRequest(BaseModel):
    """
    A validated request to move one cluster one tier up or down.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "resourceGroup": "rg-data-prod",
                "mongoCluster": "orders-cluster",
                "direction": "up",
            }
        },
    )

    resource_group: str = Field(..., alias="resourceGroup", min_length=1)
    cluster_name: str = Field(..., alias="mongoCluster", min_length=1)
    direction: ScaleDirection = Field(..., description="'up' or 'down' (case-sensitive)")
