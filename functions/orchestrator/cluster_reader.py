"""
functions/orchestrator/cluster_reader.py

WHAT THIS FILE IS FOR
---------------------
Reads a Mongo (vCore) cluster's current tier through the az CLI:

    az cosmosdb mongocluster show \
        --resource-group <rg> --cluster-name <name> --output json

and extracts `properties.nodeGroupSpecs[0].sku` from the JSON document.

FAILURE MAPPING
---------------
- process failed (non-zero exit, not started, timed out) -> TOOL_ERROR
- stdout empty or not valid JSON                        -> PARSE_ERROR
- any step of the sku path missing / wrong type / blank -> FIELD_NOT_FOUND

All three are returned as ReadResult.failure(...), never raised.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Sequence, Union

import structlog

from functions.orchestrator.cluster_ports import ClusterError, ClusterErrorKind, ReadResult, tool_error
from functions.utils.cli_runner import CliRunner
from functions.utils.settings import Settings

logger = structlog.get_logger(__name__)

PathStep = Union[str, int]

SKU_PATH: Sequence[PathStep] = ("properties", "nodeGroupSpecs", 0, "sku")


def lookup_path(doc: Any, path: Sequence[PathStep]) -> Optional[Any]:
    """
    Walk `path` through nested dicts/lists.

    Returns None at the first step that does not exist (missing key,
    index out of range, or a container of the wrong type).
    """
    node = doc
    for step in path:
        if isinstance(step, int):
            if not isinstance(node, list) or not -len(node) <= step < len(node):
                return None
            node = node[step]
        else:
            if not isinstance(node, dict) or step not in node:
                return None
            node = node[step]
    return node


def extract_current_tier(raw_json: str) -> ReadResult:
    """Parse `az ... show` output and return the first node group's sku."""
    if not raw_json or not raw_json.strip():
        return ReadResult.failure(
            ClusterError(ClusterErrorKind.PARSE_ERROR, "CLI returned no output", stdout=raw_json or "")
        )

    try:
        doc = json.loads(raw_json)
    except json.JSONDecodeError as exc:
        logger.error("cluster_show_json_invalid", error=str(exc))
        return ReadResult.failure(
            ClusterError(ClusterErrorKind.PARSE_ERROR, f"Invalid JSON from CLI: {exc}", stdout=raw_json)
        )

    sku = lookup_path(doc, SKU_PATH)
    if not isinstance(sku, str) or not sku.strip():
        logger.warning("cluster_show_sku_missing", path="properties.nodeGroupSpecs[0].sku")
        return ReadResult.failure(
            ClusterError(
                ClusterErrorKind.FIELD_NOT_FOUND,
                "properties.nodeGroupSpecs[0].sku not found in CLI output",
                stdout=raw_json,
            )
        )

    return ReadResult.success(sku.strip())


class AzCliClusterReader:
    """ClusterReader backed by `az cosmosdb mongocluster show`."""

    def __init__(self, settings: Settings, runner: Optional[CliRunner] = None) -> None:
        self.az_cli_path = settings.az_cli_path
        self.runner = runner or CliRunner(
            timeout_seconds=settings.cli_timeout_seconds,
            log_output=settings.log_cli_output,
        )

    def build_command(self, resource_group: str, cluster_name: str) -> list[str]:
        return [
            self.az_cli_path,
            "cosmosdb",
            "mongocluster",
            "show",
            "--resource-group",
            resource_group,
            "--cluster-name",
            cluster_name,
            "--output",
            "json",
        ]

    async def read_current_tier(self, resource_group: str, cluster_name: str) -> ReadResult:
        logger.info("cluster_read_started", resource_group=resource_group, cluster_name=cluster_name)

        result = await self.runner.run(self.build_command(resource_group, cluster_name))
        if not result.ok:
            return ReadResult.failure(tool_error(result))

        read = extract_current_tier(result.stdout)
        if read.ok:
            logger.info("cluster_read_succeeded", cluster_name=cluster_name, current_tier=read.tier)
        return read
