"""
functions/orchestrator/cluster_writer.py

Sets a Mongo (vCore) cluster's tier through the az CLI:

    az cosmosdb mongocluster update \
        --resource-group <rg> --cluster-name <name> --shard-node-tier <tier>

One invocation per call, no retries. The raw stdout is returned on success
so the caller can echo it back.
"""

from __future__ import annotations

from typing import Optional

import structlog

from functions.orchestrator.cluster_ports import WriteResult, tool_error
from functions.utils.cli_runner import CliRunner
from functions.utils.settings import Settings

logger = structlog.get_logger(__name__)


class AzCliClusterWriter:
    """ClusterWriter backed by `az cosmosdb mongocluster update`."""

    def __init__(self, settings: Settings, runner: Optional[CliRunner] = None) -> None:
        self.az_cli_path = settings.az_cli_path
        self.runner = runner or CliRunner(
            timeout_seconds=settings.cli_timeout_seconds,
            log_output=settings.log_cli_output,
        )

    def build_command(self, resource_group: str, cluster_name: str, target_tier: str) -> list[str]:
        return [
            self.az_cli_path,
            "cosmosdb",
            "mongocluster",
            "update",
            "--resource-group",
            resource_group,
            "--cluster-name",
            cluster_name,
            "--shard-node-tier",
            target_tier,
        ]

    async def update_tier(self, resource_group: str, cluster_name: str, target_tier: str) -> WriteResult:
        logger.info(
            "cluster_update_started",
            resource_group=resource_group,
            cluster_name=cluster_name,
            target_tier=target_tier,
        )

        result = await self.runner.run(self.build_command(resource_group, cluster_name, target_tier))
        if not result.ok:
            return WriteResult.failure(tool_error(result))

        logger.info("cluster_update_succeeded", cluster_name=cluster_name, target_tier=target_tier)
        return WriteResult.success(result.stdout)
