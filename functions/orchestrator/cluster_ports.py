"""
functions/orchestrator/cluster_ports.py

Contracts between the scaling orchestrator and whatever reads/changes the
live cluster.

- ClusterReader / ClusterWriter are structural Protocols: the az CLI
  implementations live in cluster_reader.py / cluster_writer.py, tests use
  in-memory fakes.
- Expected failures are returned, not raised: ReadResult / WriteResult
  carry either a value or a ClusterError. The caller decides what a
  failure means (HTTP status, log level).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, runtime_checkable

from functions.utils.cli_runner import CliResult


class ClusterErrorKind(str, Enum):
    TOOL_ERROR = "tool_error"            # non-zero exit, spawn failure, timeout
    PARSE_ERROR = "parse_error"          # stdout empty or not JSON
    FIELD_NOT_FOUND = "field_not_found"  # JSON ok, sku path missing


@dataclass(frozen=True)
class ClusterError:
    kind: ClusterErrorKind
    message: str
    stdout: str = ""
    stderr: str = ""


@dataclass(frozen=True)
class ReadResult:
    tier: Optional[str] = None
    error: Optional[ClusterError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.tier)

    @classmethod
    def success(cls, tier: str) -> "ReadResult":
        return cls(tier=tier)

    @classmethod
    def failure(cls, error: ClusterError) -> "ReadResult":
        return cls(error=error)


@dataclass(frozen=True)
class WriteResult:
    output: str = ""
    error: Optional[ClusterError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, output: str) -> "WriteResult":
        return cls(output=output)

    @classmethod
    def failure(cls, error: ClusterError) -> "WriteResult":
        return cls(error=error)


def tool_error(result: CliResult) -> ClusterError:
    """TOOL_ERROR for a CLI run that did not exit cleanly."""
    if result.timed_out:
        message = "CLI command timed out"
    elif result.returncode is None:
        message = f"CLI command could not be started: {result.stderr.strip()}"
    else:
        message = f"CLI error (exit code {result.returncode}): {result.stderr.strip()}"
    return ClusterError(ClusterErrorKind.TOOL_ERROR, message, stdout=result.stdout, stderr=result.stderr)


@runtime_checkable
class ClusterReader(Protocol):
    async def read_current_tier(self, resource_group: str, cluster_name: str) -> ReadResult:
        """Return the cluster's current tier (properties.nodeGroupSpecs[0].sku)."""
        ...


@runtime_checkable
class ClusterWriter(Protocol):
    async def update_tier(self, resource_group: str, cluster_name: str, target_tier: str) -> WriteResult:
        """Request the cluster be set to target_tier. Single attempt."""
        ...
