"""
functions/utils/cli_runner.py

WHAT THIS FILE IS FOR
---------------------
This module provides a minimal, asynchronous process runner used by the
cluster reader/writer to invoke the az CLI.

It exists to:
- Centralize subprocess execution (one place that spawns processes)
- Drain stdout and stderr concurrently while the process runs
- Always reap the child before returning (success, failure, timeout)
- Log the command line and its output at consistent levels
- Report every outcome as a CliResult instead of raising

EXECUTION CONTRACT
------------------
- Arguments are passed as an argv list (no shell). Request values such as
  resource group or cluster name can never be interpreted as shell syntax.
- `communicate()` reads both pipes concurrently with the wait, so a child
  that fills one pipe buffer cannot stall.
- timeout_seconds=None waits indefinitely. With a timeout the child is
  killed and reaped; the result has timed_out=True.
- A binary that cannot be started (missing, not executable) becomes a
  result with returncode=None and the OS error in stderr.

LOGGING
-------
- info:    command line, stdout ("(no output)" when empty)
- warning: non-empty stderr, even when the exit code is 0
- error:   non-zero exit, timeout, spawn failure

WHAT THIS FILE IS NOT FOR
-------------------------
This module is NOT responsible for:
- Building az command lines
- Parsing JSON output
- Deciding HTTP status codes

Those belong to the cluster reader/writer and the API layer.
"""

from __future__ import annotations

import asyncio
import os
import shlex
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CliResult:
    args: Tuple[str, ...]
    returncode: Optional[int]
    stdout: str
    stderr: str
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    @property
    def command_line(self) -> str:
        return shlex.join(self.args)


class CliRunner:
    """
    Thin async subprocess wrapper.

    It intentionally:
    - Does NOT retry
    - Does NOT interpret stdout
    - Does NOT raise for non-zero exits
    """

    def __init__(self, timeout_seconds: Optional[float] = None, log_output: bool = True):
        self.timeout_seconds = timeout_seconds
        self.log_output = log_output

    async def run(self, args: Sequence[str]) -> CliResult:
        argv = tuple(str(a) for a in args)
        command_line = shlex.join(argv)

        logger.debug("cli_path_env", path=os.environ.get("PATH", ""))
        logger.info("cli_command_started", command=command_line)

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            logger.error("cli_command_spawn_failed", command=command_line, error=str(exc))
            return CliResult(args=argv, returncode=None, stdout="", stderr=str(exc))

        try:
            stdout_b, stderr_b = await asyncio.wait_for(process.communicate(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            process.kill()
            # reap; drains whatever is still in the pipes
            stdout_b, stderr_b = await process.communicate()
            logger.error(
                "cli_command_timed_out",
                command=command_line,
                timeout_seconds=self.timeout_seconds,
            )
            return CliResult(
                args=argv,
                returncode=process.returncode,
                stdout=_decode(stdout_b),
                stderr=_decode(stderr_b),
                timed_out=True,
            )
        except asyncio.CancelledError:
            # do not leave an orphan behind
            if process.returncode is None:
                process.kill()
                await process.wait()
            raise

        result = CliResult(
            args=argv,
            returncode=process.returncode,
            stdout=_decode(stdout_b),
            stderr=_decode(stderr_b),
        )
        self._log_result(result)
        return result

    def _log_result(self, result: CliResult) -> None:
        if self.log_output:
            logger.info(
                "cli_command_stdout",
                command=result.command_line,
                stdout=result.stdout if result.stdout.strip() else "(no output)",
            )
            if result.stderr.strip():
                logger.warning("cli_command_stderr", command=result.command_line, stderr=result.stderr)

        if result.returncode != 0:
            logger.error(
                "cli_command_failed",
                command=result.command_line,
                returncode=result.returncode,
            )
        else:
            logger.info("cli_command_succeeded", command=result.command_line)


def _decode(raw: Optional[bytes]) -> str:
    return (raw or b"").decode("utf-8", errors="replace")
