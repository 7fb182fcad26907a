"""Runner that executes a partition with the newman CLI.

The partition document is written to a temporary directory, newman is
run with its JSON reporter exporting next to it, and the report's
collection copy and executions become the ExecutionResult. Newman exits
non-zero when assertions fail, so the exit code alone is not treated as
a run failure; a missing report or a run-level error is.
"""

from __future__ import annotations

import asyncio
import json
import shlex
import tempfile
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from splitrun.errors import RunError
from splitrun.models.result import ExecutionResult
from splitrun.runners.base import BaseRunner

logger = structlog.get_logger("splitrun")


def _error_message(error: Any) -> str:
    if isinstance(error, dict):
        return str(error.get("message") or error.get("name") or error)
    return str(error)


class NewmanRunner(BaseRunner):
    """Runs a collection document through `newman run`."""

    def __init__(
        self,
        command: str = "newman",
        timeout_seconds: float | None = None,
        extra_args: list[str] | None = None,
    ) -> None:
        self._command = command
        self._timeout_seconds = timeout_seconds
        self._extra_args = list(extra_args or [])

    def runner_name(self) -> str:
        return "newman"

    def build_argv(self, collection_path: Path, report_path: Path, reporter: str) -> list[str]:
        return [
            *shlex.split(self._command),
            "run",
            str(collection_path),
            "--reporters",
            reporter,
            f"--reporter-{reporter}-export",
            str(report_path),
            *self._extra_args,
        ]

    async def run(
        self,
        collection: dict[str, Any],
        reporter: str = "json",
    ) -> ExecutionResult:
        if reporter != "json":
            raise RunError(f"The newman runner only reads the json reporter, not '{reporter}'")

        name = collection.get("info", {}).get("name", "?")
        log = logger.bind(runner="newman", collection=name)

        with tempfile.TemporaryDirectory(prefix="splitrun_") as tmpdir:
            collection_path = Path(tmpdir) / "collection.json"
            report_path = Path(tmpdir) / "report.json"
            collection_path.write_text(json.dumps(collection), encoding="utf-8")

            argv = self.build_argv(collection_path, report_path, reporter)
            log.debug("newman_started", argv=argv)
            returncode, stderr = await self._exec(argv)
            log.debug("newman_finished", returncode=returncode)

            if not report_path.exists():
                detail = stderr.strip() or "no output"
                raise RunError(
                    f"newman exited with code {returncode} without writing a report: {detail}"
                )

            try:
                report = json.loads(report_path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as exc:
                raise RunError(f"newman wrote an unreadable report: {exc}") from exc

        return self.parse_report(report)

    async def _exec(self, argv: list[str]) -> tuple[int, str]:
        """Run newman and return (returncode, stderr text)."""
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise RunError(f"newman executable not found: '{self._command}'") from exc

        try:
            _, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self._timeout_seconds
            )
        except TimeoutError:
            if process.returncode is None:
                process.kill()
            await process.wait()
            raise RunError(
                f"newman did not finish within {self._timeout_seconds}s"
            ) from None
        except asyncio.CancelledError:
            if process.returncode is None:
                process.kill()
            await process.wait()
            raise

        return process.returncode or 0, stderr.decode("utf-8", errors="replace")

    @staticmethod
    def parse_report(report: dict[str, Any]) -> ExecutionResult:
        """Convert a newman JSON report into an ExecutionResult.

        Raises:
            RunError: If the report records a run-level error or lacks
                the collection copy.
        """
        run = report.get("run") or {}
        if run.get("error"):
            raise RunError(f"newman run failed: {_error_message(run['error'])}")

        try:
            return ExecutionResult.model_validate(
                {
                    "collection": report["collection"],
                    "executions": run.get("executions") or [],
                }
            )
        except (KeyError, ValidationError) as exc:
            raise RunError(f"newman report is malformed: {exc}") from exc
