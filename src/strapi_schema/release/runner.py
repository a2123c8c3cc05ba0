"""
External process execution for the release workflows.

Every workflow step is one external command. Failing steps raise
ReleaseError carrying the exit code the CLI should terminate with.
"""

import subprocess
from collections.abc import Sequence
from pathlib import Path

from loguru import logger


class ReleaseError(Exception):
    """A release step failed; `exit_code` is propagated as the process exit status."""

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code or 1


class ProcessRunner:
    """Runs commands with subprocess, inheriting stdio unless output is captured."""

    def __init__(self, cwd: Path | None = None):
        self.cwd = cwd

    def run(self, args: Sequence[str], *, capture: bool = False) -> subprocess.CompletedProcess:
        logger.debug(f"$ {' '.join(args)}")
        return subprocess.run(
            list(args),
            cwd=self.cwd,
            capture_output=capture,
            text=True,
            check=False,
        )

    def check(self, args: Sequence[str], error_message: str) -> subprocess.CompletedProcess:
        """Run a command and raise ReleaseError with its exit code when it fails."""
        result = self.run(args)
        if result.returncode != 0:
            logger.error(f"{error_message} (exit code {result.returncode})")
            raise ReleaseError(error_message, exit_code=result.returncode)
        return result

    def output(self, args: Sequence[str], error_message: str) -> str:
        """Run a command and return its stripped stdout."""
        result = self.run(args, capture=True)
        if result.returncode != 0:
            logger.error(f"{error_message}: {(result.stderr or '').strip()}")
            raise ReleaseError(error_message, exit_code=result.returncode)
        return (result.stdout or "").strip()
