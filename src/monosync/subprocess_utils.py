"""Subprocess helpers for the gh and git command line tools."""

import logging
import subprocess
import time
from pathlib import Path

logger = logging.getLogger(__name__)


def run_subprocess_with_context(
    cmd: list[str],
    *,
    operation_context: str,
    cwd: Path | None = None,
    input_text: str | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a command, raising RuntimeError with context when it fails.

    Args:
        cmd: Command and arguments to execute
        operation_context: Human description used in the error message
        cwd: Working directory for the command (None for the current one)
        input_text: Optional text piped to stdin

    Returns:
        CompletedProcess with captured stdout/stderr

    Raises:
        RuntimeError: If the command exits non-zero, with stderr included
        FileNotFoundError: If the executable is not installed
    """
    logger.debug("Running: %s", " ".join(cmd))
    start = time.monotonic()
    result = subprocess.run(
        cmd,
        cwd=cwd,
        input=input_text,
        capture_output=True,
        text=True,
        check=False,
    )
    logger.debug(
        "Finished in %.2fs (exit %d): %s", time.monotonic() - start, result.returncode, cmd[0]
    )

    if result.returncode != 0:
        stderr = result.stderr.strip()
        msg = f"Failed to {operation_context}: {' '.join(cmd[:3])} exited {result.returncode}"
        if stderr:
            msg = f"{msg}\n{stderr}"
        raise RuntimeError(msg)

    return result


def execute_gh_command(cmd: list[str], cwd: Path | None = None) -> str:
    """Execute a gh CLI command and return stdout.

    Raises:
        RuntimeError: If command fails with enriched error context
        FileNotFoundError: If gh is not installed
    """
    result = run_subprocess_with_context(
        cmd,
        operation_context="execute gh command",
        cwd=cwd,
    )
    return result.stdout
