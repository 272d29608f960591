"""Thin wrapper around `gh api` shared by the production sub-gateways."""

import json
from typing import Any

from monosync.gateway.github.parsing import is_not_found_error
from monosync.gateway.github.retry import ShouldRetry, with_github_retry
from monosync.gateway.time.abc import Time
from monosync.subprocess_utils import execute_gh_command


def build_gh_api_command(
    path: str,
    *,
    method: str | None = None,
    fields: dict[str, str] | None = None,
    typed_fields: dict[str, str] | None = None,
    paginate: bool = False,
    jq: str | None = None,
) -> list[str]:
    """Build a `gh api` command line.

    fields are sent verbatim as strings (-f); typed_fields let gh convert
    booleans and numbers (-F).
    """
    cmd = ["gh", "api", path]
    if method is not None:
        cmd.extend(["-X", method])
    if paginate:
        cmd.append("--paginate")
    for key, value in (fields or {}).items():
        cmd.extend(["-f", f"{key}={value}"])
    for key, value in (typed_fields or {}).items():
        cmd.extend(["-F", f"{key}={value}"])
    if jq is not None:
        cmd.extend(["--jq", jq])
    return cmd


def gh_api_json(cmd: list[str]) -> Any:
    """Run a gh api command and parse its JSON output (None for empty output)."""
    stdout = execute_gh_command(cmd)
    if not stdout.strip():
        return None
    return json.loads(stdout)


def gh_api_json_lines(cmd: list[str]) -> list[Any]:
    """Run a gh api command whose --jq emits one JSON document per line."""
    stdout = execute_gh_command(cmd)
    return [json.loads(line) for line in stdout.splitlines() if line.strip()]


def read_with_retry(time: Time, operation_name: str, cmd: list[str]) -> Any | None:
    """Run an idempotent GET, retrying transient failures.

    Returns:
        Parsed JSON, or None when the resource does not exist (HTTP 404)
    """

    def attempt() -> Any | None:
        try:
            return gh_api_json(cmd)
        except RuntimeError as e:
            if is_not_found_error(e):
                return None
            raise ShouldRetry(str(e)) from e

    try:
        return with_github_retry(time, operation_name, attempt)
    except ShouldRetry as e:
        msg = f"Failed to {operation_name}: {e}"
        raise RuntimeError(msg) from e
