"""Process a GitHub webhook payload."""

import json
from typing import TextIO

import click

from monosync.cli.commands.sync_cmd import report_sync_result
from monosync.cli.ensure import Ensure
from monosync.core.context import SyncContext
from monosync.core.events import handle_event


@click.command("handle-event")
@click.argument("event_name", metavar="EVENT")
@click.argument("payload_file", type=click.File("r", encoding="utf-8"))
@click.pass_obj
def handle_event_cmd(ctx: SyncContext, event_name: str, payload_file: TextIO) -> None:
    """Sync the PR a webhook EVENT refers to.

    PAYLOAD_FILE is the JSON webhook body ("-" reads stdin). EVENT is the
    X-GitHub-Event header value, e.g. pull_request, push or status.
    """
    try:
        payload = json.load(payload_file)
    except json.JSONDecodeError as e:
        Ensure.fail(f"Payload is not valid JSON: {e}")
    Ensure.invariant(isinstance(payload, dict), "Payload must be a JSON object")

    try:
        result = handle_event(ctx, event_name, payload)
    except ValueError as e:
        Ensure.fail(str(e))
    report_sync_result(result)
