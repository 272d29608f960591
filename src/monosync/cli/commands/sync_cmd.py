"""Sync one pull request with its partner."""

import click

from monosync.cli.ensure import Ensure
from monosync.core.context import SyncContext
from monosync.core.sync import SyncRequest, SyncResult, sync_pr
from monosync.output import machine_output, user_output


def format_sync_result(result: SyncResult) -> str:
    """One-line human summary of a sync outcome."""
    if result.action == "no_relationship":
        return "Repository has no configured parent or children; nothing to do"
    if result.action == "no_pull_request":
        return "No matching pull request found"
    if result.action == "synced":
        assert result.pair is not None
        changes = ", ".join(result.changes) if result.changes else "already in sync"
        return f"Synced {result.pair.primary} -> {result.pair.secondary} ({changes})"
    if result.action == "created_secondary":
        return f"Created secondary {result.secondary_pr} for {result.pr}"
    if result.action == "secondary_stopped":
        assert result.stop is not None
        return f"Did not create a secondary PR for {result.pr}: {result.stop.message}"
    if result.action == "no_candidate":
        return f"{result.pr} does not touch any related repository"
    if result.action == "synced_children":
        if not result.child_repos:
            return f"{result.pr} merged; no child repository needed changes"
        return f"Replayed {result.pr} into {', '.join(result.child_repos)}"
    return f"{result.pr} is closed; nothing to sync"


def report_sync_result(result: SyncResult | None) -> None:
    if result is None:
        user_output("Event skipped")
        return
    user_output(format_sync_result(result))
    machine_output(result.action)


@click.command("sync")
@click.argument("repo_name", metavar="REPO")
@click.option("--number", "-n", type=int, default=None, help="Pull request number")
@click.option(
    "--branch",
    "-b",
    "branch_names",
    multiple=True,
    help="Head branch of an open PR; repeat to try several in order",
)
@click.pass_obj
def sync_cmd(
    ctx: SyncContext, repo_name: str, number: int | None, branch_names: tuple[str, ...]
) -> None:
    """Sync a pull request in REPO (owner/repo) with its partner."""
    Ensure.invariant(
        (number is None) != (not branch_names),
        "Pass exactly one of --number or --branch",
    )
    Ensure.invariant("/" in repo_name, f"Expected owner/repo, got '{repo_name}'")

    request = SyncRequest(repo_name=repo_name, number=number, branch_names=branch_names)
    report_sync_result(sync_pr(ctx, request))
