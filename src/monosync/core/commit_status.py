"""Aggregate the CI status of a primary PR onto its secondary."""

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor

from monosync.core.context import SyncContext
from monosync.gateway.github.types import (
    CommitStatusState,
    PRNotFound,
    PullRequestInfo,
    PullRequestRef,
)

logger = logging.getLogger(__name__)


def aggregate_states(states: Iterable[str]) -> CommitStatusState:
    """Collapse commit status states into the most severe one.

    ERROR > FAILURE > EXPECTED/PENDING > success. No states means success.
    """
    normalized = {state.upper() for state in states}
    if "ERROR" in normalized:
        return "error"
    if "FAILURE" in normalized:
        return "failure"
    if "EXPECTED" in normalized or "PENDING" in normalized:
        return "pending"
    return "success"


def sync_pr_statuses(
    ctx: SyncContext,
    primary: PullRequestRef,
    secondary: PullRequestRef,
    *,
    is_aggregate_context: Callable[[str], bool] | None = None,
) -> bool:
    """Write the primary head's aggregated status onto the secondary head.

    Aggregate contexts on the primary are left out so two partners never feed
    each other's aggregate back. Writes only when the secondary has no
    aggregate yet or its state differs.

    Args:
        is_aggregate_context: Predicate recognizing aggregate contexts; defaults
            to ctx.config.is_aggregate_context

    Returns:
        True if a status was written
    """
    matches_aggregate = is_aggregate_context or ctx.config.is_aggregate_context

    primary_info = ctx.github.pr.get_pr(primary.repo_name, primary.number)
    secondary_info = ctx.github.pr.get_pr(secondary.repo_name, secondary.number)
    if isinstance(primary_info, PRNotFound) or isinstance(secondary_info, PRNotFound):
        logger.debug("Skipping status sync: %s or %s not found", primary, secondary)
        return False

    with ThreadPoolExecutor(max_workers=2) as executor:
        primary_future = executor.submit(
            ctx.github.repo.get_commit_statuses, primary.repo_name, primary_info.head_sha
        )
        secondary_future = executor.submit(
            ctx.github.repo.get_commit_statuses, secondary.repo_name, secondary_info.head_sha
        )
        primary_statuses = primary_future.result()
        secondary_statuses = secondary_future.result()

    aggregated = aggregate_states(
        status.state for status in primary_statuses if not matches_aggregate(status.context)
    )
    previous = next(
        (status.state for status in secondary_statuses if matches_aggregate(status.context)),
        None,
    )

    if previous is not None and previous.lower() == aggregated:
        logger.debug("Aggregate status of %s unchanged (%s)", secondary, aggregated)
        return False

    context = ctx.config.aggregate_status_context(primary.repo_name)
    ctx.github.repo.set_commit_status(
        secondary.repo_name,
        secondary_info.head_sha,
        context=context,
        state=aggregated,
        description=f"Combined status of {primary}",
    )
    logger.debug("Set %s=%s on %s", context, aggregated, secondary)
    return True


def create_placeholder_status(ctx: SyncContext, pr: PullRequestInfo, context: str) -> None:
    """Mark a PR head as pending under `context` until a real status arrives."""
    ctx.github.repo.set_commit_status(
        pr.repo_name,
        pr.head_sha,
        context=context,
        state="pending",
        description="Waiting for sync",
    )
