"""Route GitHub webhook events to sync_pr().

The caller receives webhooks and runs handle_event() for each, serialized per
sync_queue_key() so at most one sync per PR is in flight.
"""

import logging
from collections.abc import Mapping
from typing import Any

from monosync.core.context import SyncContext
from monosync.core.metadata import is_replayed_commit
from monosync.core.sync import SyncRequest, SyncResult, sync_pr
from monosync.gateway.github.types import PullRequestRef

logger = logging.getLogger(__name__)

BRANCH_REF_PREFIX = "refs/heads/"


def sync_queue_key(pr: PullRequestRef, prefix: str | None = None) -> str:
    """Key identifying one PR's sync queue: `[prefix-]<owner>/<repo>-<number>`."""
    key = f"{pr.repo_name}-{pr.number}"
    if prefix:
        return f"{prefix}-{key}"
    return key


def _repo_name(payload: Mapping[str, Any]) -> str:
    repository = payload.get("repository") or {}
    full_name = repository.get("full_name")
    if not isinstance(full_name, str):
        msg = "Event payload has no repository.full_name"
        raise ValueError(msg)
    return full_name


def push_has_copyable_commits(payload: Mapping[str, Any]) -> bool:
    """Check whether a push carries any commit that is not itself a replay."""
    return any(not is_replayed_commit(commit.get("message", "")) for commit in payload["commits"])


def handle_pull_request_event(ctx: SyncContext, payload: Mapping[str, Any]) -> SyncResult:
    number = payload["pull_request"]["number"]
    return sync_pr(ctx, SyncRequest(repo_name=_repo_name(payload), number=number))


def handle_push_event(ctx: SyncContext, payload: Mapping[str, Any]) -> SyncResult | None:
    repo_name = _repo_name(payload)
    ref = payload.get("ref", "")

    if payload.get("forced"):
        logger.warning("Skipping forced push to %s %s: force pushes are not synced", repo_name, ref)
        return None
    if payload.get("deleted") or not ref.startswith(BRANCH_REF_PREFIX):
        logger.debug("Skipping push to %s %s: not a branch update", repo_name, ref)
        return None
    if not push_has_copyable_commits(payload):
        logger.debug("Skipping push to %s %s: only replayed commits", repo_name, ref)
        return None

    branch = ref[len(BRANCH_REF_PREFIX) :]
    return sync_pr(ctx, SyncRequest(repo_name=repo_name, branch_names=(branch,)))


def handle_status_event(ctx: SyncContext, payload: Mapping[str, Any]) -> SyncResult:
    branches = tuple(branch["name"] for branch in payload.get("branches", []))
    return sync_pr(ctx, SyncRequest(repo_name=_repo_name(payload), branch_names=branches))


def handle_check_event(ctx: SyncContext, payload: Mapping[str, Any]) -> SyncResult | None:
    if "check_suite" in payload:
        check_suite = payload["check_suite"]
    else:
        check_suite = payload["check_run"]["check_suite"]
    head_branch = check_suite.get("head_branch")
    if not head_branch:
        logger.debug("Skipping check event without a head branch")
        return None
    return sync_pr(ctx, SyncRequest(repo_name=_repo_name(payload), branch_names=(head_branch,)))


def handle_event(
    ctx: SyncContext, event_name: str, payload: Mapping[str, Any]
) -> SyncResult | None:
    """Dispatch a webhook event by its X-GitHub-Event name.

    Returns:
        The sync result, or None when the event was skipped

    Raises:
        ValueError: If the payload lacks the repository it belongs to
    """
    if event_name == "pull_request":
        return handle_pull_request_event(ctx, payload)
    if event_name == "push":
        return handle_push_event(ctx, payload)
    if event_name == "status":
        return handle_status_event(ctx, payload)
    if event_name in ("check_suite", "check_run"):
        return handle_check_event(ctx, payload)

    logger.debug("Ignoring %s event", event_name)
    return None
