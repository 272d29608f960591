"""Sync orchestration: keep a PR and its partner in step.

With a partner, sync runs status -> merge -> open state -> commits ->
title/body, stopping once the pair is merged or closed. Without one, an open
PR gets a secondary PR created for it and a merged parent PR has its changes
replayed into the touched child repositories.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Literal

from monosync.core.commit_status import sync_pr_statuses
from monosync.core.context import SyncContext
from monosync.core.metadata import (
    get_synced_from,
    is_replayed_commit,
    parse_pr_body_meta,
)
from monosync.core.partner import PartnerPR, get_partner_pr, get_secondary_candidate
from monosync.core.relationships import path_is_within
from monosync.core.secondary_pr import (
    PipelineStop,
    create_secondary_pr,
    public_body_from_meta,
    public_title_from_meta,
)
from monosync.gateway.commit_copier.types import CopySource, CopyTarget
from monosync.gateway.github.types import (
    CommitInfo,
    PRNotFound,
    PullRequestInfo,
    PullRequestRef,
)

logger = logging.getLogger(__name__)

SyncAction = Literal[
    "no_relationship",
    "no_pull_request",
    "synced",
    "created_secondary",
    "secondary_stopped",
    "no_candidate",
    "synced_children",
    "inactive",
]


@dataclass(frozen=True)
class SyncRequest:
    """Which PR to sync: an explicit number, or the first open PR on one of the branches."""

    repo_name: str
    number: int | None = None
    branch_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class SyncPair:
    primary: PullRequestRef
    secondary: PullRequestRef


@dataclass(frozen=True)
class SyncResult:
    """Outcome of one sync_pr() call.

    changes lists the steps that modified something, in the order they ran.
    """

    action: SyncAction
    pr: PullRequestRef | None = None
    pair: SyncPair | None = None
    secondary_pr: PullRequestRef | None = None
    stop: PipelineStop | None = None
    child_repos: tuple[str, ...] = ()
    changes: tuple[str, ...] = ()


def make_sync_pair(pr: PullRequestRef, partner: PartnerPR) -> SyncPair:
    if partner.role == "primary":
        return SyncPair(primary=partner.ref, secondary=pr)
    return SyncPair(primary=pr, secondary=partner.ref)


def resolve_pr_number(ctx: SyncContext, request: SyncRequest) -> int | None:
    if request.number is not None:
        return request.number

    for branch in request.branch_names:
        pr = ctx.github.pr.get_pr_for_branch(request.repo_name, branch, include_closed=False)
        if not isinstance(pr, PRNotFound):
            return pr.number
    return None


def sync_pr(ctx: SyncContext, request: SyncRequest) -> SyncResult:
    """Bring a PR and its partner in the related repository into agreement.

    Callers serialize calls per PR (see events.sync_queue_key); nothing here
    locks.
    """
    if not ctx.relationships.has_relationship(request.repo_name):
        logger.debug("%s has no configured relationship", request.repo_name)
        return SyncResult(action="no_relationship")

    number = resolve_pr_number(ctx, request)
    if number is None:
        logger.debug(
            "No open PR in %s for branches %s", request.repo_name, list(request.branch_names)
        )
        return SyncResult(action="no_pull_request")

    pr = PullRequestRef(repo_name=request.repo_name, number=number)
    partner = get_partner_pr(ctx, pr)
    if partner is not None:
        pair = make_sync_pair(pr, partner)
        changes = run_pair_sync(ctx, pair)
        return SyncResult(action="synced", pr=pr, pair=pair, changes=changes)

    info = ctx.github.pr.get_pr(pr.repo_name, pr.number)
    if isinstance(info, PRNotFound):
        return SyncResult(action="no_pull_request", pr=pr)

    if info.is_open:
        candidate = get_secondary_candidate(ctx, pr)
        if candidate is None:
            return SyncResult(action="no_candidate", pr=pr)
        result = create_secondary_pr(ctx, pr, candidate)
        if isinstance(result, PipelineStop):
            return SyncResult(action="secondary_stopped", pr=pr, stop=result)
        assert result.secondary_pr is not None
        return SyncResult(
            action="created_secondary",
            pr=pr,
            pair=SyncPair(primary=pr, secondary=result.secondary_pr.ref),
            secondary_pr=result.secondary_pr.ref,
        )

    if info.is_merged and ctx.relationships.has_children(pr.repo_name):
        child_repos = sync_child_repos(ctx, info)
        return SyncResult(action="synced_children", pr=pr, child_repos=child_repos)

    return SyncResult(action="inactive", pr=pr)


def run_pair_sync(ctx: SyncContext, pair: SyncPair) -> tuple[str, ...]:
    """Run the pair steps in dependency order; returns names of steps that changed something."""
    changes: list[str] = []

    if sync_pr_statuses(ctx, pair.primary, pair.secondary):
        changes.append("status")

    if sync_merge(ctx, pair):
        logger.debug("%s/%s merged; nothing further to sync", pair.primary, pair.secondary)
        return tuple(changes)

    if not sync_open_state(ctx, pair):
        logger.debug("%s/%s closed; nothing further to sync", pair.primary, pair.secondary)
        return tuple(changes)

    if sync_commits(ctx, pair):
        changes.append("commits")
    if sync_title_and_body(ctx, pair):
        changes.append("title_and_body")
    return tuple(changes)


def _fetch_pair(
    ctx: SyncContext, pair: SyncPair
) -> tuple[PullRequestInfo, PullRequestInfo] | None:
    primary = ctx.github.pr.get_pr(pair.primary.repo_name, pair.primary.number)
    secondary = ctx.github.pr.get_pr(pair.secondary.repo_name, pair.secondary.number)
    if isinstance(primary, PRNotFound) or isinstance(secondary, PRNotFound):
        logger.debug("%s or %s disappeared during sync", pair.primary, pair.secondary)
        return None
    return primary, secondary


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


def build_co_author_trailers(pr: PullRequestInfo, commits: list[CommitInfo]) -> list[str]:
    """`Co-authored-by:` trailers for commit authors other than the PR author, deduplicated."""
    trailers: list[str] = []
    for commit in commits:
        if commit.author_login is not None and commit.author_login == pr.author_login:
            continue
        trailer = f"Co-authored-by: {commit.author_name} <{commit.author_email}>"
        if trailer not in trailers:
            trailers.append(trailer)
    return trailers


def merge_pull_request(ctx: SyncContext, pr: PullRequestInfo, *, merged_url: str) -> None:
    """Squash-merge `pr`, crediting every commit author and linking the merged partner."""
    commits = ctx.github.pr.get_pr_commits(pr.repo_name, pr.number)
    ctx.github.pr.merge_pr(
        pr.repo_name,
        pr.number,
        commit_title=f"{pr.title} ({merged_url})",
        commit_message="\n".join(build_co_author_trailers(pr, commits)),
    )
    logger.debug("Merged %s following %s", pr.ref, merged_url)


def sync_merge(ctx: SyncContext, pair: SyncPair) -> bool:
    """Merge the open side when its partner was merged.

    Returns:
        True if either side is merged
    """
    fetched = _fetch_pair(ctx, pair)
    if fetched is None:
        return False
    primary, secondary = fetched

    if primary.is_merged and secondary.is_open:
        merge_pull_request(ctx, secondary, merged_url=primary.url)
    elif secondary.is_merged and primary.is_open:
        merge_pull_request(ctx, primary, merged_url=secondary.url)

    return primary.is_merged or secondary.is_merged


# ---------------------------------------------------------------------------
# Open state
# ---------------------------------------------------------------------------


def sync_open_state(ctx: SyncContext, pair: SyncPair) -> bool:
    """Make both sides agree on open/closed.

    When exactly one side is closed, the most recent action wins: if it was
    closed after the other side's last update, the other side is closed too;
    otherwise the closed side is reopened.

    Returns:
        True if the pair is open afterwards
    """
    fetched = _fetch_pair(ctx, pair)
    if fetched is None:
        return False
    primary, secondary = fetched

    if primary.is_open and secondary.is_open:
        return True
    if not primary.is_open and not secondary.is_open:
        return False

    closed, other = (secondary, primary) if primary.is_open else (primary, secondary)
    if closed.closed_at is None or other.updated_at is None or closed.closed_at > other.updated_at:
        ctx.github.pr.set_pr_state(other.repo_name, other.number, "closed")
        logger.debug("Closed %s to follow %s", other.ref, closed.ref)
        return False

    ctx.github.pr.set_pr_state(closed.repo_name, closed.number, "open")
    logger.debug("Reopened %s to follow %s", closed.ref, other.ref)
    return True


# ---------------------------------------------------------------------------
# Commits
# ---------------------------------------------------------------------------


def _mirror_commits(
    ctx: SyncContext,
    source: PullRequestInfo,
    target: PullRequestInfo,
    *,
    source_sub_path: str | None,
    target_sub_path: str | None,
    generic_message: bool,
) -> bool:
    """Replay source commits the target has not seen yet onto the target's head branch.

    Only commits after the last one already replayed onto the target are
    considered. Earlier unsynced commits were part of a previous replay range
    and were skipped because they touch nothing in scope.
    """
    source_commits = ctx.github.pr.get_pr_commits(source.repo_name, source.number)
    target_commits = ctx.github.pr.get_pr_commits(target.repo_name, target.number)
    synced = {get_synced_from(commit.message) for commit in target_commits}

    start = 0
    for index, commit in enumerate(source_commits):
        if f"{source.repo_name}@{commit.sha}" in synced:
            start = index + 1

    first_unsynced: int | None = None
    for index in range(start, len(source_commits)):
        if not is_replayed_commit(source_commits[index].message):
            first_unsynced = index
            break

    if first_unsynced is None:
        return False

    before_sha = source_commits[first_unsynced - 1].sha if first_unsynced > 0 else source.base_sha
    result = ctx.commit_copier.copy_commits(
        CopySource(
            repo_name=source.repo_name,
            before_sha=before_sha,
            after_sha=source.head_sha,
            sub_path=source_sub_path,
        ),
        CopyTarget(
            repo_name=target.head_repo_name,
            branch=target.head_ref,
            sha=target.head_sha,
            sub_path=target_sub_path,
            generic_message=generic_message,
        ),
    )
    logger.debug(
        "Replayed %d commit(s) from %s onto %s", len(result.copied_shas), source.ref, target.ref
    )
    return bool(result.copied_shas)


def sync_commits(ctx: SyncContext, pair: SyncPair) -> bool:
    """Mirror unsynced commits in both directions.

    Commits from a parent are scoped to the child's subdirectory and land
    with a generic message; commits from a child are prefixed with it.

    Returns:
        True if anything was replayed
    """
    fetched = _fetch_pair(ctx, pair)
    if fetched is None:
        return False
    primary, secondary = fetched

    relationship = ctx.relationships.get_relationship(primary.repo_name, secondary.repo_name)
    if relationship is None:
        return False
    if relationship == "parent":
        parent, child = primary, secondary
    else:
        parent, child = secondary, primary
    child_repo = ctx.relationships.get_child(parent.repo_name, child.repo_name)
    assert child_repo is not None

    copied_down = _mirror_commits(
        ctx,
        parent,
        child,
        source_sub_path=child_repo.path,
        target_sub_path=None,
        generic_message=True,
    )
    copied_up = _mirror_commits(
        ctx,
        child,
        parent,
        source_sub_path=None,
        target_sub_path=child_repo.path,
        generic_message=False,
    )
    return copied_down or copied_up


# ---------------------------------------------------------------------------
# Title and body
# ---------------------------------------------------------------------------


def sync_title_and_body(ctx: SyncContext, pair: SyncPair) -> bool:
    """Apply the primary's `publicTitle`/`publicBody` to a child secondary.

    Only acts when the primary lives in the parent repository.

    Returns:
        True if the secondary was updated
    """
    relationship = ctx.relationships.get_relationship(
        pair.primary.repo_name, pair.secondary.repo_name
    )
    if relationship != "parent":
        return False

    fetched = _fetch_pair(ctx, pair)
    if fetched is None:
        return False
    primary, secondary = fetched

    meta = parse_pr_body_meta(primary.body)
    title = public_title_from_meta(meta, primary.title) or primary.title
    body = public_body_from_meta(meta)
    if body is None:
        body = secondary.body

    if title == secondary.title and body == secondary.body:
        return False

    ctx.github.pr.update_pr_title_and_body(secondary.repo_name, secondary.number, title, body)
    logger.debug("Updated title/body of %s from %s", secondary.ref, primary.ref)
    return True


# ---------------------------------------------------------------------------
# Merged parent PRs
# ---------------------------------------------------------------------------


def sync_child_repos(ctx: SyncContext, parent_pr: PullRequestInfo) -> tuple[str, ...]:
    """Replay a merged parent PR into the base branch of every child it touched.

    Returns:
        Names of child repositories that received commits
    """
    if parent_pr.merge_commit_sha is None:
        logger.debug("%s has no merge commit", parent_pr.ref)
        return ()

    children = ctx.relationships.get_children(parent_pr.repo_name)
    with ThreadPoolExecutor(max_workers=len(children) + 1) as executor:
        files_future = executor.submit(
            ctx.github.pr.get_pr_files, parent_pr.repo_name, parent_pr.number
        )
        head_futures = {
            child.name: executor.submit(
                ctx.github.repo.get_branch_head_sha, child.name, parent_pr.base_ref
            )
            for child in children
        }
        changed_files = files_future.result()
        child_heads = {name: future.result() for name, future in head_futures.items()}

    synced: list[str] = []
    for child in children:
        if not any(path_is_within(file_path, child.path) for file_path in changed_files):
            continue
        child_head = child_heads[child.name]
        if child_head is None:
            logger.debug("%s has no branch %s", child.name, parent_pr.base_ref)
            continue

        result = ctx.commit_copier.copy_commits(
            CopySource(
                repo_name=parent_pr.repo_name,
                before_sha=parent_pr.base_sha,
                after_sha=parent_pr.merge_commit_sha,
                sub_path=child.path,
            ),
            CopyTarget(
                repo_name=child.name,
                branch=parent_pr.base_ref,
                sha=child_head,
                generic_message=True,
            ),
        )
        if result.copied_shas:
            synced.append(child.name)

    return tuple(synced)
