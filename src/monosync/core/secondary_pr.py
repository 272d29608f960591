"""Linear pipeline creating the secondary PR that mirrors a primary PR.

Each step: (SyncContext, SecondaryPRState) -> SecondaryPRState | PipelineStop

Steps run in order and stop at the first PipelineStop. Transport errors
propagate as RuntimeError. Nothing is rolled back: a secondary branch without
a PR is acceptable, and the next sync creates the PR from scratch again.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from functools import cache

from monosync.core.branch_naming import encode_secondary_branch_name
from monosync.core.commit_status import create_placeholder_status
from monosync.core.context import SyncContext
from monosync.core.metadata import (
    MATCH_TITLE_SENTINEL,
    parse_pr_body_meta,
    unescape_newlines,
)
from monosync.core.relationships import Relationship
from monosync.gateway.commit_copier.types import CopySource, CopyTarget
from monosync.gateway.github.types import PRNotFound, PullRequestInfo, PullRequestRef

logger = logging.getLogger(__name__)

AUTO_SYNC_LABEL_COLOR = "3399FF"
AUTO_SYNC_LABEL_DESCRIPTION = "Auto-generated sync PR"

# ---------------------------------------------------------------------------
# Data Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SecondaryPRState:
    """Immutable state threaded through the secondary PR pipeline.

    relationship describes the primary's repo relative to the secondary's:
    "parent" means the secondary is a child repository.
    """

    primary: PullRequestRef
    secondary_repo_name: str
    secondary_branch: str
    relationship: Relationship | None
    child_path: str | None
    primary_info: PullRequestInfo | None
    secondary_base_sha: str | None
    copied_shas: tuple[str, ...]
    secondary_pr: PullRequestInfo | None
    comment_posted: bool

    @property
    def secondary_is_child(self) -> bool:
        return self.relationship == "parent"


@dataclass(frozen=True)
class PipelineStop:
    """A precondition that was not met; the pipeline ends without error."""

    phase: str
    error_type: str
    message: str
    details: dict[str, str]


def _missing_state(phase: str, field: str) -> PipelineStop:
    return PipelineStop(
        phase=phase,
        error_type="missing_state",
        message=f"{field} was not resolved by an earlier step",
        details={"field": field},
    )


# ---------------------------------------------------------------------------
# Title and body
# ---------------------------------------------------------------------------


def public_title_from_meta(meta: dict[str, str], primary_title: str) -> str | None:
    """Title requested through `publicTitle`, or None when not set."""
    title = meta.get("publicTitle")
    if title is None:
        return None
    if title == MATCH_TITLE_SENTINEL:
        return primary_title
    return title


def public_body_from_meta(meta: dict[str, str]) -> str | None:
    body = meta.get("publicBody")
    if body is None:
        return None
    return unescape_newlines(body)


def build_sync_note(primary: PullRequestRef, secondary_branch: str, signature: str) -> str:
    """Body used when the primary PR does not provide one for its secondary."""
    return (
        f"This PR was generated automatically to sync changes from {primary}.\n\n"
        "If any supplemental changes are needed in this repo, please make them here "
        f"by pushing to the `{secondary_branch}` branch." + signature
    )


def build_secondary_title_and_body(
    primary_info: PullRequestInfo,
    *,
    secondary_is_child: bool,
    secondary_branch: str,
    signature: str,
) -> tuple[str, str]:
    """Title and body of a new secondary PR.

    A child secondary mirrors the primary's title. A parent secondary is
    public-facing, so it only uses what the primary's meta block asks for and
    otherwise falls back to a generic title.
    """
    meta = parse_pr_body_meta(primary_info.body)
    public_title = public_title_from_meta(meta, primary_info.title)
    public_body = public_body_from_meta(meta)
    note = build_sync_note(primary_info.ref, secondary_branch, signature)

    if secondary_is_child:
        title = public_title if public_title is not None else primary_info.title
    else:
        title = public_title if public_title is not None else f"Sync {primary_info.ref}"
    body = public_body if public_body is not None else note
    return title, body


def build_cross_link_comment(
    secondary_pr: PullRequestInfo, child_path: str, signature: str
) -> str:
    """Comment for a child primary pointing at its new parent PR.

    Title and body of the parent PR are only set when it is opened; later
    edits to this PR's meta block are not carried over.
    """
    return (
        f"A secondary PR has been opened at {secondary_pr.url} "
        f"(the `{child_path}` directory of {secondary_pr.repo_name}). "
        "Its commits and state will be kept in sync automatically.\n\n"
        "Its title and body were set when it was opened, from the "
        "`publicTitle` and `publicBody` meta fields of this PR if present. "
        f"Later changes to them are not carried over; edit {secondary_pr.ref} "
        "directly instead." + signature
    )


# ---------------------------------------------------------------------------
# Pipeline Steps
# ---------------------------------------------------------------------------

SecondaryPRStep = Callable[[SyncContext, SecondaryPRState], SecondaryPRState | PipelineStop]


def resolve_relationship(
    ctx: SyncContext, state: SecondaryPRState
) -> SecondaryPRState | PipelineStop:
    """Determine direction and the child's subdirectory in the parent."""
    primary_repo = state.primary.repo_name
    relationship = ctx.relationships.get_relationship(primary_repo, state.secondary_repo_name)
    if relationship is None:
        return PipelineStop(
            phase="resolve_relationship",
            error_type="no_relationship",
            message=f"{primary_repo} and {state.secondary_repo_name} are not related",
            details={"primary": str(state.primary), "secondary": state.secondary_repo_name},
        )

    if relationship == "parent":
        child = ctx.relationships.get_child(primary_repo, state.secondary_repo_name)
    else:
        child = ctx.relationships.get_child(state.secondary_repo_name, primary_repo)
    assert child is not None

    return replace(state, relationship=relationship, child_path=child.path)


def fetch_primary_details(
    ctx: SyncContext, state: SecondaryPRState
) -> SecondaryPRState | PipelineStop:
    primary_info = ctx.github.pr.get_pr(state.primary.repo_name, state.primary.number)
    if isinstance(primary_info, PRNotFound):
        return PipelineStop(
            phase="fetch_primary_details",
            error_type="primary_not_found",
            message=f"{state.primary} no longer exists",
            details={"primary": str(state.primary)},
        )
    return replace(state, primary_info=primary_info)


def resolve_secondary_base(
    ctx: SyncContext, state: SecondaryPRState
) -> SecondaryPRState | PipelineStop:
    """Find the primary's base branch in the secondary repository."""
    if state.primary_info is None:
        return _missing_state("resolve_secondary_base", "primary_info")

    base_ref = state.primary_info.base_ref
    base_sha = ctx.github.repo.get_branch_head_sha(state.secondary_repo_name, base_ref)
    if base_sha is None:
        return PipelineStop(
            phase="resolve_secondary_base",
            error_type="missing_base_branch",
            message=f"Branch '{base_ref}' does not exist in {state.secondary_repo_name}",
            details={"branch": base_ref, "repo": state.secondary_repo_name},
        )
    return replace(state, secondary_base_sha=base_sha)


def create_secondary_branch(
    ctx: SyncContext, state: SecondaryPRState
) -> SecondaryPRState | PipelineStop:
    if state.secondary_base_sha is None:
        return _missing_state("create_secondary_branch", "secondary_base_sha")

    ctx.github.repo.create_branch(
        state.secondary_repo_name, state.secondary_branch, state.secondary_base_sha
    )
    logger.debug(
        "Created %s:%s at %s",
        state.secondary_repo_name,
        state.secondary_branch,
        state.secondary_base_sha,
    )
    return state


def replay_commits(ctx: SyncContext, state: SecondaryPRState) -> SecondaryPRState | PipelineStop:
    """Replay the primary's commits onto the new branch, mapping the child subtree."""
    if state.primary_info is None:
        return _missing_state("replay_commits", "primary_info")
    if state.secondary_base_sha is None:
        return _missing_state("replay_commits", "secondary_base_sha")

    source = CopySource(
        repo_name=state.primary.repo_name,
        before_sha=state.primary_info.base_sha,
        after_sha=state.primary_info.head_sha,
        sub_path=state.child_path if state.secondary_is_child else None,
    )
    target = CopyTarget(
        repo_name=state.secondary_repo_name,
        branch=state.secondary_branch,
        sha=state.secondary_base_sha,
        sub_path=None if state.secondary_is_child else state.child_path,
    )
    result = ctx.commit_copier.copy_commits(source, target)
    if not result.copied_shas:
        return PipelineStop(
            phase="replay_commits",
            error_type="nothing_copied",
            message=f"No commits of {state.primary} apply to {state.secondary_repo_name}",
            details={"branch": state.secondary_branch},
        )
    return replace(state, copied_shas=result.copied_shas)


def open_pull_request(
    ctx: SyncContext, state: SecondaryPRState
) -> SecondaryPRState | PipelineStop:
    if state.primary_info is None:
        return _missing_state("open_pull_request", "primary_info")

    title, body = build_secondary_title_and_body(
        state.primary_info,
        secondary_is_child=state.secondary_is_child,
        secondary_branch=state.secondary_branch,
        signature=ctx.config.bot_signature,
    )
    secondary_pr = ctx.github.pr.create_pr(
        state.secondary_repo_name,
        head=state.secondary_branch,
        base=state.primary_info.base_ref,
        title=title,
        body=body,
    )
    logger.debug("Opened %s for %s", secondary_pr.ref, state.primary)
    return replace(state, secondary_pr=secondary_pr)


def mark_secondary_pending(
    ctx: SyncContext, state: SecondaryPRState
) -> SecondaryPRState | PipelineStop:
    """Hold the new head at pending until the primary's statuses are aggregated."""
    if state.secondary_pr is None:
        return _missing_state("mark_secondary_pending", "secondary_pr")

    create_placeholder_status(
        ctx,
        state.secondary_pr,
        ctx.config.aggregate_status_context(state.primary.repo_name),
    )
    return state


def label_pull_request(
    ctx: SyncContext, state: SecondaryPRState
) -> SecondaryPRState | PipelineStop:
    if state.secondary_pr is None:
        return _missing_state("label_pull_request", "secondary_pr")

    label = ctx.config.auto_sync_label
    ctx.github.repo.ensure_label(
        state.secondary_repo_name,
        label,
        color=AUTO_SYNC_LABEL_COLOR,
        description=AUTO_SYNC_LABEL_DESCRIPTION,
    )
    ctx.github.issue.add_labels(state.secondary_repo_name, state.secondary_pr.number, [label])
    return state


def post_cross_link_comment(
    ctx: SyncContext, state: SecondaryPRState
) -> SecondaryPRState | PipelineStop:
    """Tell the primary's author where the public (parent) PR lives."""
    if state.secondary_is_child:
        return state
    if state.secondary_pr is None:
        return _missing_state("post_cross_link_comment", "secondary_pr")
    if state.child_path is None:
        return _missing_state("post_cross_link_comment", "child_path")

    ctx.github.issue.create_comment(
        state.primary.repo_name,
        state.primary.number,
        build_cross_link_comment(state.secondary_pr, state.child_path, ctx.config.bot_signature),
    )
    return replace(state, comment_posted=True)


@cache
def _secondary_pr_pipeline() -> tuple[SecondaryPRStep, ...]:
    return (
        resolve_relationship,
        fetch_primary_details,
        resolve_secondary_base,
        create_secondary_branch,
        replay_commits,
        open_pull_request,
        mark_secondary_pending,
        label_pull_request,
        post_cross_link_comment,
    )


def run_secondary_pr_pipeline(
    ctx: SyncContext, state: SecondaryPRState
) -> SecondaryPRState | PipelineStop:
    """Run the secondary PR pipeline, returning final state or the first stop."""
    for step in _secondary_pr_pipeline():
        result = step(ctx, state)
        if isinstance(result, PipelineStop):
            logger.debug("Secondary PR pipeline stopped at %s: %s", result.phase, result.message)
            return result
        state = result
    return state


def make_initial_state(primary: PullRequestRef, secondary_repo_name: str) -> SecondaryPRState:
    """Create SecondaryPRState with only the request filled in.

    Everything else is populated by the pipeline steps.
    """
    return SecondaryPRState(
        primary=primary,
        secondary_repo_name=secondary_repo_name,
        secondary_branch=encode_secondary_branch_name(primary),
        relationship=None,
        child_path=None,
        primary_info=None,
        secondary_base_sha=None,
        copied_shas=(),
        secondary_pr=None,
        comment_posted=False,
    )


def create_secondary_pr(
    ctx: SyncContext, primary: PullRequestRef, secondary_repo_name: str
) -> SecondaryPRState | PipelineStop:
    """Create the secondary PR mirroring `primary` in `secondary_repo_name`."""
    return run_secondary_pr_pipeline(ctx, make_initial_state(primary, secondary_repo_name))
