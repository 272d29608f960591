"""Partner resolution: find the PR linked to a given PR in a related repository.

A primary PR is the one a developer opened; its secondary lives in the related
repository on a branch named after the primary (see branch_naming). Either
side can be resolved from the other.
"""

import logging
from dataclasses import dataclass
from typing import Literal

from monosync.core.branch_naming import (
    decode_secondary_branch_name,
    encode_secondary_branch_name,
    is_secondary_branch_name,
)
from monosync.core.context import SyncContext
from monosync.gateway.github.types import PRNotFound, PullRequestInfo, PullRequestRef

logger = logging.getLogger(__name__)

PartnerRole = Literal["primary", "secondary"]


@dataclass(frozen=True)
class PartnerPR:
    """The PR linked to another one; `role` is the role of this partner."""

    ref: PullRequestRef
    role: PartnerRole


def get_partner_pr(ctx: SyncContext, pr: PullRequestRef) -> PartnerPR | None:
    """Find the PR linked to `pr`, or None if it has no partner yet.

    1. If pr's head branch is a secondary branch name and the PR it names
       exists, that PR is the primary partner.
    2. Otherwise the first related repository (parent first, then children)
       with a PR on the secondary branch named after pr holds the secondary
       partner. Closed PRs count.
    3. Otherwise, when enabled in config, the legacy branch conventions are
       tried.
    """
    info = ctx.github.pr.get_pr(pr.repo_name, pr.number)
    if isinstance(info, PRNotFound):
        logger.debug("No partner for %s: PR not found", pr)
        return None

    if is_secondary_branch_name(info.head_ref):
        candidate = decode_secondary_branch_name(info.head_ref)
        primary = ctx.github.pr.get_pr(candidate.repo_name, candidate.number)
        if not isinstance(primary, PRNotFound):
            logger.debug("%s is the secondary of %s", pr, candidate)
            return PartnerPR(ref=candidate, role="primary")
        logger.debug("Branch %s names %s, which does not exist", info.head_ref, candidate)

    secondary_branch = encode_secondary_branch_name(pr)
    for repo_name in ctx.relationships.get_related_repo_names(pr.repo_name):
        secondary = ctx.github.pr.get_pr_for_branch(
            repo_name, secondary_branch, include_closed=True
        )
        if not isinstance(secondary, PRNotFound):
            logger.debug("%s is the primary of %s", pr, secondary.ref)
            return PartnerPR(ref=secondary.ref, role="secondary")

    if ctx.config.legacy_partner_lookup:
        return _get_legacy_partner_pr(ctx, info)
    return None


def _get_legacy_partner_pr(ctx: SyncContext, info: PullRequestInfo) -> PartnerPR | None:
    """Resolve partners created under the old `<child repo>/<branch>` convention.

    A child PR on branch `b` was mirrored into its parent on `<child>/<b>`; a
    parent PR on `<owner>/<repo>/<rest>` mirrors a child PR on branch `<rest>`.
    """
    parent_name = ctx.relationships.get_parent_name(info.repo_name)
    if parent_name is not None:
        found = ctx.github.pr.get_pr_for_branch(
            parent_name, f"{info.repo_name}/{info.head_ref}", include_closed=True
        )
        if not isinstance(found, PRNotFound):
            logger.debug("Legacy partner of %s: %s (secondary)", info.ref, found.ref)
            return PartnerPR(ref=found.ref, role="secondary")

    owner, _, remainder = info.head_ref.partition("/")
    repo, _, branch = remainder.partition("/")
    child_name = f"{owner}/{repo}"
    if branch and ctx.relationships.get_child(info.repo_name, child_name) is not None:
        found = ctx.github.pr.get_pr_for_branch(child_name, branch, include_closed=True)
        if not isinstance(found, PRNotFound):
            logger.debug("Legacy partner of %s: %s (primary)", info.ref, found.ref)
            return PartnerPR(ref=found.ref, role="primary")

    return None


def get_secondary_candidate(ctx: SyncContext, pr: PullRequestRef) -> str | None:
    """Pick the repository a secondary PR for `pr` should be opened in.

    A repository with a parent always syncs up to it. A parent syncs down to
    the first child (in declared order) whose subdirectory the PR touches.
    """
    parent_name = ctx.relationships.get_parent_name(pr.repo_name)
    if parent_name is not None:
        return parent_name

    children = ctx.relationships.get_children(pr.repo_name)
    if not children:
        return None

    changed_files = ctx.github.pr.get_pr_files(pr.repo_name, pr.number)
    touched: set[str] = set()
    for file_path in changed_files:
        owner = ctx.relationships.get_child_for_path(pr.repo_name, file_path)
        if owner is not None:
            touched.add(owner.name)
    for child in children:
        if child.name in touched:
            return child.name

    logger.debug("%s touches no child subdirectory", pr)
    return None
