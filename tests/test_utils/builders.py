"""Builders for pull request fixtures shared across tests.

The default scenario is a parent monorepo `org/parent` with one child
`org/api` split out of `services/api`.
"""

from datetime import datetime

from monosync.core.config import SyncConfig
from monosync.core.relationships import RepositoryRelationship
from monosync.gateway.github.types import CommitInfo, PRState, PullRequestInfo

PARENT_REPO = "org/parent"
CHILD_REPO = "org/api"
CHILD_PATH = "services/api"

TEST_SIGNATURE = "\n\n<sup>Generated by monosync</sup>"


def make_pr(
    *,
    number: int = 42,
    repo_name: str = PARENT_REPO,
    state: PRState = "OPEN",
    title: str = "Add retries",
    body: str = "",
    base_ref: str = "main",
    base_sha: str = "base000",
    head_ref: str = "feature",
    head_sha: str = "head000",
    head_repo_name: str | None = None,
    author_login: str | None = "alice",
    merge_commit_sha: str | None = None,
    closed_at: datetime | None = None,
    updated_at: datetime | None = None,
) -> PullRequestInfo:
    return PullRequestInfo(
        number=number,
        repo_name=repo_name,
        state=state,
        title=title,
        body=body,
        url=f"https://github.com/{repo_name}/pull/{number}",
        base_ref=base_ref,
        base_sha=base_sha,
        head_ref=head_ref,
        head_sha=head_sha,
        base_repo_name=repo_name,
        head_repo_name=head_repo_name if head_repo_name is not None else repo_name,
        author_login=author_login,
        merge_commit_sha=merge_commit_sha,
        closed_at=closed_at,
        updated_at=updated_at,
    )


def make_commit(
    sha: str,
    message: str = "Change something",
    *,
    author_login: str | None = "alice",
    author_name: str = "Alice",
    author_email: str = "alice@example.com",
) -> CommitInfo:
    return CommitInfo(
        sha=sha,
        message=message,
        author_login=author_login,
        author_name=author_name,
        author_email=author_email,
    )


def parent_child_config(
    *,
    extra: tuple[RepositoryRelationship, ...] = (),
    legacy_partner_lookup: bool = False,
) -> SyncConfig:
    """Config relating org/parent to org/api at services/api, plus any extra edges."""
    return SyncConfig.for_test(
        relationships=(
            RepositoryRelationship(parent=PARENT_REPO, child=CHILD_REPO, path=CHILD_PATH),
            *extra,
        ),
        bot_signature=TEST_SIGNATURE,
        legacy_partner_lookup=legacy_partner_lookup,
    )
