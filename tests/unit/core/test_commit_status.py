"""Tests for status aggregation between partner PRs."""

import pytest

from monosync.core.commit_status import (
    aggregate_states,
    create_placeholder_status,
    sync_pr_statuses,
)
from monosync.core.context import SyncContext
from monosync.gateway.github.gateway import create_fake_github_gateway
from monosync.gateway.github.pr.fake import FakeGitHubPrGateway
from monosync.gateway.github.repo.fake import FakeGitHubRepoGateway
from monosync.gateway.github.types import PullRequestRef, StatusContext
from tests.test_utils.builders import CHILD_REPO, PARENT_REPO, make_pr, parent_child_config

PRIMARY = PullRequestRef(repo_name=PARENT_REPO, number=42)
SECONDARY = PullRequestRef(repo_name=CHILD_REPO, number=5)


@pytest.mark.parametrize(
    ("states", "expected"),
    [
        ([], "success"),
        (["SUCCESS"], "success"),
        (["PENDING", "SUCCESS"], "pending"),
        (["EXPECTED", "SUCCESS"], "pending"),
        (["FAILURE", "PENDING"], "failure"),
        (["FAILURE", "ERROR"], "error"),
        (["success", "failure"], "failure"),
    ],
)
def test_aggregate_states(states: list[str], expected: str) -> None:
    assert aggregate_states(states) == expected


def _context(repo_gateway: FakeGitHubRepoGateway) -> SyncContext:
    pr_gateway = FakeGitHubPrGateway(
        prs=[
            make_pr(repo_name=PARENT_REPO, number=42, head_sha="p1"),
            make_pr(repo_name=CHILD_REPO, number=5, head_sha="s1", head_ref="org/parent/42"),
        ]
    )
    return SyncContext.for_test(
        github=create_fake_github_gateway(pr=pr_gateway, repo=repo_gateway),
        config=parent_child_config(),
    )


def test_writes_aggregate_when_absent() -> None:
    repo_gateway = FakeGitHubRepoGateway(
        commit_statuses={
            (PARENT_REPO, "p1"): [
                StatusContext(context="ci/build", state="SUCCESS"),
                StatusContext(context="ci/lint", state="PENDING"),
            ]
        }
    )
    ctx = _context(repo_gateway)

    assert sync_pr_statuses(ctx, PRIMARY, SECONDARY)

    assert repo_gateway.written_statuses == [
        (CHILD_REPO, "s1", "parent-monorepo/ci", "pending")
    ]


def test_no_write_when_unchanged_case_insensitive() -> None:
    repo_gateway = FakeGitHubRepoGateway(
        commit_statuses={
            (PARENT_REPO, "p1"): [StatusContext(context="ci/build", state="SUCCESS")],
            (CHILD_REPO, "s1"): [StatusContext(context="parent-monorepo/ci", state="SUCCESS")],
        }
    )
    ctx = _context(repo_gateway)

    assert not sync_pr_statuses(ctx, PRIMARY, SECONDARY)

    assert repo_gateway.written_statuses == []


def test_writes_when_state_changed() -> None:
    repo_gateway = FakeGitHubRepoGateway(
        commit_statuses={
            (PARENT_REPO, "p1"): [StatusContext(context="ci/build", state="FAILURE")],
            (CHILD_REPO, "s1"): [StatusContext(context="parent-monorepo/ci", state="PENDING")],
        }
    )
    ctx = _context(repo_gateway)

    assert sync_pr_statuses(ctx, PRIMARY, SECONDARY)

    assert repo_gateway.written_statuses == [
        (CHILD_REPO, "s1", "parent-monorepo/ci", "failure")
    ]


def test_primary_aggregate_contexts_are_excluded() -> None:
    """The secondary's aggregate reflected back onto the primary does not feed in."""
    repo_gateway = FakeGitHubRepoGateway(
        commit_statuses={
            (PARENT_REPO, "p1"): [
                StatusContext(context="ci/build", state="SUCCESS"),
                StatusContext(context="api-monorepo/ci", state="FAILURE"),
            ],
            (CHILD_REPO, "s1"): [StatusContext(context="parent-monorepo/ci", state="SUCCESS")],
        }
    )
    ctx = _context(repo_gateway)

    assert not sync_pr_statuses(ctx, PRIMARY, SECONDARY)


def test_injected_predicate_overrides_config() -> None:
    repo_gateway = FakeGitHubRepoGateway(
        commit_statuses={
            (PARENT_REPO, "p1"): [
                StatusContext(context="ci/build", state="SUCCESS"),
                StatusContext(context="mirror", state="FAILURE"),
            ],
            (CHILD_REPO, "s1"): [StatusContext(context="mirror", state="SUCCESS")],
        }
    )
    ctx = _context(repo_gateway)

    changed = sync_pr_statuses(
        ctx, PRIMARY, SECONDARY, is_aggregate_context=lambda context: context == "mirror"
    )

    assert not changed


def test_missing_pr_skips() -> None:
    ctx = SyncContext.for_test(config=parent_child_config())

    assert not sync_pr_statuses(ctx, PRIMARY, SECONDARY)


def test_create_placeholder_status() -> None:
    repo_gateway = FakeGitHubRepoGateway()
    ctx = SyncContext.for_test(github=create_fake_github_gateway(repo=repo_gateway))

    create_placeholder_status(ctx, make_pr(head_sha="abc"), "parent-monorepo/ci")

    assert repo_gateway.written_statuses == [(PARENT_REPO, "abc", "parent-monorepo/ci", "pending")]
