"""Tests for the secondary PR pipeline."""

from monosync.core.context import SyncContext
from monosync.core.secondary_pr import (
    PipelineStop,
    SecondaryPRState,
    build_secondary_title_and_body,
    create_secondary_pr,
    make_initial_state,
    resolve_relationship,
)
from monosync.gateway.commit_copier.fake import FakeCommitCopier
from monosync.gateway.commit_copier.types import CopySource, CopyTarget
from monosync.gateway.github.gateway import create_fake_github_gateway
from monosync.gateway.github.issue.fake import FakeGitHubIssueGateway
from monosync.gateway.github.pr.fake import FakeGitHubPrGateway
from monosync.gateway.github.repo.fake import FakeGitHubRepoGateway
from monosync.gateway.github.types import PullRequestRef
from tests.test_utils.builders import (
    CHILD_PATH,
    CHILD_REPO,
    PARENT_REPO,
    TEST_SIGNATURE,
    make_pr,
    parent_child_config,
)

PARENT_PRIMARY = PullRequestRef(repo_name=PARENT_REPO, number=42)
CHILD_PRIMARY = PullRequestRef(repo_name=CHILD_REPO, number=5)


def test_creates_child_secondary_end_to_end() -> None:
    """org/parent#42 touching services/api gets org/parent/42 opened in org/api."""
    pr_gateway = FakeGitHubPrGateway(
        prs=[
            make_pr(
                repo_name=PARENT_REPO,
                number=42,
                title="Add retries",
                base_sha="pbase",
                head_sha="phead",
            )
        ],
        next_pr_number=7,
        created_head_sha="c7head",
    )
    repo_gateway = FakeGitHubRepoGateway(branch_heads={(CHILD_REPO, "main"): "cmain"})
    issue_gateway = FakeGitHubIssueGateway()
    copier = FakeCommitCopier()
    ctx = SyncContext.for_test(
        github=create_fake_github_gateway(pr=pr_gateway, repo=repo_gateway, issue=issue_gateway),
        commit_copier=copier,
        config=parent_child_config(),
    )

    result = create_secondary_pr(ctx, PARENT_PRIMARY, CHILD_REPO)

    assert isinstance(result, SecondaryPRState)
    assert repo_gateway.created_branches == [(CHILD_REPO, "org/parent/42", "cmain")]
    assert copier.copy_calls == [
        (
            CopySource(
                repo_name=PARENT_REPO, before_sha="pbase", after_sha="phead", sub_path=CHILD_PATH
            ),
            CopyTarget(repo_name=CHILD_REPO, branch="org/parent/42", sha="cmain", sub_path=None),
        )
    ]
    assert len(pr_gateway.created_prs) == 1
    repo_name, head, base, title, body = pr_gateway.created_prs[0]
    assert (repo_name, head, base, title) == (CHILD_REPO, "org/parent/42", "main", "Add retries")
    assert "org/parent#42" in body
    assert "`org/parent/42`" in body
    assert body.endswith(TEST_SIGNATURE)
    assert result.secondary_pr is not None
    assert result.secondary_pr.ref == PullRequestRef(repo_name=CHILD_REPO, number=7)
    assert repo_gateway.written_statuses == [
        (CHILD_REPO, "c7head", "parent-monorepo/ci", "pending")
    ]
    assert repo_gateway.created_labels == [(CHILD_REPO, "auto-sync")]
    assert issue_gateway.added_labels == [(CHILD_REPO, 7, ["auto-sync"])]
    # No cross-link comment when the secondary is the child
    assert issue_gateway.comments == []
    assert result.comment_posted is False


def test_stops_on_missing_base_branch() -> None:
    pr_gateway = FakeGitHubPrGateway(prs=[make_pr(repo_name=PARENT_REPO, number=42)])
    repo_gateway = FakeGitHubRepoGateway()
    copier = FakeCommitCopier()
    ctx = SyncContext.for_test(
        github=create_fake_github_gateway(pr=pr_gateway, repo=repo_gateway),
        commit_copier=copier,
        config=parent_child_config(),
    )

    result = create_secondary_pr(ctx, PARENT_PRIMARY, CHILD_REPO)

    assert isinstance(result, PipelineStop)
    assert result.phase == "resolve_secondary_base"
    assert result.error_type == "missing_base_branch"
    assert repo_gateway.created_branches == []
    assert copier.copy_calls == []
    assert pr_gateway.created_prs == []


def test_stops_without_relationship() -> None:
    pr_gateway = FakeGitHubPrGateway(prs=[make_pr(repo_name=PARENT_REPO, number=42)])
    ctx = SyncContext.for_test(
        github=create_fake_github_gateway(pr=pr_gateway), config=parent_child_config()
    )

    result = create_secondary_pr(ctx, PARENT_PRIMARY, "org/unrelated")

    assert isinstance(result, PipelineStop)
    assert result.error_type == "no_relationship"
    assert pr_gateway.get_pr_calls == []


def test_stops_when_primary_missing() -> None:
    ctx = SyncContext.for_test(config=parent_child_config())

    result = create_secondary_pr(ctx, PARENT_PRIMARY, CHILD_REPO)

    assert isinstance(result, PipelineStop)
    assert result.error_type == "primary_not_found"


def test_stops_when_nothing_copied_leaving_branch() -> None:
    """The branch stays behind; no PR is opened for an empty replay."""
    pr_gateway = FakeGitHubPrGateway(prs=[make_pr(repo_name=PARENT_REPO, number=42)])
    repo_gateway = FakeGitHubRepoGateway(branch_heads={(CHILD_REPO, "main"): "cmain"})
    ctx = SyncContext.for_test(
        github=create_fake_github_gateway(pr=pr_gateway, repo=repo_gateway),
        commit_copier=FakeCommitCopier(copies_commits=False),
        config=parent_child_config(),
    )

    result = create_secondary_pr(ctx, PARENT_PRIMARY, CHILD_REPO)

    assert isinstance(result, PipelineStop)
    assert result.error_type == "nothing_copied"
    assert repo_gateway.created_branches == [(CHILD_REPO, "org/parent/42", "cmain")]
    assert pr_gateway.created_prs == []


def test_creates_parent_secondary_with_public_meta_and_comment() -> None:
    body = (
        "Internal notes\n\n"
        "<!--\nmeta:\npublicTitle: MATCH\npublicBody: Adds retries.\\nSee docs.\n-->"
    )
    pr_gateway = FakeGitHubPrGateway(
        prs=[make_pr(repo_name=CHILD_REPO, number=5, title="Retry on 503", body=body)],
        next_pr_number=100,
        created_head_sha="p100head",
    )
    repo_gateway = FakeGitHubRepoGateway(branch_heads={(PARENT_REPO, "main"): "pmain"})
    issue_gateway = FakeGitHubIssueGateway()
    copier = FakeCommitCopier()
    ctx = SyncContext.for_test(
        github=create_fake_github_gateway(pr=pr_gateway, repo=repo_gateway, issue=issue_gateway),
        commit_copier=copier,
        config=parent_child_config(),
    )

    result = create_secondary_pr(ctx, CHILD_PRIMARY, PARENT_REPO)

    assert isinstance(result, SecondaryPRState)
    source, target = copier.copy_calls[0]
    assert source.sub_path is None
    assert target == CopyTarget(
        repo_name=PARENT_REPO, branch="org/api/5", sha="pmain", sub_path=CHILD_PATH
    )
    _, head, _, title, created_body = pr_gateway.created_prs[0]
    assert head == "org/api/5"
    assert title == "Retry on 503"
    assert created_body == "Adds retries.\nSee docs."
    assert result.comment_posted is True
    assert len(issue_gateway.comments) == 1
    comment_repo, comment_number, comment = issue_gateway.comments[0]
    assert (comment_repo, comment_number) == (CHILD_REPO, 5)
    assert "https://github.com/org/parent/pull/100" in comment
    assert "Later changes to them are not carried over" in comment
    assert "edit org/parent#100 directly" in comment
    assert comment.endswith(TEST_SIGNATURE)
    assert repo_gateway.written_statuses == [
        (PARENT_REPO, "p100head", "api-monorepo/ci", "pending")
    ]


def test_parent_secondary_title_and_body_fallbacks() -> None:
    primary_info = make_pr(repo_name=CHILD_REPO, number=5, title="Retry on 503", body="")

    title, body = build_secondary_title_and_body(
        primary_info, secondary_is_child=False, secondary_branch="org/api/5", signature="-sig"
    )

    assert title == "Sync org/api#5"
    assert "org/api#5" in body
    assert body.endswith("-sig")


def test_parent_secondary_explicit_public_title() -> None:
    primary_info = make_pr(
        repo_name=CHILD_REPO,
        number=5,
        body="<!--\nmeta:\npublicTitle: Public retries\n-->",
    )

    title, _ = build_secondary_title_and_body(
        primary_info, secondary_is_child=False, secondary_branch="org/api/5", signature=""
    )

    assert title == "Public retries"


def test_child_secondary_honors_public_meta() -> None:
    primary_info = make_pr(
        title="Internal title",
        body="<!--\nmeta:\npublicTitle: Public title\npublicBody: Public body\n-->",
    )

    title, body = build_secondary_title_and_body(
        primary_info, secondary_is_child=True, secondary_branch="org/parent/42", signature=""
    )

    assert (title, body) == ("Public title", "Public body")


def test_resolve_relationship_records_direction_and_path() -> None:
    ctx = SyncContext.for_test(config=parent_child_config())

    result = resolve_relationship(ctx, make_initial_state(CHILD_PRIMARY, PARENT_REPO))

    assert isinstance(result, SecondaryPRState)
    assert result.relationship == "child"
    assert result.secondary_is_child is False
    assert result.child_path == CHILD_PATH
    assert result.secondary_branch == "org/api/5"
