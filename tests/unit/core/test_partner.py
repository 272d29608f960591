"""Tests for partner resolution and secondary candidate selection."""

from monosync.core.config import SyncConfig
from monosync.core.context import SyncContext
from monosync.core.partner import PartnerPR, get_partner_pr, get_secondary_candidate
from monosync.core.relationships import RepositoryRelationship
from monosync.gateway.github.gateway import create_fake_github_gateway
from monosync.gateway.github.pr.fake import FakeGitHubPrGateway
from monosync.gateway.github.types import PullRequestRef
from tests.test_utils.builders import (
    CHILD_REPO,
    PARENT_REPO,
    make_pr,
    parent_child_config,
)


def _context(pr_gateway: FakeGitHubPrGateway, config: SyncConfig | None = None) -> SyncContext:
    return SyncContext.for_test(
        github=create_fake_github_gateway(pr=pr_gateway),
        config=config if config is not None else parent_child_config(),
    )


def test_secondary_branch_resolves_to_primary() -> None:
    """A PR on acme/widgets/42 in acme/widgets-ui is the secondary of acme/widgets#42."""
    config = SyncConfig.for_test(
        relationships=(
            RepositoryRelationship(parent="acme/widgets", child="acme/widgets-ui", path="ui"),
        )
    )
    pr_gateway = FakeGitHubPrGateway(
        prs=[
            make_pr(repo_name="acme/widgets", number=42, head_ref="feature"),
            make_pr(repo_name="acme/widgets-ui", number=7, head_ref="acme/widgets/42"),
        ]
    )
    ctx = _context(pr_gateway, config)

    partner = get_partner_pr(ctx, PullRequestRef(repo_name="acme/widgets-ui", number=7))

    assert partner == PartnerPR(
        ref=PullRequestRef(repo_name="acme/widgets", number=42), role="primary"
    )


def test_primary_finds_secondary_in_related_repo() -> None:
    pr_gateway = FakeGitHubPrGateway(
        prs=[
            make_pr(repo_name=PARENT_REPO, number=42, head_ref="feature"),
            make_pr(repo_name=CHILD_REPO, number=5, head_ref="org/parent/42", state="CLOSED"),
        ]
    )
    ctx = _context(pr_gateway)

    partner = get_partner_pr(ctx, PullRequestRef(repo_name=PARENT_REPO, number=42))

    assert partner == PartnerPR(
        ref=PullRequestRef(repo_name=CHILD_REPO, number=5), role="secondary"
    )
    assert pr_gateway.get_pr_for_branch_calls == [(CHILD_REPO, "org/parent/42", True)]


def test_secondary_branch_with_missing_primary_falls_through() -> None:
    """A branch that only looks like a secondary name is treated as a regular branch."""
    pr_gateway = FakeGitHubPrGateway(
        prs=[make_pr(repo_name=CHILD_REPO, number=5, head_ref="org/parent/404")]
    )
    ctx = _context(pr_gateway)

    partner = get_partner_pr(ctx, PullRequestRef(repo_name=CHILD_REPO, number=5))

    assert partner is None
    assert pr_gateway.get_pr_for_branch_calls == [(PARENT_REPO, "org/api/5", True)]


def test_no_partner() -> None:
    pr_gateway = FakeGitHubPrGateway(prs=[make_pr(repo_name=PARENT_REPO, number=42)])
    ctx = _context(pr_gateway)

    assert get_partner_pr(ctx, PullRequestRef(repo_name=PARENT_REPO, number=42)) is None


def test_missing_pr_has_no_partner() -> None:
    ctx = _context(FakeGitHubPrGateway())

    assert get_partner_pr(ctx, PullRequestRef(repo_name=PARENT_REPO, number=1)) is None


def test_legacy_lookup_disabled_by_default() -> None:
    pr_gateway = FakeGitHubPrGateway(
        prs=[
            make_pr(repo_name=CHILD_REPO, number=5, head_ref="fix-typo"),
            make_pr(repo_name=PARENT_REPO, number=42, head_ref="org/api/fix-typo"),
        ]
    )
    ctx = _context(pr_gateway)

    assert get_partner_pr(ctx, PullRequestRef(repo_name=CHILD_REPO, number=5)) is None


def test_legacy_lookup_from_child() -> None:
    """Child branch b was mirrored into the parent on <child>/<b>."""
    pr_gateway = FakeGitHubPrGateway(
        prs=[
            make_pr(repo_name=CHILD_REPO, number=5, head_ref="fix-typo"),
            make_pr(repo_name=PARENT_REPO, number=42, head_ref="org/api/fix-typo"),
        ]
    )
    ctx = _context(pr_gateway, parent_child_config(legacy_partner_lookup=True))

    partner = get_partner_pr(ctx, PullRequestRef(repo_name=CHILD_REPO, number=5))

    assert partner == PartnerPR(
        ref=PullRequestRef(repo_name=PARENT_REPO, number=42), role="secondary"
    )


def test_legacy_lookup_from_parent() -> None:
    pr_gateway = FakeGitHubPrGateway(
        prs=[
            make_pr(repo_name=PARENT_REPO, number=42, head_ref="org/api/fix/typo"),
            make_pr(repo_name=CHILD_REPO, number=5, head_ref="fix/typo"),
        ]
    )
    ctx = _context(pr_gateway, parent_child_config(legacy_partner_lookup=True))

    partner = get_partner_pr(ctx, PullRequestRef(repo_name=PARENT_REPO, number=42))

    assert partner == PartnerPR(ref=PullRequestRef(repo_name=CHILD_REPO, number=5), role="primary")


def test_secondary_candidate_for_child_is_parent() -> None:
    ctx = _context(FakeGitHubPrGateway())

    candidate = get_secondary_candidate(ctx, PullRequestRef(repo_name=CHILD_REPO, number=5))

    assert candidate == PARENT_REPO


def test_secondary_candidate_for_parent_is_first_touched_child() -> None:
    config = parent_child_config(
        extra=(RepositoryRelationship(parent=PARENT_REPO, child="org/web", path="apps/web"),)
    )
    pr_gateway = FakeGitHubPrGateway(
        pr_files={(PARENT_REPO, 42): ["README.md", "apps/web/index.ts", "services/api/main.py"]}
    )
    ctx = _context(pr_gateway, config)

    candidate = get_secondary_candidate(ctx, PullRequestRef(repo_name=PARENT_REPO, number=42))

    # Declared order wins over file order
    assert candidate == CHILD_REPO


def test_secondary_candidate_none_when_no_child_touched() -> None:
    pr_gateway = FakeGitHubPrGateway(
        pr_files={(PARENT_REPO, 42): ["README.md", "services/api-gateway/main.py"]}
    )
    ctx = _context(pr_gateway)

    assert get_secondary_candidate(ctx, PullRequestRef(repo_name=PARENT_REPO, number=42)) is None


def test_secondary_candidate_none_without_relationship() -> None:
    ctx = _context(FakeGitHubPrGateway())

    assert get_secondary_candidate(ctx, PullRequestRef(repo_name="org/other", number=1)) is None
