"""Composite gateway for GitHub operations."""

from dataclasses import dataclass

from monosync.gateway.github.issue.abc import GitHubIssueGateway
from monosync.gateway.github.pr.abc import GitHubPrGateway
from monosync.gateway.github.repo.abc import GitHubRepoGateway
from monosync.gateway.time.abc import Time


@dataclass(frozen=True)
class GitHubGateway:
    """Composite gateway providing access to all GitHub sub-gateways.

    Usage:
        ctx.github.pr.get_pr("org/parent", 42)
        ctx.github.repo.get_branch_head_sha("org/api", "main")
        ctx.github.issue.create_comment("org/parent", 42, "...")
    """

    pr: GitHubPrGateway
    repo: GitHubRepoGateway
    issue: GitHubIssueGateway


def create_fake_github_gateway(
    *,
    pr: GitHubPrGateway | None = None,
    repo: GitHubRepoGateway | None = None,
    issue: GitHubIssueGateway | None = None,
) -> GitHubGateway:
    """Create a GitHubGateway with fake sub-gateways for testing.

    Provide custom sub-gateways to override defaults.

    Example:
        >>> from monosync.gateway.github.pr.fake import FakeGitHubPrGateway
        >>> pr = FakeGitHubPrGateway(prs=[parent_pr])
        >>> github = create_fake_github_gateway(pr=pr)
        >>> # Later: assert pr.created_prs == [...]
    """
    from monosync.gateway.github.issue.fake import FakeGitHubIssueGateway
    from monosync.gateway.github.pr.fake import FakeGitHubPrGateway
    from monosync.gateway.github.repo.fake import FakeGitHubRepoGateway

    return GitHubGateway(
        pr=pr or FakeGitHubPrGateway(),
        repo=repo or FakeGitHubRepoGateway(),
        issue=issue or FakeGitHubIssueGateway(),
    )


def create_real_github_gateway(time: Time) -> GitHubGateway:
    """Create the production GitHubGateway backed by the gh CLI."""
    from monosync.gateway.github.issue.real import RealGitHubIssueGateway
    from monosync.gateway.github.pr.real import RealGitHubPrGateway
    from monosync.gateway.github.repo.real import RealGitHubRepoGateway

    return GitHubGateway(
        pr=RealGitHubPrGateway(time),
        repo=RealGitHubRepoGateway(time),
        issue=RealGitHubIssueGateway(),
    )
