"""Abstract base class for GitHub pull request operations."""

from abc import ABC, abstractmethod

from monosync.gateway.github.types import (
    CommitInfo,
    PRNotFound,
    PRStateUpdate,
    PullRequestInfo,
)


class GitHubPrGateway(ABC):
    """Abstract interface for GitHub pull request operations.

    All implementations (real and fake) must implement this interface.
    Repositories are addressed by full name ("owner/repo") because a single
    sync touches several repositories.
    """

    @abstractmethod
    def get_pr(self, repo_name: str, number: int) -> PullRequestInfo | PRNotFound:
        """Fetch a pull request by number.

        Returns:
            PullRequestInfo, or PRNotFound if the PR does not exist
        """
        ...

    @abstractmethod
    def get_pr_for_branch(
        self, repo_name: str, branch: str, *, include_closed: bool
    ) -> PullRequestInfo | PRNotFound:
        """Fetch the most recently updated PR whose head branch is `branch`.

        Args:
            repo_name: Repository to search
            branch: Head branch name (without owner prefix)
            include_closed: If True, closed and merged PRs are candidates too

        Returns:
            PullRequestInfo, or PRNotFound if no PR matches
        """
        ...

    @abstractmethod
    def get_pr_files(self, repo_name: str, number: int) -> list[str]:
        """Return the paths of all files changed by a PR (all pages)."""
        ...

    @abstractmethod
    def get_pr_commits(self, repo_name: str, number: int) -> list[CommitInfo]:
        """Return the commits of a PR, oldest first."""
        ...

    @abstractmethod
    def create_pr(
        self, repo_name: str, *, head: str, base: str, title: str, body: str
    ) -> PullRequestInfo:
        """Create a pull request that maintainers can modify.

        Returns:
            The created PR
        """
        ...

    @abstractmethod
    def merge_pr(
        self, repo_name: str, number: int, *, commit_title: str, commit_message: str
    ) -> None:
        """Squash-merge a pull request."""
        ...

    @abstractmethod
    def set_pr_state(self, repo_name: str, number: int, state: PRStateUpdate) -> None:
        """Close or reopen a pull request."""
        ...

    @abstractmethod
    def update_pr_title_and_body(self, repo_name: str, number: int, title: str, body: str) -> None:
        """Replace the title and body of a pull request."""
        ...
