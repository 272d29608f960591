"""Abstract base class for GitHub issue operations used on pull requests."""

from abc import ABC, abstractmethod


class GitHubIssueGateway(ABC):
    """Abstract interface for issue-level operations (comments, labels).

    GitHub treats every PR as an issue, so these take PR numbers too.
    """

    @abstractmethod
    def create_comment(self, repo_name: str, number: int, body: str) -> None:
        """Post a comment on an issue or pull request."""
        ...

    @abstractmethod
    def add_labels(self, repo_name: str, number: int, labels: list[str]) -> None:
        """Add labels to an issue or pull request."""
        ...
