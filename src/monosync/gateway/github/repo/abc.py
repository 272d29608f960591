"""Abstract base class for GitHub repository-level operations (refs, statuses, labels)."""

from abc import ABC, abstractmethod

from monosync.gateway.github.types import CommitStatusState, StatusContext


class GitHubRepoGateway(ABC):
    """Abstract interface for GitHub repository operations."""

    @abstractmethod
    def get_branch_head_sha(self, repo_name: str, branch: str) -> str | None:
        """Return the commit SHA a branch points at, or None if the branch does not exist."""
        ...

    @abstractmethod
    def get_commit_statuses(self, repo_name: str, sha: str) -> list[StatusContext]:
        """Return the latest status for every context on a commit."""
        ...

    @abstractmethod
    def create_branch(self, repo_name: str, branch: str, sha: str) -> None:
        """Create refs/heads/<branch> pointing at sha."""
        ...

    @abstractmethod
    def set_commit_status(
        self,
        repo_name: str,
        sha: str,
        *,
        context: str,
        state: CommitStatusState,
        description: str | None,
    ) -> None:
        """Write a commit status."""
        ...

    @abstractmethod
    def ensure_label(self, repo_name: str, name: str, *, color: str, description: str) -> None:
        """Create a label unless one with that name already exists."""
        ...
