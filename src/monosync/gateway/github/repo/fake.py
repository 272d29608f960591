"""Fake GitHub repository operations for testing."""

from monosync.gateway.github.repo.abc import GitHubRepoGateway
from monosync.gateway.github.types import CommitStatusState, StatusContext


class FakeGitHubRepoGateway(GitHubRepoGateway):
    """In-memory fake implementation of GitHub repository operations.

    All state is provided via constructor keyword arguments. Written statuses
    and created branches become visible to later reads.
    """

    def __init__(
        self,
        *,
        branch_heads: dict[tuple[str, str], str] | None = None,
        commit_statuses: dict[tuple[str, str], list[StatusContext]] | None = None,
        labels: dict[str, list[str]] | None = None,
    ) -> None:
        """Create FakeGitHubRepoGateway with pre-configured state.

        Args:
            branch_heads: Mapping of (repo_name, branch) -> head SHA
            commit_statuses: Mapping of (repo_name, sha) -> status contexts
            labels: Mapping of repo_name -> existing label names
        """
        self._branch_heads = dict(branch_heads or {})
        self._commit_statuses = {
            key: list(value) for key, value in (commit_statuses or {}).items()
        }
        self._labels = {key: list(value) for key, value in (labels or {}).items()}

        self._created_branches: list[tuple[str, str, str]] = []
        self._written_statuses: list[tuple[str, str, str, str]] = []
        self._created_labels: list[tuple[str, str]] = []

    def get_branch_head_sha(self, repo_name: str, branch: str) -> str | None:
        return self._branch_heads.get((repo_name, branch))

    def get_commit_statuses(self, repo_name: str, sha: str) -> list[StatusContext]:
        return list(self._commit_statuses.get((repo_name, sha), []))

    def create_branch(self, repo_name: str, branch: str, sha: str) -> None:
        self._created_branches.append((repo_name, branch, sha))
        self._branch_heads[(repo_name, branch)] = sha

    def set_commit_status(
        self,
        repo_name: str,
        sha: str,
        *,
        context: str,
        state: CommitStatusState,
        description: str | None,
    ) -> None:
        self._written_statuses.append((repo_name, sha, context, state))
        existing = self._commit_statuses.get((repo_name, sha), [])
        statuses = [status for status in existing if status.context != context]
        statuses.append(StatusContext(context=context, state=state.upper()))
        self._commit_statuses[(repo_name, sha)] = statuses

    def ensure_label(self, repo_name: str, name: str, *, color: str, description: str) -> None:
        existing = self._labels.setdefault(repo_name, [])
        if name not in existing:
            existing.append(name)
            self._created_labels.append((repo_name, name))

    @property
    def created_branches(self) -> list[tuple[str, str, str]]:
        """Created branches as (repo_name, branch, sha)."""
        return list(self._created_branches)

    @property
    def written_statuses(self) -> list[tuple[str, str, str, str]]:
        """Written statuses as (repo_name, sha, context, state)."""
        return list(self._written_statuses)

    @property
    def created_labels(self) -> list[tuple[str, str]]:
        return list(self._created_labels)
