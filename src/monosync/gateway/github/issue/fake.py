"""Fake GitHub issue operations for testing."""

from monosync.gateway.github.issue.abc import GitHubIssueGateway


class FakeGitHubIssueGateway(GitHubIssueGateway):
    """In-memory fake that records comments and labels."""

    def __init__(self) -> None:
        self._comments: list[tuple[str, int, str]] = []
        self._added_labels: list[tuple[str, int, list[str]]] = []

    def create_comment(self, repo_name: str, number: int, body: str) -> None:
        self._comments.append((repo_name, number, body))

    def add_labels(self, repo_name: str, number: int, labels: list[str]) -> None:
        self._added_labels.append((repo_name, number, list(labels)))

    @property
    def comments(self) -> list[tuple[str, int, str]]:
        """Posted comments as (repo_name, number, body)."""
        return list(self._comments)

    @property
    def added_labels(self) -> list[tuple[str, int, list[str]]]:
        return list(self._added_labels)
