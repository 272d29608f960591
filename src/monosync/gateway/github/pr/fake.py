"""Fake GitHub pull request operations for testing."""

from dataclasses import replace

from monosync.gateway.github.pr.abc import GitHubPrGateway
from monosync.gateway.github.types import (
    CommitInfo,
    PRNotFound,
    PRStateUpdate,
    PullRequestInfo,
)


class FakeGitHubPrGateway(GitHubPrGateway):
    """In-memory fake implementation of GitHub pull request operations.

    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments with sensible defaults. Mutations update the in-memory
    PRs so later lookups observe them, and are recorded for assertions.
    """

    def __init__(
        self,
        *,
        prs: list[PullRequestInfo] | None = None,
        pr_files: dict[tuple[str, int], list[str]] | None = None,
        pr_commits: dict[tuple[str, int], list[CommitInfo]] | None = None,
        next_pr_number: int = 999,
        created_head_sha: str = "",
    ) -> None:
        """Create FakeGitHubPrGateway with pre-configured state.

        Args:
            prs: Pull requests across any number of repositories
            pr_files: Mapping of (repo_name, number) -> changed file paths
            pr_commits: Mapping of (repo_name, number) -> commits, oldest first
            next_pr_number: Number assigned to the next created PR
            created_head_sha: Head SHA reported for created PRs
        """
        self._prs: dict[tuple[str, int], PullRequestInfo] = {
            (pr.repo_name, pr.number): pr for pr in (prs or [])
        }
        self._pr_files = pr_files or {}
        self._pr_commits = pr_commits or {}
        self._next_pr_number = next_pr_number
        self._created_head_sha = created_head_sha

        # Call and mutation tracking
        self._get_pr_calls: list[tuple[str, int]] = []
        self._get_pr_for_branch_calls: list[tuple[str, str, bool]] = []
        self._created_prs: list[tuple[str, str, str, str, str]] = []
        self._merged_prs: list[tuple[str, int, str, str]] = []
        self._state_updates: list[tuple[str, int, PRStateUpdate]] = []
        self._updated_titles_and_bodies: list[tuple[str, int, str, str]] = []

    # --- PR query operations ---

    def get_pr(self, repo_name: str, number: int) -> PullRequestInfo | PRNotFound:
        self._get_pr_calls.append((repo_name, number))
        pr = self._prs.get((repo_name, number))
        if pr is None:
            return PRNotFound(repo_name=repo_name, number=number)
        return pr

    def get_pr_for_branch(
        self, repo_name: str, branch: str, *, include_closed: bool
    ) -> PullRequestInfo | PRNotFound:
        self._get_pr_for_branch_calls.append((repo_name, branch, include_closed))
        matches = [
            pr
            for (pr_repo, _), pr in self._prs.items()
            if pr_repo == repo_name
            and pr.head_ref == branch
            and (include_closed or pr.is_open)
        ]
        if not matches:
            return PRNotFound(repo_name=repo_name, branch=branch)
        # Most recently updated first; PRs without a timestamp sort last
        matches.sort(
            key=lambda pr: pr.updated_at.timestamp() if pr.updated_at is not None else 0.0,
            reverse=True,
        )
        return matches[0]

    def get_pr_files(self, repo_name: str, number: int) -> list[str]:
        return list(self._pr_files.get((repo_name, number), []))

    def get_pr_commits(self, repo_name: str, number: int) -> list[CommitInfo]:
        return list(self._pr_commits.get((repo_name, number), []))

    # --- PR mutations ---

    def create_pr(
        self, repo_name: str, *, head: str, base: str, title: str, body: str
    ) -> PullRequestInfo:
        """Record PR creation and store an OPEN PR with the next fake number."""
        self._created_prs.append((repo_name, head, base, title, body))
        number = self._next_pr_number
        self._next_pr_number += 1
        pr = PullRequestInfo(
            number=number,
            repo_name=repo_name,
            state="OPEN",
            title=title,
            body=body,
            url=f"https://github.com/{repo_name}/pull/{number}",
            base_ref=base,
            base_sha="",
            head_ref=head,
            head_sha=self._created_head_sha,
            base_repo_name=repo_name,
            head_repo_name=repo_name,
            author_login="monosync-bot",
            merge_commit_sha=None,
            closed_at=None,
            updated_at=None,
        )
        self._prs[(repo_name, number)] = pr
        return pr

    def merge_pr(
        self, repo_name: str, number: int, *, commit_title: str, commit_message: str
    ) -> None:
        self._merged_prs.append((repo_name, number, commit_title, commit_message))
        pr = self._prs.get((repo_name, number))
        if pr is not None:
            self._prs[(repo_name, number)] = replace(pr, state="MERGED")

    def set_pr_state(self, repo_name: str, number: int, state: PRStateUpdate) -> None:
        self._state_updates.append((repo_name, number, state))
        pr = self._prs.get((repo_name, number))
        if pr is not None:
            self._prs[(repo_name, number)] = replace(
                pr, state="OPEN" if state == "open" else "CLOSED"
            )

    def update_pr_title_and_body(self, repo_name: str, number: int, title: str, body: str) -> None:
        self._updated_titles_and_bodies.append((repo_name, number, title, body))
        pr = self._prs.get((repo_name, number))
        if pr is not None:
            self._prs[(repo_name, number)] = replace(pr, title=title, body=body)

    # --- Tracking properties ---

    @property
    def get_pr_calls(self) -> list[tuple[str, int]]:
        return list(self._get_pr_calls)

    @property
    def get_pr_for_branch_calls(self) -> list[tuple[str, str, bool]]:
        return list(self._get_pr_for_branch_calls)

    @property
    def created_prs(self) -> list[tuple[str, str, str, str, str]]:
        """Created PRs as (repo_name, head, base, title, body)."""
        return list(self._created_prs)

    @property
    def merged_prs(self) -> list[tuple[str, int, str, str]]:
        """Merged PRs as (repo_name, number, commit_title, commit_message)."""
        return list(self._merged_prs)

    @property
    def state_updates(self) -> list[tuple[str, int, PRStateUpdate]]:
        return list(self._state_updates)

    @property
    def updated_titles_and_bodies(self) -> list[tuple[str, int, str, str]]:
        return list(self._updated_titles_and_bodies)
