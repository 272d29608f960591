"""Type definitions for GitHub operations."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

PRState = Literal["OPEN", "CLOSED", "MERGED"]

# Target state for PATCH /pulls/{number}
PRStateUpdate = Literal["open", "closed"]

# Commit status states as written through the REST API (lowercase)
CommitStatusState = Literal["error", "failure", "pending", "success"]


@dataclass(frozen=True)
class PullRequestRef:
    """Minimal identity of a pull request."""

    repo_name: str  # "owner/repo"
    number: int

    def __str__(self) -> str:
        return f"{self.repo_name}#{self.number}"


@dataclass(frozen=True)
class PullRequestInfo:
    """Information about a GitHub pull request, fetched fresh for every sync."""

    number: int
    repo_name: str  # Base repository, "owner/repo"
    state: PRState
    title: str
    body: str
    url: str
    base_ref: str
    base_sha: str
    head_ref: str
    head_sha: str
    base_repo_name: str
    head_repo_name: str
    author_login: str | None
    merge_commit_sha: str | None
    closed_at: datetime | None
    updated_at: datetime | None

    @property
    def ref(self) -> PullRequestRef:
        return PullRequestRef(repo_name=self.repo_name, number=self.number)

    @property
    def is_open(self) -> bool:
        return self.state == "OPEN"

    @property
    def is_merged(self) -> bool:
        return self.state == "MERGED"


@dataclass(frozen=True)
class PRNotFound:
    """Sentinel returned when a PR lookup finds nothing.

    Callers check with isinstance() instead of catching exceptions.
    """

    repo_name: str
    number: int | None = None
    branch: str | None = None


@dataclass(frozen=True)
class StatusContext:
    """A single commit status context.

    state is normalized to upper case (SUCCESS, PENDING, EXPECTED, FAILURE, ERROR).
    """

    context: str
    state: str


@dataclass(frozen=True)
class CommitInfo:
    """A commit that belongs to a pull request."""

    sha: str
    message: str
    author_login: str | None  # None when the commit email has no GitHub account
    author_name: str
    author_email: str
