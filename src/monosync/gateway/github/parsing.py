"""Parsing utilities for GitHub REST API responses."""

from datetime import datetime
from typing import Any

from monosync.gateway.github.types import CommitInfo, PRState, PullRequestInfo, StatusContext


def split_repo_name(repo_name: str) -> tuple[str, str]:
    """Split "owner/repo" into (owner, repo).

    Raises:
        ValueError: If repo_name is not exactly two non-empty segments
    """
    parts = repo_name.split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        msg = f"Invalid repository name '{repo_name}', expected 'owner/repo'"
        raise ValueError(msg)
    return parts[0], parts[1]


def is_not_found_error(error: RuntimeError) -> bool:
    """Check whether a failed gh api call was an HTTP 404."""
    return "HTTP 404" in str(error)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a GitHub ISO-8601 timestamp ("2024-01-15T10:30:00Z")."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _pr_state(data: dict[str, Any]) -> PRState:
    if data.get("merged_at") or data.get("merged"):
        return "MERGED"
    if data["state"] == "open":
        return "OPEN"
    return "CLOSED"


def parse_pull_request(data: dict[str, Any]) -> PullRequestInfo:
    """Convert a REST pull request object into PullRequestInfo."""
    base = data["base"]
    head = data["head"]
    base_repo_name = base["repo"]["full_name"]
    # head.repo is null when the fork has been deleted
    head_repo = head.get("repo")
    head_repo_name = head_repo["full_name"] if head_repo else base_repo_name
    user = data.get("user")

    return PullRequestInfo(
        number=data["number"],
        repo_name=base_repo_name,
        state=_pr_state(data),
        title=data.get("title") or "",
        body=data.get("body") or "",
        url=data["html_url"],
        base_ref=base["ref"],
        base_sha=base["sha"],
        head_ref=head["ref"],
        head_sha=head["sha"],
        base_repo_name=base_repo_name,
        head_repo_name=head_repo_name,
        author_login=user["login"] if user else None,
        merge_commit_sha=data.get("merge_commit_sha"),
        closed_at=parse_timestamp(data.get("closed_at")),
        updated_at=parse_timestamp(data.get("updated_at")),
    )


def parse_combined_status(data: dict[str, Any]) -> list[StatusContext]:
    """Convert a combined commit status response into StatusContext entries."""
    return [
        StatusContext(context=status["context"], state=str(status["state"]).upper())
        for status in data.get("statuses", [])
    ]


def parse_commit(data: dict[str, Any]) -> CommitInfo:
    """Convert a REST commit object (from /pulls/{n}/commits) into CommitInfo."""
    commit_author = data["commit"]["author"]
    author = data.get("author")
    return CommitInfo(
        sha=data["sha"],
        message=data["commit"]["message"],
        author_login=author["login"] if author else None,
        author_name=commit_author["name"],
        author_email=commit_author["email"],
    )
