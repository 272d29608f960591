"""Tests for GitHub REST response parsing."""

from datetime import UTC, datetime

import pytest

from monosync.gateway.github.parsing import (
    is_not_found_error,
    parse_combined_status,
    parse_commit,
    parse_pull_request,
    parse_timestamp,
    split_repo_name,
)
from monosync.gateway.github.types import CommitInfo, StatusContext


def _pr_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "number": 42,
        "state": "open",
        "title": "Add retries",
        "body": None,
        "html_url": "https://github.com/org/parent/pull/42",
        "base": {"ref": "main", "sha": "b1", "repo": {"full_name": "org/parent"}},
        "head": {"ref": "feature", "sha": "h1", "repo": {"full_name": "alice/parent"}},
        "user": {"login": "alice"},
        "merged_at": None,
        "merge_commit_sha": None,
        "closed_at": None,
        "updated_at": "2024-01-15T10:30:00Z",
    }
    payload.update(overrides)
    return payload


def test_parse_open_pull_request() -> None:
    pr = parse_pull_request(_pr_payload())

    assert pr.number == 42
    assert pr.repo_name == "org/parent"
    assert pr.state == "OPEN"
    assert pr.body == ""
    assert pr.head_repo_name == "alice/parent"
    assert pr.author_login == "alice"
    assert pr.updated_at == datetime(2024, 1, 15, 10, 30, tzinfo=UTC)


def test_parse_merged_pull_request() -> None:
    pr = parse_pull_request(
        _pr_payload(state="closed", merged_at="2024-01-16T00:00:00Z", merge_commit_sha="m1")
    )

    assert pr.state == "MERGED"
    assert pr.is_merged
    assert pr.merge_commit_sha == "m1"


def test_parse_closed_pull_request_with_deleted_fork() -> None:
    pr = parse_pull_request(
        _pr_payload(
            state="closed",
            head={"ref": "feature", "sha": "h1", "repo": None},
            user=None,
        )
    )

    assert pr.state == "CLOSED"
    assert pr.head_repo_name == "org/parent"
    assert pr.author_login is None


def test_parse_combined_status_upper_cases_states() -> None:
    statuses = parse_combined_status(
        {"state": "pending", "statuses": [{"context": "ci/build", "state": "pending"}]}
    )

    assert statuses == [StatusContext(context="ci/build", state="PENDING")]


def test_parse_commit_without_github_author() -> None:
    commit = parse_commit(
        {
            "sha": "c1",
            "commit": {"message": "Fix", "author": {"name": "Eve", "email": "eve@x"}},
            "author": None,
        }
    )

    assert commit == CommitInfo(
        sha="c1", message="Fix", author_login=None, author_name="Eve", author_email="eve@x"
    )


def test_split_repo_name() -> None:
    assert split_repo_name("org/parent") == ("org", "parent")
    with pytest.raises(ValueError, match="owner/repo"):
        split_repo_name("org/parent/extra")


def test_parse_timestamp_empty() -> None:
    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None


def test_is_not_found_error() -> None:
    assert is_not_found_error(RuntimeError("gh: Not Found (HTTP 404)"))
    assert not is_not_found_error(RuntimeError("gh: Server Error (HTTP 500)"))
