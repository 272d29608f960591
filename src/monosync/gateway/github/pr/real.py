"""Production implementation of GitHub pull request operations."""

import logging

from monosync.gateway.github.api import (
    build_gh_api_command,
    gh_api_json,
    gh_api_json_lines,
    read_with_retry,
)
from monosync.gateway.github.parsing import parse_commit, parse_pull_request, split_repo_name
from monosync.gateway.github.pr.abc import GitHubPrGateway
from monosync.gateway.github.types import (
    CommitInfo,
    PRNotFound,
    PRStateUpdate,
    PullRequestInfo,
)
from monosync.gateway.time.abc import Time
from monosync.subprocess_utils import execute_gh_command

logger = logging.getLogger(__name__)


class RealGitHubPrGateway(GitHubPrGateway):
    """Production implementation using the REST API through `gh api`.

    Reads are retried on transient failures; writes are not.
    """

    def __init__(self, time: Time) -> None:
        self._time = time

    # --- PR query operations ---

    def get_pr(self, repo_name: str, number: int) -> PullRequestInfo | PRNotFound:
        cmd = build_gh_api_command(f"repos/{repo_name}/pulls/{number}")
        data = read_with_retry(self._time, f"get PR {repo_name}#{number}", cmd)
        if data is None:
            return PRNotFound(repo_name=repo_name, number=number)
        return parse_pull_request(data)

    def get_pr_for_branch(
        self, repo_name: str, branch: str, *, include_closed: bool
    ) -> PullRequestInfo | PRNotFound:
        owner, _ = split_repo_name(repo_name)
        cmd = build_gh_api_command(
            f"repos/{repo_name}/pulls",
            method="GET",
            fields={
                "head": f"{owner}:{branch}",
                "state": "all" if include_closed else "open",
                "sort": "updated",
                "direction": "desc",
                "per_page": "1",
            },
        )
        data = read_with_retry(self._time, f"find PR for {repo_name}:{branch}", cmd)
        if not data:
            return PRNotFound(repo_name=repo_name, branch=branch)
        return parse_pull_request(data[0])

    def get_pr_files(self, repo_name: str, number: int) -> list[str]:
        # --paginate follows Link headers, so PRs with more than 100 files are complete
        cmd = build_gh_api_command(
            f"repos/{repo_name}/pulls/{number}/files",
            paginate=True,
            jq=".[].filename",
        )
        stdout = execute_gh_command(cmd)
        return [line for line in stdout.splitlines() if line]

    def get_pr_commits(self, repo_name: str, number: int) -> list[CommitInfo]:
        cmd = build_gh_api_command(
            f"repos/{repo_name}/pulls/{number}/commits",
            paginate=True,
            jq=".[] | tojson",
        )
        return [parse_commit(item) for item in gh_api_json_lines(cmd)]

    # --- PR mutations ---

    def create_pr(
        self, repo_name: str, *, head: str, base: str, title: str, body: str
    ) -> PullRequestInfo:
        cmd = build_gh_api_command(
            f"repos/{repo_name}/pulls",
            method="POST",
            fields={"title": title, "head": head, "base": base, "body": body},
            typed_fields={"maintainer_can_modify": "true"},
        )
        data = gh_api_json(cmd)
        created = parse_pull_request(data)
        logger.debug("Created PR %s (%s)", created.ref, created.url)
        return created

    def merge_pr(
        self, repo_name: str, number: int, *, commit_title: str, commit_message: str
    ) -> None:
        cmd = build_gh_api_command(
            f"repos/{repo_name}/pulls/{number}/merge",
            method="PUT",
            fields={
                "commit_title": commit_title,
                "commit_message": commit_message,
                "merge_method": "squash",
            },
        )
        execute_gh_command(cmd)

    def set_pr_state(self, repo_name: str, number: int, state: PRStateUpdate) -> None:
        cmd = build_gh_api_command(
            f"repos/{repo_name}/pulls/{number}",
            method="PATCH",
            fields={"state": state},
        )
        execute_gh_command(cmd)

    def update_pr_title_and_body(self, repo_name: str, number: int, title: str, body: str) -> None:
        cmd = build_gh_api_command(
            f"repos/{repo_name}/pulls/{number}",
            method="PATCH",
            fields={"title": title, "body": body},
        )
        execute_gh_command(cmd)
