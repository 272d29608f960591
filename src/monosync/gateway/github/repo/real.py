"""Production implementation of GitHub repository operations."""

from urllib.parse import quote

from monosync.gateway.github.api import build_gh_api_command, read_with_retry
from monosync.gateway.github.parsing import parse_combined_status
from monosync.gateway.github.repo.abc import GitHubRepoGateway
from monosync.gateway.github.types import CommitStatusState, StatusContext
from monosync.gateway.time.abc import Time
from monosync.subprocess_utils import execute_gh_command


class RealGitHubRepoGateway(GitHubRepoGateway):
    """Production implementation using the REST API through `gh api`."""

    def __init__(self, time: Time) -> None:
        self._time = time

    def get_branch_head_sha(self, repo_name: str, branch: str) -> str | None:
        # Branch names such as "org/repo/42" contain slashes, which the refs API accepts
        cmd = build_gh_api_command(f"repos/{repo_name}/git/ref/heads/{quote(branch, safe='/')}")
        data = read_with_retry(self._time, f"get ref {repo_name}:{branch}", cmd)
        if data is None:
            return None
        return data["object"]["sha"]

    def get_commit_statuses(self, repo_name: str, sha: str) -> list[StatusContext]:
        # The combined status lists 30 contexts unless asked for more
        cmd = build_gh_api_command(
            f"repos/{repo_name}/commits/{sha}/status",
            method="GET",
            fields={"per_page": "100"},
        )
        data = read_with_retry(self._time, f"get statuses {repo_name}@{sha}", cmd)
        if data is None:
            return []
        return parse_combined_status(data)

    def create_branch(self, repo_name: str, branch: str, sha: str) -> None:
        cmd = build_gh_api_command(
            f"repos/{repo_name}/git/refs",
            method="POST",
            fields={"ref": f"refs/heads/{branch}", "sha": sha},
        )
        execute_gh_command(cmd)

    def set_commit_status(
        self,
        repo_name: str,
        sha: str,
        *,
        context: str,
        state: CommitStatusState,
        description: str | None,
    ) -> None:
        fields = {"context": context, "state": state}
        if description is not None:
            fields["description"] = description
        cmd = build_gh_api_command(
            f"repos/{repo_name}/statuses/{sha}", method="POST", fields=fields
        )
        execute_gh_command(cmd)

    def ensure_label(self, repo_name: str, name: str, *, color: str, description: str) -> None:
        lookup = build_gh_api_command(f"repos/{repo_name}/labels/{quote(name, safe='')}")
        if read_with_retry(self._time, f"get label {name} in {repo_name}", lookup) is not None:
            return
        cmd = build_gh_api_command(
            f"repos/{repo_name}/labels",
            method="POST",
            fields={"name": name, "color": color, "description": description},
        )
        execute_gh_command(cmd)
