"""Production implementation of GitHub issue operations."""

import json

from monosync.gateway.github.api import build_gh_api_command
from monosync.gateway.github.issue.abc import GitHubIssueGateway
from monosync.subprocess_utils import execute_gh_command, run_subprocess_with_context


class RealGitHubIssueGateway(GitHubIssueGateway):
    """Production implementation using the REST API through `gh api`."""

    def create_comment(self, repo_name: str, number: int, body: str) -> None:
        cmd = build_gh_api_command(
            f"repos/{repo_name}/issues/{number}/comments",
            method="POST",
            fields={"body": body},
        )
        execute_gh_command(cmd)

    def add_labels(self, repo_name: str, number: int, labels: list[str]) -> None:
        # labels must be sent as a JSON array, which -f/-F cannot express
        cmd = ["gh", "api", f"repos/{repo_name}/issues/{number}/labels", "--input", "-"]
        run_subprocess_with_context(
            cmd,
            operation_context=f"add labels to {repo_name}#{number}",
            input_text=json.dumps({"labels": labels}),
        )
