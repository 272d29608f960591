"""Production commit copier driving the git CLI in a scratch clone."""

import logging
import tempfile
from pathlib import Path

from monosync.core.metadata import SYNCED_FROM_KEY, format_commit_meta, is_replayed_commit
from monosync.gateway.commit_copier.abc import CommitCopier
from monosync.gateway.commit_copier.types import CopyResult, CopySource, CopyTarget
from monosync.subprocess_utils import run_subprocess_with_context

logger = logging.getLogger(__name__)

# NUL-separated so names containing spaces or commas survive
_AUTHOR_FORMAT = "%an%x00%ae%x00%aI"


def _repo_url(repo_name: str) -> str:
    return f"https://github.com/{repo_name}.git"


class RealCommitCopier(CommitCopier):
    """Replays commits with `git diff-tree | git apply` in a temporary clone.

    Credentials come from the environment's git configuration (for example
    after `gh auth setup-git`).
    """

    def __init__(self, work_dir: Path, *, committer_name: str, committer_email: str) -> None:
        self._work_dir = work_dir
        self._committer_name = committer_name
        self._committer_email = committer_email

    def copy_commits(self, source: CopySource, target: CopyTarget) -> CopyResult:
        self._work_dir.mkdir(parents=True, exist_ok=True)
        with tempfile.TemporaryDirectory(dir=self._work_dir, prefix="copy-") as tmp:
            checkout = Path(tmp) / "target"
            self._git(
                [
                    "clone",
                    "--quiet",
                    "--no-tags",
                    "--single-branch",
                    "--branch",
                    target.branch,
                    _repo_url(target.repo_name),
                    str(checkout),
                ],
                cwd=Path(tmp),
                context=f"clone {target.repo_name}",
            )

            head = self._git(["rev-parse", "HEAD"], cwd=checkout, context="read HEAD").strip()
            if head != target.sha:
                logger.debug(
                    "%s:%s moved from %s to %s; replaying onto current head",
                    target.repo_name,
                    target.branch,
                    target.sha,
                    head,
                )

            self._git(
                [
                    "fetch",
                    "--quiet",
                    "--no-tags",
                    _repo_url(source.repo_name),
                    source.before_sha,
                    source.after_sha,
                ],
                cwd=checkout,
                context=f"fetch {source.repo_name}",
            )

            rev_list = self._git(
                [
                    "rev-list",
                    "--reverse",
                    "--no-merges",
                    f"{source.before_sha}..{source.after_sha}",
                ],
                cwd=checkout,
                context="list commits to replay",
            )

            copied: list[str] = []
            for sha in rev_list.split():
                if self._replay_commit(checkout, source, target, sha):
                    copied.append(sha)

            if copied:
                self._git(
                    ["push", "--quiet", "origin", f"HEAD:refs/heads/{target.branch}"],
                    cwd=checkout,
                    context=f"push {target.repo_name}:{target.branch}",
                )

        logger.debug(
            "Replayed %d commit(s) from %s onto %s:%s",
            len(copied),
            source.repo_name,
            target.repo_name,
            target.branch,
        )
        return CopyResult(copied_shas=tuple(copied))

    def _replay_commit(
        self, checkout: Path, source: CopySource, target: CopyTarget, sha: str
    ) -> bool:
        message = self._git(["log", "-1", "--format=%B", sha], cwd=checkout, context="read message")
        if is_replayed_commit(message):
            logger.debug("Skipping %s: already a replayed commit", sha)
            return False

        diff_cmd = ["diff-tree", "-p", "--binary"]
        if source.sub_path:
            diff_cmd.append(f"--relative={source.sub_path}")
        diff_cmd.extend([f"{sha}^", sha])
        patch = self._git(diff_cmd, cwd=checkout, context=f"diff {sha}")
        if not patch.strip():
            logger.debug("Skipping %s: no changes in scope", sha)
            return False

        apply_cmd = ["apply", "--index"]
        if target.sub_path:
            apply_cmd.append(f"--directory={target.sub_path}")
        self._git(apply_cmd, cwd=checkout, context=f"apply {sha}", input_text=patch)

        author = self._git(
            ["log", "-1", f"--format={_AUTHOR_FORMAT}", sha], cwd=checkout, context="read author"
        )
        author_name, author_email, author_date = author.strip().split("\x00")

        if target.generic_message:
            subject = f"Sync changes from {source.repo_name}"
        else:
            subject = message.strip()
        trailer = format_commit_meta({SYNCED_FROM_KEY: f"{source.repo_name}@{sha}"})

        self._git(
            [
                "-c",
                f"user.name={self._committer_name}",
                "-c",
                f"user.email={self._committer_email}",
                "commit",
                "--quiet",
                "--author",
                f"{author_name} <{author_email}>",
                "--date",
                author_date,
                "-m",
                f"{subject}\n\n{trailer}",
            ],
            cwd=checkout,
            context=f"commit replay of {sha}",
        )
        return True

    def _git(
        self, args: list[str], *, cwd: Path, context: str, input_text: str | None = None
    ) -> str:
        result = run_subprocess_with_context(
            ["git", *args],
            operation_context=context,
            cwd=cwd,
            input_text=input_text,
        )
        return result.stdout
