"""Fake commit copier for testing."""

from monosync.gateway.commit_copier.abc import CommitCopier
from monosync.gateway.commit_copier.types import CopyResult, CopySource, CopyTarget


class FakeCommitCopier(CommitCopier):
    """Records copy requests without touching git.

    By default every request "copies" the source after_sha. Configure
    copy_results to return specific results per (source repo, after_sha),
    or copies_commits=False to simulate a range with nothing to replay.
    """

    def __init__(
        self,
        *,
        copy_results: dict[tuple[str, str], CopyResult] | None = None,
        copies_commits: bool = True,
    ) -> None:
        self._copy_results = copy_results or {}
        self._copies_commits = copies_commits
        self._copy_calls: list[tuple[CopySource, CopyTarget]] = []

    def copy_commits(self, source: CopySource, target: CopyTarget) -> CopyResult:
        self._copy_calls.append((source, target))
        configured = self._copy_results.get((source.repo_name, source.after_sha))
        if configured is not None:
            return configured
        if not self._copies_commits:
            return CopyResult(copied_shas=())
        return CopyResult(copied_shas=(source.after_sha,))

    @property
    def copy_calls(self) -> list[tuple[CopySource, CopyTarget]]:
        return list(self._copy_calls)
