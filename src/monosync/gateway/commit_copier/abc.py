"""Abstract commit copier: replays commits from one repository into another."""

from abc import ABC, abstractmethod

from monosync.gateway.commit_copier.types import CopyResult, CopySource, CopyTarget


class CommitCopier(ABC):
    """Replays a commit range onto a branch of another repository.

    Commits that are themselves replays (their message carries the
    `syncedFrom` commit meta) are never replayed again. Conflicts are not
    resolved: a patch that does not apply raises RuntimeError.
    """

    @abstractmethod
    def copy_commits(self, source: CopySource, target: CopyTarget) -> CopyResult:
        """Replay source commits onto target.branch and push it.

        Returns:
            CopyResult listing the replayed source SHAs (empty if none applied)

        Raises:
            RuntimeError: If a git command fails
        """
        ...
