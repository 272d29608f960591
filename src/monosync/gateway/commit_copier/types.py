"""Types for commit replay between repositories."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CopySource:
    """Commit range to replay: (before_sha, after_sha] in repo_name.

    sub_path limits the replay to one subdirectory, whose prefix is stripped.
    """

    repo_name: str
    before_sha: str
    after_sha: str
    sub_path: str | None = None


@dataclass(frozen=True)
class CopyTarget:
    """Where replayed commits land.

    sub_path prefixes every replayed path. generic_message replaces the
    original commit message with a short sync message.
    """

    repo_name: str
    branch: str
    sha: str
    sub_path: str | None = None
    generic_message: bool = False


@dataclass(frozen=True)
class CopyResult:
    """Source SHAs that were replayed, in order. Empty when nothing applied."""

    copied_shas: tuple[str, ...]
