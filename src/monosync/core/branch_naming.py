"""Secondary branch naming: `<owner>/<repo>/<number>` of the primary PR.

A secondary PR's head branch names the primary PR it mirrors, which lets
partner resolution go from either side with a string decode. Owners and
repository names containing `/` are not supported (no escaping).
"""

import re

from monosync.gateway.github.types import PullRequestRef

_SECONDARY_BRANCH_RE = re.compile(r"^([^/]+)/([^/]+)/([0-9]+)$")


def encode_secondary_branch_name(primary: PullRequestRef) -> str:
    """Return the branch name a secondary PR mirroring `primary` uses.

    Examples:
        >>> encode_secondary_branch_name(PullRequestRef("org/parent", 42))
        'org/parent/42'
    """
    return f"{primary.repo_name}/{primary.number}"


def is_secondary_branch_name(branch_name: str) -> bool:
    """Check for exactly three `/`-separated non-empty segments, the last numeric.

    Examples:
        >>> is_secondary_branch_name("acme/widgets/42")
        True
        >>> is_secondary_branch_name("feature/login")
        False
        >>> is_secondary_branch_name("acme/widgets/42/extra")
        False
    """
    return _SECONDARY_BRANCH_RE.match(branch_name) is not None


def decode_secondary_branch_name(branch_name: str) -> PullRequestRef:
    """Decode a secondary branch name back to the primary PR reference.

    Callers check is_secondary_branch_name() first.

    Raises:
        ValueError: If branch_name is not a secondary branch name
    """
    match = _SECONDARY_BRANCH_RE.match(branch_name)
    if match is None:
        msg = f"'{branch_name}' is not a secondary branch name (expected owner/repo/number)"
        raise ValueError(msg)
    owner, repo, number = match.groups()
    return PullRequestRef(repo_name=f"{owner}/{repo}", number=int(number))
