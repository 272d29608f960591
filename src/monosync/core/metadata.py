"""Structured metadata embedded in PR bodies and commit messages.

PR bodies carry an HTML comment block:

    <!--
    meta:
    # lines starting with '#' are explanations and are ignored
    publicTitle: Add retry support
    publicBody: First line
      continued on a second line
    -->

Commit messages carry single-line trailers:

    meta:syncedFrom:org/parent@3f2a...;skipPublic

Both parsers are deliberately forgiving: whitespace and indentation are
irregular in hand-edited text, and malformed input degrades to a partial or
empty mapping instead of raising.
"""

import re
from collections.abc import Mapping

META_MARKER = "meta:"

# Key set on every commit replayed by the commit copier; value is "<repo>@<sha>"
SYNCED_FROM_KEY = "syncedFrom"

# Value of publicTitle that means "reuse the primary PR's title"
MATCH_TITLE_SENTINEL = "MATCH"

_COMMENT_LINE_RE = re.compile(r"^\s*#")
_KEY_LINE_RE = re.compile(r"^(\w+) *:(.*)$")
_COMMENT_OPEN = "<!--"
_COMMENT_CLOSE = "-->"


def parse_pr_body_meta(body: str) -> dict[str, str]:
    """Parse the first HTML comment block containing `meta:` out of a PR body.

    Each `key: value` line starts a new key; any other line is appended to the
    current key's value, newline-joined. Parsing stops at the block's `-->`.

    Args:
        body: Full PR body (markdown)

    Returns:
        Mapping of key -> value; empty if there is no meta block
    """
    result: dict[str, str] = {}
    normalized = re.sub(r"\r\n|\r", "\n", body)

    for comment in normalized.split(_COMMENT_OPEN):
        if META_MARKER not in comment:
            continue

        current_key: str | None = None
        buffer = ""
        for raw_line in comment.split("\n"):
            if not raw_line or _COMMENT_LINE_RE.match(raw_line):
                continue
            line = raw_line.strip()
            if line.startswith(META_MARKER):
                continue

            has_terminator = _COMMENT_CLOSE in line
            line = line.replace(_COMMENT_CLOSE, "", 1).strip()

            if line:
                match = _KEY_LINE_RE.match(line)
                if match is not None:
                    if current_key is not None and buffer:
                        result[current_key] = buffer
                    current_key = match.group(1)
                    buffer = match.group(2).strip()
                elif current_key is not None:
                    buffer = f"{buffer}\n{line}" if buffer else line

            if has_terminator:
                break

        if current_key is not None and buffer:
            result[current_key] = buffer
        # Only the first meta block counts
        break

    return result


def parse_commit_meta(message: str) -> dict[str, str | bool]:
    """Parse `meta:` lines from a commit message.

    Each line starting with `meta:` holds `;`-separated `key:value` pairs. A key
    without a value is True. Later lines override earlier duplicate keys.
    """
    result: dict[str, str | bool] = {}

    for line in message.split("\n"):
        if not line.startswith(META_MARKER):
            continue
        for prop in line.strip()[len(META_MARKER) :].split(";"):
            key, _, value = prop.partition(":")
            key = key.strip()
            if not key:
                continue
            value = value.strip()
            result[key] = value if value else True

    return result


def format_commit_meta(meta: Mapping[str, str | bool]) -> str:
    """Render a `meta:` line that parse_commit_meta() reads back."""
    props = [key if value is True else f"{key}:{value}" for key, value in meta.items()]
    return META_MARKER + ";".join(props)


def get_synced_from(message: str) -> str | None:
    """Return the "<repo>@<sha>" a replayed commit came from, or None for original commits."""
    value = parse_commit_meta(message).get(SYNCED_FROM_KEY)
    if isinstance(value, str):
        return value
    return None


def is_replayed_commit(message: str) -> bool:
    return get_synced_from(message) is not None


def unescape_newlines(text: str) -> str:
    r"""Turn literal `\n` sequences (as typed into a one-line meta value) into newlines."""
    return text.replace("\\n", "\n")
