"""Configuration loading for monosync.

Example config.toml:

    [sync]
    aggregate_status_suffix = "-monorepo/ci"
    legacy_partner_lookup = false
    auto_sync_label = "auto-sync"
    work_dir = "~/.monosync/work"

    [[relationship]]
    parent = "org/parent"
    child = "org/api"
    path = "services/api"
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from monosync.core.relationships import RelationshipDirectory, RepositoryRelationship

CONFIG_ENV_VAR = "MONOSYNC_CONFIG"

DEFAULT_AGGREGATE_STATUS_SUFFIX = "-monorepo/ci"
DEFAULT_AUTO_SYNC_LABEL = "auto-sync"
DEFAULT_BOT_SIGNATURE = "\n\n<sup>Generated by monosync</sup>"
DEFAULT_COMMITTER_NAME = "monosync"
DEFAULT_COMMITTER_EMAIL = "monosync@users.noreply.github.com"


def default_config_path() -> Path:
    """Return $MONOSYNC_CONFIG if set, else ~/.monosync/config.toml.

    Not cached so tests can monkeypatch the environment and Path.home().
    """
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env).expanduser()
    return Path.home() / ".monosync" / "config.toml"


@dataclass(frozen=True)
class SyncConfig:
    """In-memory representation of config.toml."""

    relationships: tuple[RepositoryRelationship, ...]
    aggregate_status_suffix: str
    bot_signature: str
    legacy_partner_lookup: bool
    auto_sync_label: str
    work_dir: Path
    committer_name: str
    committer_email: str
    source_path: Path | None  # None when not loaded from a file

    @staticmethod
    def for_test(
        *,
        relationships: tuple[RepositoryRelationship, ...] = (),
        aggregate_status_suffix: str = DEFAULT_AGGREGATE_STATUS_SUFFIX,
        bot_signature: str = DEFAULT_BOT_SIGNATURE,
        legacy_partner_lookup: bool = False,
        auto_sync_label: str = DEFAULT_AUTO_SYNC_LABEL,
        work_dir: Path = Path("/test/monosync/work"),
    ) -> "SyncConfig":
        return SyncConfig(
            relationships=relationships,
            aggregate_status_suffix=aggregate_status_suffix,
            bot_signature=bot_signature,
            legacy_partner_lookup=legacy_partner_lookup,
            auto_sync_label=auto_sync_label,
            work_dir=work_dir,
            committer_name=DEFAULT_COMMITTER_NAME,
            committer_email=DEFAULT_COMMITTER_EMAIL,
            source_path=None,
        )

    def is_aggregate_context(self, context: str) -> bool:
        """Check whether a status context was written by status aggregation."""
        return context.endswith(self.aggregate_status_suffix)

    def aggregate_status_context(self, primary_repo_name: str) -> str:
        """Context name for the aggregated status of PRs in primary_repo_name."""
        short_name = primary_repo_name.rsplit("/", 1)[-1]
        return f"{short_name}{self.aggregate_status_suffix}"

    def build_directory(self) -> RelationshipDirectory:
        return RelationshipDirectory(self.relationships)


def _require_str(table: dict[str, Any], key: str, where: str) -> str:
    value = table.get(key)
    if not isinstance(value, str) or not value:
        msg = f"Missing or invalid '{key}' in {where}"
        raise ValueError(msg)
    return value


def parse_sync_config(data: dict[str, Any], *, source_path: Path | None) -> SyncConfig:
    """Build SyncConfig from parsed TOML data.

    Raises:
        ValueError: If a relationship entry is incomplete
    """
    sync = data.get("sync", {})
    source = str(source_path) if source_path is not None else "config"

    relationships: list[RepositoryRelationship] = []
    for index, entry in enumerate(data.get("relationship", [])):
        where = f"{source} [[relationship]] #{index + 1}"
        relationships.append(
            RepositoryRelationship(
                parent=_require_str(entry, "parent", where),
                child=_require_str(entry, "child", where),
                path=_require_str(entry, "path", where),
            )
        )

    work_dir = sync.get("work_dir")
    return SyncConfig(
        relationships=tuple(relationships),
        aggregate_status_suffix=str(
            sync.get("aggregate_status_suffix", DEFAULT_AGGREGATE_STATUS_SUFFIX)
        ),
        bot_signature=str(sync.get("bot_signature", DEFAULT_BOT_SIGNATURE)),
        legacy_partner_lookup=bool(sync.get("legacy_partner_lookup", False)),
        auto_sync_label=str(sync.get("auto_sync_label", DEFAULT_AUTO_SYNC_LABEL)),
        work_dir=(
            Path(str(work_dir)).expanduser()
            if work_dir is not None
            else Path.home() / ".monosync" / "work"
        ),
        committer_name=str(sync.get("committer_name", DEFAULT_COMMITTER_NAME)),
        committer_email=str(sync.get("committer_email", DEFAULT_COMMITTER_EMAIL)),
        source_path=source_path,
    )


def load_sync_config(config_path: Path) -> SyncConfig:
    """Load config.toml if present; otherwise return defaults with no relationships.

    Raises:
        ValueError: If the file is present but malformed
    """
    if not config_path.exists():
        return parse_sync_config({}, source_path=config_path)

    data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    config = parse_sync_config(data, source_path=config_path)
    # Fail at load time on a bad tree (two parents, self-parent)
    config.build_directory()
    return config
