from collections.abc import MutableMapping, MutableSequence
from pathlib import Path
from typing import Any, cast

import click
import tomlkit

from monosync.cli.ensure import Ensure
from monosync.core.context import SyncContext
from monosync.core.relationships import RelationshipDirectory, RepositoryRelationship
from monosync.output import machine_output, user_output


def write_relationship_to_config(config_path: Path, relationship: RepositoryRelationship) -> None:
    """Append a [[relationship]] entry to config.toml.

    Preserves existing formatting and comments using tomlkit.
    """
    if not config_path.parent.exists():
        config_path.parent.mkdir(parents=True)

    # Load existing file or create new document
    if config_path.exists():
        with config_path.open("r", encoding="utf-8") as f:
            doc = tomlkit.load(f)
    else:
        doc = tomlkit.document()

    if "relationship" not in doc:
        assert isinstance(doc, MutableMapping), f"Expected MutableMapping, got {type(doc)}"
        cast(dict[str, Any], doc)["relationship"] = tomlkit.aot()

    entry = tomlkit.table()
    entry["parent"] = relationship.parent
    entry["child"] = relationship.child
    entry["path"] = relationship.path
    relationships = doc["relationship"]
    assert isinstance(relationships, MutableSequence), type(relationships)
    relationships.append(entry)

    with config_path.open("w", encoding="utf-8") as f:
        tomlkit.dump(doc, f)


@click.group("config")
def config_group() -> None:
    """Manage monosync configuration."""


@config_group.command("path")
@click.pass_obj
def config_path_cmd(ctx: SyncContext) -> None:
    """Print the config file in use."""
    Ensure.invariant(ctx.config.source_path is not None, "Config was not loaded from a file")
    machine_output(str(ctx.config.source_path))


@config_group.command("add-relationship")
@click.argument("parent")
@click.argument("child")
@click.argument("path")
@click.pass_obj
def add_relationship_cmd(ctx: SyncContext, parent: str, child: str, path: str) -> None:
    """Declare CHILD (owner/repo) as split out of PATH in PARENT (owner/repo)."""
    config_path = ctx.config.source_path
    Ensure.invariant(config_path is not None, "Config was not loaded from a file")
    assert config_path is not None

    relationship = RepositoryRelationship(parent=parent, child=child, path=path.strip("/"))
    try:
        RelationshipDirectory((*ctx.relationships.relationships, relationship))
    except ValueError as e:
        Ensure.fail(str(e))

    write_relationship_to_config(config_path, relationship)
    user_output(f"Added {child} at {relationship.path}/ in {parent} to {config_path}")
