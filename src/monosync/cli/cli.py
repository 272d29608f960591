import logging
from pathlib import Path

import click

from monosync.cli.commands.config import config_group
from monosync.cli.commands.handle_event_cmd import handle_event_cmd
from monosync.cli.commands.queue_key_cmd import queue_key_cmd
from monosync.cli.commands.relationships_cmd import relationships_cmd
from monosync.cli.commands.sync_cmd import sync_cmd
from monosync.cli.ensure import Ensure
from monosync.core.config import default_config_path
from monosync.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="monosync")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: $MONOSYNC_CONFIG or ~/.monosync/config.toml)",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, config_path: Path | None) -> None:
    """Keep pull requests in sync between a monorepo and its split-out repositories."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        resolved_path = config_path if config_path is not None else default_config_path()
        try:
            ctx.obj = create_context(config_path=resolved_path)
        except ValueError as e:
            Ensure.fail(f"Invalid config {resolved_path}: {e}")


cli.add_command(config_group)
cli.add_command(handle_event_cmd)
cli.add_command(queue_key_cmd)
cli.add_command(relationships_cmd)
cli.add_command(sync_cmd)
