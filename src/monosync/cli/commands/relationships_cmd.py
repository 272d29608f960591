"""List configured repository relationships."""

import click
from rich.console import Console
from rich.table import Table

from monosync.core.context import SyncContext
from monosync.output import user_output


@click.command("relationships")
@click.pass_obj
def relationships_cmd(ctx: SyncContext) -> None:
    """Show parent/child repositories and the child's directory in the parent."""
    relationships = ctx.relationships.relationships
    if not relationships:
        user_output("No relationships configured")
        return

    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Parent", style="cyan", no_wrap=True)
    table.add_column("Child", style="yellow", no_wrap=True)
    table.add_column("Path", no_wrap=True)

    for relationship in relationships:
        table.add_row(relationship.parent, relationship.child, f"{relationship.path}/")

    console = Console(stderr=True, force_terminal=True, width=200)
    console.print(table)
