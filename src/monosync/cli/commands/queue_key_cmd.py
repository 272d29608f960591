import click

from monosync.core.events import sync_queue_key
from monosync.gateway.github.types import PullRequestRef
from monosync.output import machine_output


@click.command("queue-key")
@click.argument("repo_name", metavar="REPO")
@click.argument("number", type=int)
@click.option("--prefix", default=None, help="Namespace prepended to the key")
def queue_key_cmd(repo_name: str, number: int, prefix: str | None) -> None:
    """Print the key that serializes syncs of REPO#NUMBER."""
    machine_output(sync_queue_key(PullRequestRef(repo_name=repo_name, number=number), prefix))
