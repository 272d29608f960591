"""CLI precondition checks that exit with a user-facing error."""

from typing import NoReturn

import click

from monosync.output import user_output


class Ensure:
    """Helpers that print `Error: <message>` and exit 1 when a check fails."""

    @staticmethod
    def fail(message: str) -> NoReturn:
        user_output(click.style("Error: ", fg="red") + message)
        raise SystemExit(1)

    @staticmethod
    def invariant(condition: bool, message: str) -> None:
        if not condition:
            Ensure.fail(message)
