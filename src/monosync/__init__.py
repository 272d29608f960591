"""monosync CLI entry point.

This package keeps pull requests synchronized between repositories that are
related as a monorepo parent and its split-out children. See
`monosync --help` for details.
"""

from monosync.cli.cli import cli


def main() -> None:
    """CLI entry point used by the `monosync` console script."""
    cli()
