"""Lockstep CLI - lockstep command."""

import click

from lockstep.cli.check import check_command
from lockstep.cli.revisions import revisions_command
from lockstep.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="lockstep")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Lockstep - keep crucible, propolis and omicron on the same revisions.

    Reads checkouts in the working directory, never remotes, and prints the
    edits needed to bring them in line. No output means nothing to do.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(check_command, name="check")
cli.add_command(revisions_command, name="revisions")


if __name__ == "__main__":
    cli()
