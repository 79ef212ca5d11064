"""lockstep revisions command - show the HEAD of every tracked checkout."""

from __future__ import annotations

import json
from pathlib import Path

import click

from lockstep.cli.utils import load_run_config
from lockstep.core.errors import LockstepError
from lockstep.runner import LockstepRunner


@click.command()
@click.argument(
    "workdir",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Config file (default: lockstep.yaml in WORKDIR, if present)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def revisions_command(
    ctx: click.Context, workdir: Path, config_path: Path | None, as_json: bool
) -> None:
    """Show the revision each tracked checkout is at.

    These are the revisions every other repository is expected to pin.
    """
    workdir = workdir.resolve()
    config = load_run_config(ctx, workdir, config_path)
    try:
        checkouts = LockstepRunner(config, workdir).collect_checkouts()
    except LockstepError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(
            json.dumps(
                [
                    {"name": c.name, "revision": c.revision, "branch": c.branch}
                    for c in checkouts
                ]
            )
        )
        return

    for checkout in checkouts:
        click.echo(f"{checkout.name} {checkout.revision} ({checkout.branch or 'detached'})")
