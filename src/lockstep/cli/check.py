"""lockstep check command - report every inconsistency between checkouts."""

from __future__ import annotations

from pathlib import Path
from typing import Any

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
@click.option(
    "--pending",
    type=click.Choice(["stop", "continue"]),
    default=None,
    help="On an artifact that is not built yet: stop checking artifacts, or continue",
)
@click.option("--no-artifacts", is_flag=True, help="Skip prebuilt artifact checks")
@click.pass_context
def check_command(
    ctx: click.Context,
    workdir: Path,
    config_path: Path | None,
    pending: str | None,
    no_artifacts: bool,
) -> None:
    """Print the edits needed to bring all checkouts in line.

    WORKDIR holds one checkout per tracked repository (default: current
    directory). Exits 0 whether or not edits are needed.
    """
    workdir = workdir.resolve()
    artifacts: dict[str, Any] = {}
    if pending is not None:
        artifacts["pending_policy"] = pending
    if no_artifacts:
        artifacts["enabled"] = False
    overrides = {"artifacts": artifacts} if artifacts else {}

    config = load_run_config(ctx, workdir, config_path, **overrides)
    try:
        LockstepRunner(config, workdir).run()
    except LockstepError as e:
        raise click.ClickException(str(e)) from e
