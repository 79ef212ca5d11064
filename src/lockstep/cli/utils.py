"""CLI utilities."""

from pathlib import Path
from typing import Any

import click

from lockstep.config.loader import load_config
from lockstep.config.models import LockstepConfig
from lockstep.core.errors import LockstepError
from lockstep.core.logging import configure_logging


def load_run_config(
    ctx: click.Context, workdir: Path, config_path: Path | None, **overrides: Any
) -> LockstepConfig:
    """Load config for ``workdir`` and apply its logging section.

    ``-v`` keeps debug logging regardless of what the config asks for.

    Raises:
        click.ClickException: The config cannot be loaded.
    """
    try:
        config = load_config(workdir, config_path, **overrides)
    except LockstepError as e:
        raise click.ClickException(str(e)) from e

    if not (ctx.obj or {}).get("verbose"):
        configure_logging(config=config.logging)
    return config
