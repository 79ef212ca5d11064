"""Writes discrepancy lines as checkers produce them."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import IO

import click

from lockstep.checks.models import Discrepancy


class Reporter:
    """Prints one line per discrepancy, paths relative to the working directory."""

    def __init__(self, base: Path | None = None, file: IO[str] | None = None) -> None:
        self._base = base
        self._file = file
        self._lines: list[str] = []

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    def emit(self, discrepancies: Iterable[Discrepancy]) -> None:
        for discrepancy in discrepancies:
            line = discrepancy.render(self._base)
            self._lines.append(line)
            click.echo(line, file=self._file)
