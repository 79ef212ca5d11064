"""Serializable data models for tracked checkouts."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class TrackedCheckout:
    """A tracked repository's local checkout and the revision it sits at."""

    name: str
    root: Path
    revision: str
    branch: str | None = None

    @property
    def short_revision(self) -> str:
        return self.revision[:7]


def tracked_revisions(checkouts: Iterable[TrackedCheckout]) -> Mapping[str, str]:
    """Read-only ``name -> revision`` table shared by every checker in a run."""
    return MappingProxyType({c.name: c.revision for c in checkouts})
