"""Resolved lockfile models and source identity."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from lockstep.core.sources import SourceLocation


class SourceKind(StrEnum):
    REGISTRY = "registry"
    GIT_BRANCH = "git-branch"
    GIT_TAG = "git-tag"
    GIT_REV = "git-rev"

    @property
    def is_git(self) -> bool:
        return self is not SourceKind.REGISTRY

    @property
    def is_movable(self) -> bool:
        """A branch can resolve to a new revision without editing the declaration."""
        return self is SourceKind.GIT_BRANCH


_QUERY_KEYS = {
    SourceKind.GIT_BRANCH: "branch",
    SourceKind.GIT_TAG: "tag",
    SourceKind.GIT_REV: "rev",
}


@dataclass(frozen=True, slots=True, order=True)
class SourceIdentity:
    """Where a package comes from, regardless of the revision it resolved to.

    ``reference`` is the branch, tag or rev as written in the declaration
    (empty for registries and for a git default branch).
    """

    kind: SourceKind
    location: SourceLocation
    reference: str = ""

    def __str__(self) -> str:
        if self.kind is SourceKind.REGISTRY:
            return f"registry+{self.location}"
        if self.reference:
            return f"git+{self.location}?{_QUERY_KEYS[self.kind]}={self.reference}"
        return f"git+{self.location}"


@dataclass(frozen=True, slots=True)
class SourceDescriptor:
    """A lockfile ``source`` entry: identity plus the precise resolved revision."""

    identity: SourceIdentity
    precise: str | None = None

    @property
    def kind(self) -> SourceKind:
        return self.identity.kind

    @property
    def location(self) -> SourceLocation:
        return self.identity.location


@dataclass(frozen=True, slots=True)
class ResolvedPackage:
    name: str
    version: str
    source: SourceDescriptor | None = None  # None for path dependencies


@dataclass(frozen=True, slots=True)
class Lockfile:
    path: Path
    version: int
    packages: tuple[ResolvedPackage, ...] = ()
