"""Parsed project manifest models."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from lockstep.core.sources import SourceLocation


@dataclass(frozen=True, slots=True)
class DependencyEdge:
    """One dependency declared by one manifest file."""

    manifest_path: Path
    name: str
    git: str | None = None
    rev: str | None = None
    branch: str | None = None
    tag: str | None = None
    package: str | None = None  # `package = "..."` when the key renames the dependency

    @property
    def sort_key(self) -> tuple[str, str, str, str]:
        """Declaring manifest, then dependency name: the order findings are reported in."""
        return (self.manifest_path.as_posix(), self.name, self.git or "", self.rev or "")

    @property
    def package_name(self) -> str:
        """Name the lockfile records for this dependency."""
        return self.package or self.name

    @property
    def location(self) -> SourceLocation | None:
        return SourceLocation.parse(self.git) if self.git else None

    @property
    def is_pinned(self) -> bool:
        """A git dependency with an exact ``rev`` rather than a branch or tag."""
        return self.git is not None and self.rev is not None

    def targets(self, repository: str) -> bool:
        location = self.location
        return location is not None and location.names_repository(repository)


@dataclass(frozen=True, slots=True)
class WorkspaceDescriptor:
    """``[workspace]`` table: member patterns plus workspace-wide dependencies."""

    members: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    dependencies: tuple[DependencyEdge, ...] = ()


@dataclass(frozen=True, slots=True)
class ManifestModel:
    """One parsed manifest, either a project root or a workspace member."""

    path: Path
    package_name: str | None = None
    dependencies: tuple[DependencyEdge, ...] = ()
    workspace: WorkspaceDescriptor | None = None

    @property
    def directory(self) -> Path:
        return self.path.parent
