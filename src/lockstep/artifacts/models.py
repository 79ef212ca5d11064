"""Downstream package manifest models."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class PrebuiltArtifactDeclaration:
    """A package whose image is built out-of-band from ``repo`` at ``commit``."""

    name: str
    repo: str
    commit: str
    sha256: str


@dataclass(frozen=True, slots=True)
class PackageManifest:
    """The integrator's package manifest, reduced to its prebuilt artifacts."""

    path: Path
    artifacts: tuple[PrebuiltArtifactDeclaration, ...] = ()
