"""Discrepancy records and checker results."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from lockstep.lockfile.models import SourceIdentity


class DiscrepancyKind(StrEnum):
    REVISION_DRIFT = "revision-drift"
    LOCKFILE_STALE_PIN = "lockfile-stale-pin"
    ARTIFACT_HASH_MISMATCH = "artifact-hash-mismatch"
    ARTIFACT_COMMIT_STALE = "artifact-commit-stale"
    ARTIFACT_NOT_YET_BUILT = "artifact-not-yet-built"


def display_path(path: Path, base: Path | None = None) -> str:
    """``./repo/sub/Cargo.toml`` when ``path`` lives under ``base``."""
    if base is not None and path.is_relative_to(base):
        return f"./{path.relative_to(base).as_posix()}"
    return path.as_posix()


@dataclass(frozen=True, slots=True)
class Discrepancy:
    """One actionable finding: which value to change, from what, to what.

    ``file`` is the file to edit for manifest and lockfile findings;
    ``subject`` names the integrator for artifact findings.
    """

    kind: DiscrepancyKind
    name: str
    old: str
    new: str
    file: Path | None = None
    subject: str = ""
    note: str = ""

    def render(self, base: Path | None = None) -> str:
        where = display_path(self.file, base) if self.file is not None else self.subject
        match self.kind:
            case DiscrepancyKind.REVISION_DRIFT:
                return f"update {where} {self.name} rev from {self.old} to {self.new}"
            case DiscrepancyKind.LOCKFILE_STALE_PIN:
                return f"update {where} {self.name} precise rev from {self.old} to {self.new}"
            case DiscrepancyKind.ARTIFACT_HASH_MISMATCH:
                return (
                    f"update {where} package manifest {self.name} sha256 "
                    f"from {self.old} to {self.new}"
                )
            case DiscrepancyKind.ARTIFACT_COMMIT_STALE:
                return (
                    f"update {where} package manifest {self.name} rev "
                    f"from {self.old} to {self.new}"
                )
            case DiscrepancyKind.ARTIFACT_NOT_YET_BUILT:
                return f"wait for {self.name} image for {self.new} to be built ({self.note})"


@dataclass(frozen=True, slots=True)
class CheckResult:
    discrepancies: tuple[Discrepancy, ...] = ()
    update_required: bool = False

    @classmethod
    def combine(cls, results: Iterable[CheckResult]) -> CheckResult:
        discrepancies: list[Discrepancy] = []
        update_required = False
        for result in results:
            discrepancies.extend(result.discrepancies)
            update_required |= result.update_required
        return cls(tuple(discrepancies), update_required)


@dataclass(frozen=True, slots=True)
class LockfileReport:
    """Stale pins found in one lockfile plus the distinct sources it resolves."""

    discrepancies: tuple[Discrepancy, ...] = ()
    identities: tuple[SourceIdentity, ...] = ()
