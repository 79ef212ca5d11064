"""Resolved lockfile entries vs. tracked repository HEADs."""

from __future__ import annotations

from collections.abc import Mapping, Set

import structlog

from lockstep.checks.models import Discrepancy, DiscrepancyKind, LockfileReport
from lockstep.core.errors import SourceConflictError
from lockstep.lockfile.models import Lockfile, ResolvedPackage, SourceDescriptor, SourceIdentity

log = structlog.get_logger(__name__)


def _sourced(lockfile: Lockfile) -> list[tuple[ResolvedPackage, SourceDescriptor]]:
    pairs = [(p, p.source) for p in lockfile.packages if p.source is not None]
    return sorted(pairs, key=lambda pair: (pair[0].name, pair[0].version))


def source_identities(lockfile: Lockfile) -> tuple[SourceIdentity, ...]:
    """Distinct sources in ``lockfile``, sorted.

    Raises:
        SourceConflictError: Two packages share a source but resolved it to
            different revisions.
    """
    seen: dict[SourceIdentity, tuple[ResolvedPackage, SourceDescriptor]] = {}
    for package, source in _sourced(lockfile):
        first, first_source = seen.setdefault(source.identity, (package, source))
        if first_source.precise != source.precise:
            raise SourceConflictError.conflict(
                str(lockfile.path),
                str(source.identity),
                (first.name, first_source.precise or "(unresolved)"),
                (package.name, source.precise or "(unresolved)"),
            )
    return tuple(sorted(seen))


def check_lockfile(
    lockfile: Lockfile,
    direct_dependency_names: Set[str],
    tracked_revisions: Mapping[str, str],
) -> LockfileReport:
    """Find branch-sourced packages whose locked revision lags the tracked HEAD.

    Packages that are only reached transitively are not reported, nor are
    packages from repositories that are not tracked.

    Raises:
        SourceConflictError: The lockfile resolves one source to two revisions.
    """
    identities = source_identities(lockfile)
    log.debug(
        "lockfile.sources",
        lockfile=str(lockfile.path),
        sources=[str(identity) for identity in identities],
    )

    discrepancies: list[Discrepancy] = []
    for package, source in _sourced(lockfile):
        if not source.kind.is_movable or source.precise is None:
            continue
        repository = source.location.repository_name
        tracked = tracked_revisions.get(repository) if repository else None
        if tracked is None or source.precise == tracked:
            continue
        if package.name not in direct_dependency_names:
            log.debug(
                "lockfile.transitive_stale_pin", package=package.name, repository=repository
            )
            continue
        discrepancies.append(
            Discrepancy(
                kind=DiscrepancyKind.LOCKFILE_STALE_PIN,
                name=package.name,
                old=source.precise,
                new=tracked,
                file=lockfile.path,
            )
        )

    return LockfileReport(discrepancies=tuple(discrepancies), identities=identities)
