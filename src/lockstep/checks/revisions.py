"""Pinned git revisions in manifests vs. a repository's current HEAD."""

from __future__ import annotations

from collections.abc import Iterable

from lockstep.checks.models import CheckResult, Discrepancy, DiscrepancyKind
from lockstep.manifest.models import DependencyEdge


def check_revisions(
    edges: Iterable[DependencyEdge], package: str, ensure_revision: str
) -> CheckResult:
    """Report every edge that pins ``package`` at a revision other than ``ensure_revision``.

    Only git dependencies with an explicit ``rev`` are compared; branch and
    tag references float and are left to the lockfile check.
    """
    discrepancies = tuple(
        Discrepancy(
            kind=DiscrepancyKind.REVISION_DRIFT,
            name=edge.name,
            old=edge.rev or "",
            new=ensure_revision,
            file=edge.manifest_path,
        )
        for edge in sorted(edges, key=lambda e: e.sort_key)
        if edge.is_pinned and edge.rev != ensure_revision and edge.targets(package)
    )
    return CheckResult(discrepancies=discrepancies, update_required=bool(discrepancies))
