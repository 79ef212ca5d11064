"""Consistency checkers and their findings."""

from lockstep.checks.artifacts import check_artifacts
from lockstep.checks.lockfile import check_lockfile, source_identities
from lockstep.checks.models import (
    CheckResult,
    Discrepancy,
    DiscrepancyKind,
    LockfileReport,
    display_path,
)
from lockstep.checks.report import Reporter
from lockstep.checks.revisions import check_revisions

__all__ = [
    # Checkers
    "check_artifacts",
    "check_lockfile",
    "check_revisions",
    "source_identities",
    # Findings
    "CheckResult",
    "Discrepancy",
    "DiscrepancyKind",
    "LockfileReport",
    "display_path",
    # Reporting
    "Reporter",
]
