"""Resolved lockfile models and parsing."""

from lockstep.lockfile.models import (
    Lockfile,
    ResolvedPackage,
    SourceDescriptor,
    SourceIdentity,
    SourceKind,
)
from lockstep.lockfile.parser import parse_lockfile, parse_source

__all__ = [
    "Lockfile",
    "ResolvedPackage",
    "SourceDescriptor",
    "SourceIdentity",
    "SourceKind",
    "parse_lockfile",
    "parse_source",
]
