"""Cargo.lock parsing into Lockfile."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs, urlsplit, urlunsplit

from lockstep.core.errors import ManifestError
from lockstep.core.sources import SourceLocation
from lockstep.lockfile.models import (
    Lockfile,
    ResolvedPackage,
    SourceDescriptor,
    SourceIdentity,
    SourceKind,
)

_REGISTRY_PREFIXES = ("registry+", "sparse+")


def parse_source(source: str) -> SourceDescriptor:
    """Parse a lockfile source string.

    ``registry+<url>``, ``sparse+<url>`` and
    ``git+<url>[?branch=<b>|tag=<t>|rev=<r>]#<precise>``.

    Raises:
        ValueError: Unknown source scheme.
    """
    for prefix in _REGISTRY_PREFIXES:
        if source.startswith(prefix):
            location = SourceLocation.parse(source[len(prefix) :])
            return SourceDescriptor(SourceIdentity(SourceKind.REGISTRY, location))

    if not source.startswith("git+"):
        raise ValueError(f"unsupported source: {source}")

    parts = urlsplit(source[len("git+") :])
    query = parse_qs(parts.query)
    location = SourceLocation.parse(urlunsplit((parts.scheme, parts.netloc, parts.path, "", "")))

    kind, reference = SourceKind.GIT_BRANCH, ""
    for candidate, key in (
        (SourceKind.GIT_REV, "rev"),
        (SourceKind.GIT_TAG, "tag"),
        (SourceKind.GIT_BRANCH, "branch"),
    ):
        if key in query:
            kind, reference = candidate, query[key][0]
            break

    identity = SourceIdentity(kind, location, reference)
    return SourceDescriptor(identity, precise=parts.fragment or None)


def _package(path: Path, entry: Any) -> ResolvedPackage:
    if not isinstance(entry, Mapping):
        raise ManifestError.lockfile(str(path), "[[package]] entries must be tables")
    name, version, source = entry.get("name"), entry.get("version"), entry.get("source")
    if not isinstance(name, str) or not isinstance(version, str):
        raise ManifestError.lockfile(str(path), f"package entry without name/version: {entry!r}")
    if source is None:
        return ResolvedPackage(name=name, version=version)
    if not isinstance(source, str):
        raise ManifestError.lockfile(str(path), f"{name} {version}: source must be a string")
    try:
        return ResolvedPackage(name=name, version=version, source=parse_source(source))
    except ValueError as e:
        raise ManifestError.lockfile(str(path), f"{name} {version}: {e}") from e


def parse_lockfile(path: Path) -> Lockfile:
    """Parse one Cargo.lock.

    Raises:
        ManifestError: The file is missing, unreadable or malformed.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ManifestError.lockfile(str(path), e.strerror or str(e)) from e
    except tomllib.TOMLDecodeError as e:
        raise ManifestError.lockfile(str(path), str(e)) from e

    # Version 1 lockfiles predate the top-level key
    version = data.get("version", 1)
    if not isinstance(version, int):
        raise ManifestError.lockfile(str(path), "version must be an integer")
    packages = data.get("package", [])
    if not isinstance(packages, list):
        raise ManifestError.lockfile(str(path), "package must be an array of tables")

    return Lockfile(
        path=path,
        version=version,
        packages=tuple(_package(path, entry) for entry in packages),
    )
