"""Package manifest parsing.

Both the current ``[package.<name>]`` layout and the older
``[external_package.<name>]`` layout are read. Only packages whose source
type is ``prebuilt`` are kept; local, manual and composite packages are
built in-tree and have nothing to cross-check.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from lockstep.artifacts.models import PackageManifest, PrebuiltArtifactDeclaration
from lockstep.core.errors import ManifestError

PACKAGE_TABLES = ("package", "external_package")
PREBUILT_FIELDS = ("repo", "commit", "sha256")


def _prebuilt(path: Path, name: str, package: Any) -> PrebuiltArtifactDeclaration | None:
    if not isinstance(package, Mapping):
        raise ManifestError.package_manifest(str(path), f"package {name!r} must be a table")
    source = package.get("source")
    if not isinstance(source, Mapping) or source.get("type") != "prebuilt":
        return None

    values: dict[str, str] = {}
    for key in PREBUILT_FIELDS:
        value = source.get(key)
        if not isinstance(value, str) or not value:
            raise ManifestError.package_manifest(
                str(path), f"prebuilt package {name!r} is missing source.{key}"
            )
        values[key] = value
    return PrebuiltArtifactDeclaration(name=name, **values)


def parse_package_manifest(path: Path) -> PackageManifest:
    """Parse the integrator's package manifest.

    Raises:
        ManifestError: The file is missing, unreadable or malformed.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ManifestError.package_manifest(str(path), e.strerror or str(e)) from e
    except tomllib.TOMLDecodeError as e:
        raise ManifestError.package_manifest(str(path), str(e)) from e

    artifacts: list[PrebuiltArtifactDeclaration] = []
    for table_name in PACKAGE_TABLES:
        table = data.get(table_name, {})
        if not isinstance(table, Mapping):
            raise ManifestError.package_manifest(str(path), f"[{table_name}] must be a table")
        for name, package in table.items():
            artifact = _prebuilt(path, name, package)
            if artifact is not None:
                artifacts.append(artifact)

    return PackageManifest(path=path, artifacts=tuple(artifacts))
