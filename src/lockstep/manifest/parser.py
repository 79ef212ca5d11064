"""Cargo.toml parsing into ManifestModel."""

from __future__ import annotations

import tomllib
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

from lockstep.core.errors import ManifestError
from lockstep.manifest.models import DependencyEdge, ManifestModel, WorkspaceDescriptor

DEPENDENCY_TABLES = ("dependencies", "dev-dependencies", "build-dependencies")


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
        return tomllib.loads(content)
    except OSError as e:
        raise ManifestError.manifest(str(path), e.strerror or str(e)) from e
    except tomllib.TOMLDecodeError as e:
        raise ManifestError.manifest(str(path), str(e)) from e


def _string_or_none(path: Path, name: str, key: str, value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise ManifestError.manifest(str(path), f"dependency {name!r}: {key} must be a string")


def _edge(path: Path, name: str, spec: Any) -> DependencyEdge:
    # `foo = "1.0"` is a registry dependency with nothing to compare
    if isinstance(spec, str):
        return DependencyEdge(manifest_path=path, name=name)
    if not isinstance(spec, Mapping):
        raise ManifestError.manifest(str(path), f"dependency {name!r} must be a string or table")
    return DependencyEdge(
        manifest_path=path,
        name=name,
        git=_string_or_none(path, name, "git", spec.get("git")),
        rev=_string_or_none(path, name, "rev", spec.get("rev")),
        branch=_string_or_none(path, name, "branch", spec.get("branch")),
        tag=_string_or_none(path, name, "tag", spec.get("tag")),
        package=_string_or_none(path, name, "package", spec.get("package")),
    )


def _dependency_tables(data: Mapping[str, Any]) -> Iterator[tuple[str, Any]]:
    """Yield (name, spec) from every dependency table, target-specific ones included."""
    tables: list[Any] = [data.get(table) for table in DEPENDENCY_TABLES]
    targets = data.get("target", {})
    if isinstance(targets, Mapping):
        for target in targets.values():
            if isinstance(target, Mapping):
                tables.extend(target.get(table) for table in DEPENDENCY_TABLES)
    for table in tables:
        if isinstance(table, Mapping):
            yield from table.items()


def _workspace(path: Path, table: Any) -> WorkspaceDescriptor:
    if not isinstance(table, Mapping):
        raise ManifestError.manifest(str(path), "[workspace] must be a table")
    members = table.get("members", [])
    exclude = table.get("exclude", [])
    for key, value in (("members", members), ("exclude", exclude)):
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ManifestError.manifest(str(path), f"workspace.{key} must be a list of strings")
    dependencies = table.get("dependencies", {})
    if not isinstance(dependencies, Mapping):
        raise ManifestError.manifest(str(path), "workspace.dependencies must be a table")
    return WorkspaceDescriptor(
        members=tuple(members),
        exclude=tuple(exclude),
        dependencies=tuple(_edge(path, name, spec) for name, spec in dependencies.items()),
    )


def parse_manifest(path: Path) -> ManifestModel:
    """Parse one Cargo.toml.

    Raises:
        ManifestError: The file is missing, unreadable or not a valid manifest.
    """
    data = _read_toml(path)
    package = data.get("package")
    package_name = package.get("name") if isinstance(package, Mapping) else None
    workspace = _workspace(path, data["workspace"]) if "workspace" in data else None
    return ManifestModel(
        path=path,
        package_name=package_name if isinstance(package_name, str) else None,
        dependencies=tuple(_edge(path, name, spec) for name, spec in _dependency_tables(data)),
        workspace=workspace,
    )
