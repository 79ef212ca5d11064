"""Manifest graph traversal across workspace members.

A root manifest may declare a workspace whose members are themselves
manifests, possibly declaring further members. The set of members is not
known until each manifest is parsed, so traversal is a worklist over
directories rather than recursion. Directories already visited (a member
listing itself, an ancestor, or two patterns matching the same directory)
are walked once.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterator
from pathlib import Path

import structlog

from lockstep.config.constants import MANIFEST_NAME
from lockstep.core.errors import ManifestError
from lockstep.manifest.models import DependencyEdge, ManifestModel
from lockstep.manifest.parser import parse_manifest

log = structlog.get_logger(__name__)

_GLOB_CHARS = frozenset("*?[")

ManifestParser = Callable[[Path], ManifestModel]


def _is_excluded(candidate: Path, excluded: list[Path]) -> bool:
    return any(candidate == ex or candidate.is_relative_to(ex) for ex in excluded)


class ManifestWalker:
    """Collects dependency edges from a manifest and all of its workspace members."""

    def __init__(
        self, parse: ManifestParser = parse_manifest, manifest_name: str = MANIFEST_NAME
    ) -> None:
        self._parse = parse
        self._manifest_name = manifest_name

    def walk(self, root_dir: Path, root_manifest: ManifestModel) -> frozenset[DependencyEdge]:
        """Union of every dependency edge reachable from ``root_manifest``.

        Workspace-scoped dependencies are attributed to the manifest that
        declares the workspace.
        """
        edges: set[DependencyEdge] = set()
        for manifest in self._manifests(root_dir, root_manifest):
            edges.update(manifest.dependencies)
            if manifest.workspace is not None:
                edges.update(manifest.workspace.dependencies)
        return frozenset(edges)

    def walk_sorted(self, root_dir: Path, root_manifest: ManifestModel) -> list[DependencyEdge]:
        return sorted(self.walk(root_dir, root_manifest), key=lambda e: e.sort_key)

    def collect_direct_dependency_names(self, root_dir: Path) -> frozenset[str]:
        """Package names of every dependency declared anywhere in the manifest graph.

        A renamed dependency contributes its `package` name, which is what
        the lockfile records.

        Raises:
            ManifestError: The root manifest cannot be parsed.
        """
        root_manifest = self._parse(root_dir / self._manifest_name)
        names: set[str] = set()
        for manifest in self._manifests(root_dir, root_manifest):
            names.update(edge.package_name for edge in manifest.dependencies)
            if manifest.workspace is not None:
                names.update(edge.package_name for edge in manifest.workspace.dependencies)
        return frozenset(names)

    # =========================================================================
    # Traversal
    # =========================================================================

    def _manifests(self, root_dir: Path, root_manifest: ManifestModel) -> Iterator[ManifestModel]:
        visited: set[Path] = {root_dir.resolve()}
        queue: deque[tuple[Path, ManifestModel]] = deque([(root_dir, root_manifest)])

        while queue:
            directory, manifest = queue.popleft()
            yield manifest

            workspace = manifest.workspace
            if workspace is None:
                continue

            excluded = [(directory / ex).resolve() for ex in workspace.exclude]
            for pattern in workspace.members:
                for member_dir in self._expand(directory, pattern):
                    key = member_dir.resolve()
                    if _is_excluded(key, excluded):
                        log.debug("walker.member_excluded", member=str(member_dir))
                        continue
                    if key in visited:
                        log.debug("walker.member_revisited", member=str(member_dir))
                        continue
                    visited.add(key)

                    member_manifest = self._parse_member(member_dir)
                    if member_manifest is not None:
                        queue.append((member_dir, member_manifest))

    def _expand(self, directory: Path, pattern: str) -> list[Path]:
        """Directories a member pattern refers to, in a stable order."""
        if not _GLOB_CHARS.intersection(pattern):
            return [directory / pattern]
        try:
            matches = sorted(p for p in directory.glob(pattern) if p.is_dir())
        except (ValueError, NotImplementedError) as e:
            log.warning(
                "walker.bad_member_pattern",
                directory=str(directory),
                pattern=pattern,
                error=str(e),
            )
            return []
        if not matches:
            log.debug("walker.pattern_matched_nothing", directory=str(directory), pattern=pattern)
        return matches

    def _parse_member(self, member_dir: Path) -> ManifestModel | None:
        # Partial checkouts legitimately miss or break member manifests
        try:
            return self._parse(member_dir / self._manifest_name)
        except ManifestError as e:
            log.warning("walker.member_skipped", member=str(member_dir), error=e.message)
            return None
