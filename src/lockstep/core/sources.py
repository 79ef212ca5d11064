"""Canonical git source locations.

Dependency declarations and lockfile entries spell the same repository in
several ways (``https://github.com/oxidecomputer/crucible``, ``...crucible.git``,
``...crucible/``, ``git@github.com:oxidecomputer/crucible``). SourceLocation
reduces all of them to one comparable value and answers which repository a
location points at.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

# scp-like syntax accepted by git: [user@]host:path
_SCP_LIKE = re.compile(r"^(?:[^@/]+@)?(?P<host>[^:/]+):(?P<path>[^/].*)$")


@dataclass(frozen=True, slots=True, order=True)
class SourceLocation:
    """A git URL reduced to scheme, host and path segments."""

    scheme: str
    host: str
    segments: tuple[str, ...]

    @classmethod
    def parse(cls, location: str) -> SourceLocation:
        text = location.strip()
        if "://" in text:
            parts = urlsplit(text)
            scheme = parts.scheme.lower()
            host = (parts.hostname or "").lower()
            path = parts.path
        elif match := _SCP_LIKE.match(text):
            scheme = "ssh"
            host = match.group("host").lower()
            path = match.group("path")
        else:
            scheme = "file"
            host = ""
            path = text

        segments = [s for s in path.split("/") if s]
        if segments and segments[-1].endswith(".git"):
            segments[-1] = segments[-1][: -len(".git")]
        # github treats org/repo case-insensitively
        if host == "github.com":
            segments = [s.lower() for s in segments]
        return cls(scheme=scheme, host=host, segments=tuple(segments))

    @property
    def repository_name(self) -> str | None:
        """Final path segment, i.e. the repository the location points at."""
        return self.segments[-1] if self.segments else None

    def names_repository(self, name: str) -> bool:
        return self.repository_name == name

    def __str__(self) -> str:
        path = "/".join(self.segments)
        if self.scheme == "file":
            return f"/{path}"
        return f"{self.scheme}://{self.host}/{path}"
