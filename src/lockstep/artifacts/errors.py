"""Artifact resource error types.

None of these are fatal: a failed lookup means the artifact has not been
built yet, and the run reports it and moves on.
"""


class ArtifactFetchError(Exception):
    """Base error for artifact digest lookups."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(reason)
        self.url = url
        self.reason = reason


class ArtifactNotFoundError(ArtifactFetchError):
    """The build server has no such artifact (yet)."""

    def __init__(self, url: str) -> None:
        super().__init__(url, "404 Not Found")


class ArtifactServerError(ArtifactFetchError):
    """The build server answered with a non-success status or an unusable body."""

    def __init__(self, url: str, status_code: int, reason: str) -> None:
        super().__init__(url, f"{status_code} {reason}")
        self.status_code = status_code


class ArtifactNetworkError(ArtifactFetchError):
    """The request never got an answer (DNS, connect, timeout)."""
