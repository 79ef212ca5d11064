"""Expected artifact digests from the build server."""

from __future__ import annotations

from typing import Protocol

import httpx
import structlog

from lockstep.artifacts.errors import (
    ArtifactNetworkError,
    ArtifactNotFoundError,
    ArtifactServerError,
)

log = structlog.get_logger(__name__)


class ArtifactResource(Protocol):
    """Looks up the digest of an artifact built from ``repo`` at ``revision``."""

    def fetch_digest(self, repo: str, revision: str, artifact: str) -> str:
        """Return the hex digest.

        Raises:
            ArtifactFetchError: Not found, server error or network failure.
        """
        ...


class HttpArtifactResource:
    """One GET per lookup against a digest URL template. No retries."""

    def __init__(self, client: httpx.Client, url_template: str) -> None:
        self._client = client
        self._url_template = url_template

    def url_for(self, repo: str, revision: str, artifact: str) -> str:
        return self._url_template.format(repo=repo, revision=revision, artifact=artifact)

    def fetch_digest(self, repo: str, revision: str, artifact: str) -> str:
        url = self.url_for(repo, revision, artifact)
        try:
            response = self._client.get(url)
        except httpx.RequestError as e:
            raise ArtifactNetworkError(url, str(e) or type(e).__name__) from e

        log.debug("artifact.fetched", url=url, status=response.status_code)
        if response.status_code == httpx.codes.NOT_FOUND:
            raise ArtifactNotFoundError(url)
        if not response.is_success:
            raise ArtifactServerError(url, response.status_code, response.reason_phrase)

        # `<digest>` or `<digest>  <file name>`
        tokens = response.text.split()
        if not tokens:
            raise ArtifactServerError(url, response.status_code, "empty digest body")
        return tokens[0]
