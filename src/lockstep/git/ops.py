"""Current-revision lookup for local checkouts via pygit2."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

import pygit2
import structlog

from lockstep.git.errors import GitError, NotARepositoryError, UnbornHeadError
from lockstep.git.models import TrackedCheckout

log = structlog.get_logger(__name__)


class RevisionSource(Protocol):
    """Answers "what revision is the checkout at ``path`` on?"."""

    def checkout(self, name: str, path: Path) -> TrackedCheckout: ...


class GitRevisionSource:
    """Reads HEAD of local checkouts. Never touches remotes."""

    def checkout(self, name: str, path: Path) -> TrackedCheckout:
        repo = self._open(path)
        if repo.head_is_unborn:
            raise UnbornHeadError(str(path))
        try:
            commit = repo.head.peel(pygit2.Commit)
        except pygit2.GitError as e:
            raise GitError(f"resolve HEAD failed: {e}") from e

        branch = None if repo.head_is_detached else repo.head.shorthand
        root = Path(repo.workdir) if repo.workdir else path
        checkout = TrackedCheckout(name=name, root=root, revision=str(commit.id), branch=branch)
        log.debug(
            "git.head", repository=name, revision=checkout.revision, branch=branch or "(detached)"
        )
        return checkout

    @staticmethod
    def _open(path: Path) -> pygit2.Repository:
        try:
            # no upward discovery: a plain directory inside another repo is not a checkout
            return pygit2.Repository(str(path), pygit2.enums.RepositoryOpenFlag.NO_SEARCH)
        except pygit2.GitError as e:
            raise NotARepositoryError(str(path)) from e
