"""Git operations module."""

from lockstep.git.errors import GitError, NotARepositoryError, UnbornHeadError
from lockstep.git.models import TrackedCheckout, tracked_revisions
from lockstep.git.ops import GitRevisionSource, RevisionSource

__all__ = [
    # Revision lookup
    "GitRevisionSource",
    "RevisionSource",
    # Models
    "TrackedCheckout",
    "tracked_revisions",
    # Errors
    "GitError",
    "NotARepositoryError",
    "UnbornHeadError",
]
