"""Core module exports."""

from lockstep.core.errors import (
    CheckoutError,
    ConfigError,
    ErrorCode,
    LockstepError,
    ManifestError,
    SourceConflictError,
)
from lockstep.core.logging import configure_logging
from lockstep.core.sources import SourceLocation

__all__ = [
    # Errors
    "CheckoutError",
    "ConfigError",
    "ErrorCode",
    "LockstepError",
    "ManifestError",
    "SourceConflictError",
    # Logging
    "configure_logging",
    # Sources
    "SourceLocation",
]
