"""Lockstep error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Checkout
- 4xxx: Manifest / lockfile parsing
- 5xxx: Lockfile consistency

Only fatal conditions are raised as errors. Discrepancies between
repositories are reported, never raised.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_UNKNOWN_REPOSITORY = 2003

    # Checkout (3xxx)
    CHECKOUT_NOT_FOUND = 3001
    CHECKOUT_HEAD_UNREADABLE = 3002

    # Manifest (4xxx)
    MANIFEST_PARSE_ERROR = 4001
    LOCKFILE_PARSE_ERROR = 4002
    PACKAGE_MANIFEST_PARSE_ERROR = 4003

    # Lockfile consistency (5xxx)
    LOCKFILE_SOURCE_CONFLICT = 5001


@dataclass(frozen=True, slots=True)
class LockstepError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CHECKOUT_NOT_FOUND')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(LockstepError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def unknown_repository(cls, field: str, name: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_UNKNOWN_REPOSITORY,
            message=f"'{field}' references untracked repository: {name}",
            details={"field": field, "repository": name},
        )


class CheckoutError(LockstepError):
    """A tracked repository checkout is missing or unusable."""

    @classmethod
    def not_found(cls, name: str, path: str) -> "CheckoutError":
        return cls(
            code=ErrorCode.CHECKOUT_NOT_FOUND,
            message=f"cannot find your local checkout of {name}! (looked in {path})",
            details={"repository": name, "path": path},
        )

    @classmethod
    def head_unreadable(cls, name: str, reason: str) -> "CheckoutError":
        return cls(
            code=ErrorCode.CHECKOUT_HEAD_UNREADABLE,
            message=f"cannot read HEAD of {name}: {reason}",
            details={"repository": name, "reason": reason},
        )


class ManifestError(LockstepError):
    """A manifest, lockfile or package manifest could not be parsed."""

    @classmethod
    def manifest(cls, path: str, reason: str) -> "ManifestError":
        return cls(
            code=ErrorCode.MANIFEST_PARSE_ERROR,
            message=f"Failed to parse manifest {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def lockfile(cls, path: str, reason: str) -> "ManifestError":
        return cls(
            code=ErrorCode.LOCKFILE_PARSE_ERROR,
            message=f"Failed to parse lockfile {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def package_manifest(cls, path: str, reason: str) -> "ManifestError":
        return cls(
            code=ErrorCode.PACKAGE_MANIFEST_PARSE_ERROR,
            message=f"Failed to parse package manifest {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class SourceConflictError(LockstepError):
    """Two lockfile entries share a source but disagree on its precise revision."""

    @classmethod
    def conflict(
        cls, lockfile: str, source: str, first: tuple[str, str], second: tuple[str, str]
    ) -> "SourceConflictError":
        (first_name, first_rev), (second_name, second_rev) = first, second
        return cls(
            code=ErrorCode.LOCKFILE_SOURCE_CONFLICT,
            message=(
                f"{lockfile} resolves {source} to both {first_rev} ({first_name}) "
                f"and {second_rev} ({second_name})"
            ),
            details={
                "lockfile": lockfile,
                "source": source,
                "packages": {first_name: first_rev, second_name: second_rev},
            },
        )

