"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (LOCKSTEP__SECTION__KEY)
3. YAML config (lockstep.yaml in the working directory, or --config)
4. Built-in defaults (this file)

Environment Variable Format:
    LOCKSTEP__<SECTION>__<KEY>=<VALUE>

Examples:
    LOCKSTEP__LOGGING__LEVEL=DEBUG
    LOCKSTEP__ARTIFACTS__PENDING_POLICY=continue
    LOCKSTEP__ARTIFACTS__TIMEOUT_SEC=10
"""

from pathlib import Path
from string import Formatter
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from lockstep.config.constants import (
    DEFAULT_ARTIFACT_URL_TEMPLATE,
    DEFAULT_INTEGRATOR,
    DEFAULT_PACKAGE_MANIFEST,
    LOCKFILE_NAME,
    MANIFEST_NAME,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
PendingPolicy = Literal["stop", "continue"]
URL_TEMPLATE_FIELDS = ("repo", "revision", "artifact")


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        LOCKSTEP__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. Anything below WARNING is diagnostic chatter.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class RepositoryConfig(BaseModel):
    """One tracked repository checkout."""

    name: str = Field(description="Repository name, matched against git source URLs.")
    path: str | None = Field(
        default=None,
        description="Checkout directory relative to the working directory. Defaults to name.",
    )
    manifest: str = Field(default=MANIFEST_NAME, description="Root manifest file name.")
    lockfile: str | None = Field(
        default=LOCKFILE_NAME,
        description="Lockfile name. Set to null to skip lockfile checks for this repo.",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or "/" in v:
            raise ValueError(f"Repository name must be a single path segment: {v!r}")
        return v

    @property
    def checkout_dir(self) -> str:
        return self.path or self.name


class DependencyCheck(BaseModel):
    """``dependent`` must pin ``dependency`` at the dependency's current HEAD."""

    dependent: str
    dependency: str


class ArtifactsConfig(BaseModel):
    """Prebuilt artifact checks against the integrator's package manifest.

    Env vars:
        LOCKSTEP__ARTIFACTS__ENABLED: Skip artifact checks entirely when false
        LOCKSTEP__ARTIFACTS__PENDING_POLICY: stop | continue
        LOCKSTEP__ARTIFACTS__TIMEOUT_SEC: Per-request timeout
    """

    enabled: bool = True
    integrator: str = Field(
        default=DEFAULT_INTEGRATOR,
        description="Repository whose package manifest declares prebuilt artifacts.",
    )
    package_manifest: str = Field(
        default=DEFAULT_PACKAGE_MANIFEST,
        description="Package manifest path inside the integrator checkout.",
    )
    url_template: str = Field(
        default=DEFAULT_ARTIFACT_URL_TEMPLATE,
        description="Digest URL with {repo}, {revision} and {artifact} placeholders.",
    )
    timeout_sec: float = Field(default=30.0, gt=0)
    pending_policy: PendingPolicy = Field(
        default="stop",
        description="'stop' ends artifact checks at the first artifact that is not built yet; "
        "'continue' reports every pending artifact.",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Tracked repositories whose artifacts are not checked.",
    )

    @field_validator("url_template")
    @classmethod
    def validate_url_template(cls, v: str) -> str:
        try:
            fields = {field for _, field, _, _ in Formatter().parse(v) if field is not None}
        except ValueError as e:
            raise ValueError(f"url_template is not a valid format string: {e}") from e
        for placeholder in URL_TEMPLATE_FIELDS:
            if placeholder not in fields:
                raise ValueError(f"url_template is missing {{{placeholder}}}")
        unknown = fields - set(URL_TEMPLATE_FIELDS)
        if unknown:
            raise ValueError(f"url_template has unknown placeholders: {sorted(unknown)}")
        return v


def default_repositories() -> list[RepositoryConfig]:
    return [
        RepositoryConfig(name="crucible"),
        RepositoryConfig(name="propolis"),
        RepositoryConfig(name="omicron"),
    ]


def default_stages() -> list[list[DependencyCheck]]:
    # propolis must agree with crucible before omicron is worth checking
    return [
        [DependencyCheck(dependent="propolis", dependency="crucible")],
        [
            DependencyCheck(dependent="omicron", dependency="crucible"),
            DependencyCheck(dependent="omicron", dependency="propolis"),
        ],
    ]


class LockstepConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    repositories: list[RepositoryConfig] = Field(default_factory=default_repositories)
    stages: list[list[DependencyCheck]] = Field(default_factory=default_stages)
    artifacts: ArtifactsConfig = Field(default_factory=ArtifactsConfig)

    def repository(self, name: str) -> RepositoryConfig:
        for repo in self.repositories:
            if repo.name == name:
                return repo
        raise KeyError(name)
