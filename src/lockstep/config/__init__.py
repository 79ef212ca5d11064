"""Config module exports."""

from lockstep.config.loader import load_config
from lockstep.config.models import (
    ArtifactsConfig,
    DependencyCheck,
    LockstepConfig,
    LoggingConfig,
    LogOutputConfig,
    RepositoryConfig,
)

__all__ = [
    "load_config",
    "ArtifactsConfig",
    "DependencyCheck",
    "LockstepConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "RepositoryConfig",
]
