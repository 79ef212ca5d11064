"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (LOCKSTEP__SECTION__KEY)
3. YAML config (lockstep.yaml in the working directory, or an explicit path)
4. Built-in defaults (lowest priority)

With no config file at all, lockstep tracks crucible, propolis and omicron
checked out side by side in the working directory.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from lockstep.config.constants import CONFIG_FILE_NAME
from lockstep.config.models import (
    ArtifactsConfig,
    DependencyCheck,
    LockstepConfig,
    LoggingConfig,
    RepositoryConfig,
    default_repositories,
    default_stages,
)
from lockstep.core.errors import ConfigError


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source."""

    class LockstepSettings(BaseSettings):
        """Root config. Env vars: LOCKSTEP__LOGGING__LEVEL, LOCKSTEP__ARTIFACTS__..., etc."""

        model_config = SettingsConfigDict(
            env_prefix="LOCKSTEP__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        repositories: list[RepositoryConfig] = default_repositories()
        stages: list[list[DependencyCheck]] = default_stages()
        artifacts: ArtifactsConfig = ArtifactsConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml file
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return LockstepSettings


def _validate_references(config: LockstepConfig) -> None:
    """Every repository named by stages and artifacts must be tracked."""
    names = [repo.name for repo in config.repositories]
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise ConfigError.invalid_value("repositories", name, "duplicate repository name")
        seen.add(name)

    for index, stage in enumerate(config.stages):
        for check in stage:
            for name in (check.dependent, check.dependency):
                if name not in seen:
                    raise ConfigError.unknown_repository(f"stages[{index}]", name)
            if check.dependent == check.dependency:
                raise ConfigError.invalid_value(
                    f"stages[{index}]", check.dependent, "a repository cannot depend on itself"
                )

    if config.artifacts.enabled and config.artifacts.integrator not in seen:
        raise ConfigError.unknown_repository("artifacts.integrator", config.artifacts.integrator)


def load_config(
    workdir: Path | None = None, config_path: Path | None = None, **kwargs: Any
) -> LockstepConfig:
    """Load config: defaults < YAML < env vars < kwargs.

    Args:
        workdir: Directory holding the checkouts. Defaults to the current
                 working directory; ``lockstep.yaml`` is looked up there.
        config_path: Explicit config file, which must exist.
        **kwargs: Override values (highest precedence). Nested sections
                  are merged, e.g. ``artifacts={"pending_policy": "continue"}``.

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On invalid YAML syntax, validation errors or references
                     to repositories that are not tracked.
    """
    workdir = workdir or Path.cwd()
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError.parse_error(str(config_path), "file not found")
        yaml_config = _load_yaml(config_path)
    else:
        yaml_config = _load_yaml(workdir / CONFIG_FILE_NAME)

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e

    config = LockstepConfig.model_validate(settings.model_dump())
    _validate_references(config)
    return config
