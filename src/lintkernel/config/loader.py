"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (LINTKERNEL__SECTION__KEY)
3. YAML config file, when a path is given
4. Built-in defaults (lowest priority)
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from lintkernel.config.models import KernelConfig, LintKernelConfig, LoggingConfig
from lintkernel.core.errors import ConfigurationError


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigurationError.parse_error(str(path), "top-level value must be a mapping")
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
    """Create a Settings class with instance-based YAML source (thread-safe)."""

    class LintKernelSettings(BaseSettings):
        """Root config. Env vars: LINTKERNEL__LOGGING__LEVEL, LINTKERNEL__KERNEL__MAX_FIX_ITERATIONS."""

        model_config = SettingsConfigDict(
            env_prefix="LINTKERNEL__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        kernel: KernelConfig = KernelConfig()

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

    return LintKernelSettings


def load_config(config_path: Path | None = None, **kwargs: Any) -> LintKernelConfig:
    """Load config: defaults < YAML file < env vars < kwargs.

    Args:
        config_path: Optional YAML file. A missing file is treated as empty.
        **kwargs: Override values (highest precedence).

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigurationError: On invalid YAML syntax or validation errors.
    """
    yaml_config = _load_yaml(config_path) if config_path is not None else {}

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigurationError.invalid_value(field, err.get("input"), err["msg"]) from e
    return LintKernelConfig.model_validate(settings.model_dump())
