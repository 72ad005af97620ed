from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from rulekit.exceptions import ConfigError
from rulekit.logging import get_logger

__all__ = [
    "RulekitConfig",
    "EvaluationSettings",
    "load_config",
    "get_user_config_path",
    "PROJECT_CONFIG_NAME",
]

logger = get_logger(__name__)

PROJECT_CONFIG_NAME = "rulekit.yaml"


class EvaluationSettings(BaseModel):
    """Settings that change how expressions evaluate.

    Attributes:
        raw_literal_args: Pass literal call arguments to functions as their
            raw source text (e.g. '"abc"', '42') instead of typed values.
            Identifier and compound arguments are always evaluated.
        decimal_precision: Significant digits used for decimal-accurate
            + - * arithmetic.
    """

    model_config = ConfigDict(frozen=True)

    raw_literal_args: bool = True
    decimal_precision: int = Field(default=28, ge=1, le=1000)


class YamlConfigSource(PydanticBaseSettingsSource):
    """Settings source that loads values from a YAML file."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = {}
        if yaml_file and yaml_file.exists():
            try:
                with open(yaml_file) as f:
                    loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(
                    message=f"Invalid YAML in {yaml_file}: {e}",
                ) from e
            if loaded is None:
                logger.warning("config_file_empty", path=str(yaml_file))
            elif not isinstance(loaded, dict):
                raise ConfigError(
                    message=f"Config file {yaml_file} must contain a mapping",
                    value=loaded,
                )
            else:
                self._config_data = loaded

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        """Get value for a specific field from the YAML config."""
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return the complete config data."""
        return self._config_data


class RulekitConfig(BaseSettings):
    """Root configuration object containing all rulekit settings."""

    model_config = SettingsConfigDict(
        env_prefix="RULEKIT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    evaluation: EvaluationSettings = Field(default_factory=EvaluationSettings)
    verbosity: Literal["error", "warning", "info", "debug"] = "warning"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of settings sources.

        Priority (highest to lowest):
        1. Init keyword arguments
        2. Environment variables (RULEKIT_*)
        3. Project YAML config (./rulekit.yaml or the --config path)
        4. User YAML config (~/.config/rulekit/config.yaml)
        """
        project_config_path = (
            _project_config_override.get() or Path.cwd() / PROJECT_CONFIG_NAME
        )
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, project_config_path),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


# Set by load_config() for the duration of one RulekitConfig() construction
_project_config_override: ContextVar[Path | None] = ContextVar(
    "rulekit_project_config", default=None
)


def get_user_config_path() -> Path:
    """Get the path to the user configuration file.

    Returns:
        Path to ~/.config/rulekit/config.yaml
    """
    return Path.home() / ".config" / "rulekit" / "config.yaml"


def load_config(config_path: Path | None = None) -> RulekitConfig:
    """Load configuration with hierarchy: defaults -> user -> project -> env.

    Args:
        config_path: Optional path to the project config file. Defaults to
            ./rulekit.yaml.

    Returns:
        RulekitConfig instance with merged configuration.

    Raises:
        ConfigError: If a config file is not valid YAML, a given config_path
            does not exist, or a value fails validation.
    """
    if config_path is not None and not config_path.exists():
        raise ConfigError(
            message=f"Config file not found: {config_path}",
            value=str(config_path),
        )
    if config_path is None and not (Path.cwd() / PROJECT_CONFIG_NAME).exists():
        logger.info("no_project_config", using="defaults")

    token = _project_config_override.set(config_path)
    try:
        return RulekitConfig()
    except ValidationError as e:
        # Extract first error for ConfigError
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
    finally:
        _project_config_override.reset(token)
