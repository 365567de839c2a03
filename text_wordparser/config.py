"""Configuration for text-wordparser.

Values come from, in increasing priority: defaults, a YAML file, and
``TWP_*`` environment variables.
"""

from __future__ import annotations

import math
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from text_wordparser.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path("~/.config/text-wordparser/config.yaml")

ENV_PREFIX = "TWP_"


class Config(BaseSettings):
    """Settings shared by the API and the CLI.

    ``min_resize_width`` is in pixels; ``None`` disables forced splitting
    of long words.
    """

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="forbid")

    font_family: str = "sans-serif"
    font_path: Path | None = None
    font_size: float = Field(default=16.0, gt=0)
    min_resize_width: float | None = Field(default=None, ge=0)
    log_level: str = "WARNING"

    @field_validator("font_path", "min_resize_width", mode="before")
    @classmethod
    def _empty_is_unset(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_validator("font_path")
    @classmethod
    def _expand_font_path(cls, value: Path | None) -> Path | None:
        return value.expanduser() if value is not None else None

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> str:
        return str(value).upper()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment beats values read from the config file.
        return env_settings, init_settings

    @property
    def resize_threshold(self) -> float:
        return math.inf if self.min_resize_width is None else self.min_resize_width

    @classmethod
    def load(cls, path: Path | str | None = None) -> Config:
        """Load configuration from ``path``, ``$TWP_CONFIG`` or the default location.

        Raises:
            ConfigError: If the file cannot be parsed or holds invalid values.
        """
        values: dict[str, Any] = {}
        config_path = cls._config_path(path)
        if config_path is not None:
            values = cls._read_yaml(config_path)
        return cls.from_dict(values)

    @staticmethod
    def _config_path(path: Path | str | None) -> Path | None:
        if path is not None:
            return Path(path).expanduser()
        env_path = os.environ.get(ENV_PREFIX + "CONFIG")
        if env_path:
            return Path(env_path).expanduser()
        default = DEFAULT_CONFIG_PATH.expanduser()
        return default if default.exists() else None

    @staticmethod
    def _read_yaml(config_path: Path) -> dict[str, Any]:
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(
                f"Cannot read config file: {e}", details={"path": str(config_path)}
            ) from e
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Invalid YAML syntax: {e}", details={"path": str(config_path)}
            ) from e

        # An empty file selects the defaults
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file must contain a mapping, got {type(data).__name__}",
                details={"path": str(config_path)},
            )
        return {str(key): value for key, value in data.items()}

    @classmethod
    def from_dict(cls, values: dict[str, Any]) -> Config:
        """Validate ``values`` and apply ``TWP_*`` environment overrides.

        Raises:
            ConfigError: On unknown keys or values of the wrong type or range.
        """
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid config value: {e}") from e
