"""
Settings for the layermap command line, using pydantic-settings.

Loaded from (highest precedence first):
1. Constructor arguments (the CLI passes its options here)
2. Environment variables with LAYERMAP_ prefix
3. .env file named by LAYERMAP_ENV_FILE, if it exists
4. Field defaults
"""

import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings


def _get_env_file() -> str | None:
    """Return the .env file named by LAYERMAP_ENV_FILE, if it exists."""
    if env_file := _os.environ.get("LAYERMAP_ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


class Settings(_pydantic_settings.BaseSettings):
    """
    layermap CLI configuration.

    All settings can be overridden via environment variables with the
    LAYERMAP_ prefix, e.g. LAYERMAP_LOG_LEVEL=DEBUG.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="LAYERMAP_",
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = _pydantic.Field(
        default="WARNING",
        description="Logging level name for the CLI",
    )

    env_prefix: str | None = _pydantic.Field(
        default=None,
        description="Prefix of environment variables loaded as the highest file-backed layer",
    )

    missing_ok: bool = _pydantic.Field(
        default=False,
        description="Skip layer files that do not exist instead of failing",
    )

    output_format: _typing.Literal["yaml", "json"] = _pydantic.Field(
        default="yaml",
        description="Output format for merged mappings",
    )

    @_pydantic.field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {value!r}")
        return level

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings from environment variables only, without loading a .env file."""
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]
