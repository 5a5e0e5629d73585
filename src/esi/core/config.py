"""
ESI Settings

Environment-driven settings for the request engine, read once through
get_settings(). A `.env` file next to the project's pyproject.toml is
honored during development; an installed package has none.

    from esi.core.config import get_settings

    base_url = get_settings().base_url

Environment Variables:
    ESI_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    ESI_DEBUG: Legacy debug flag (enables DEBUG level if set)
    ESI_LOG_JSON: Output logs as JSON
    ESI_BASE_URL: Override the API base URL (mirrors, test servers)
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import ESI_BASE_URL


def _find_project_env_file() -> Path | None:
    """The `.env` beside the nearest enclosing pyproject.toml, if it exists."""
    for directory in Path(__file__).resolve().parents:
        if (directory / "pyproject.toml").exists():
            env_file = directory / ".env"
            return env_file if env_file.exists() else None
    return None


_ENV_FILE = _find_project_env_file()


class ESISettings(BaseSettings):
    """
    ESI client settings with validation.

    Environment variables are automatically loaded with the ESI_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="ESI_",
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # =========================================================================
    # Logging Configuration
    # =========================================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Log level for ESI components",
    )

    debug: bool = Field(
        default=False,
        description="Legacy debug flag (enables DEBUG level if set)",
    )

    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format for machine parsing",
    )

    # =========================================================================
    # Endpoint
    # =========================================================================

    base_url: str = Field(
        default=ESI_BASE_URL,
        description="Prefix prepended to every request path",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Request paths start with '/', so the base must not end with one."""
        return v.rstrip("/")

    @property
    def effective_log_level(self) -> str:
        """
        Get effective log level, respecting legacy ESI_DEBUG.

        Priority:
        1. Explicit ESI_LOG_LEVEL
        2. ESI_DEBUG=1 -> DEBUG
        3. Default: WARNING
        """
        if self.debug and self.log_level == "WARNING":
            return "DEBUG"
        return self.log_level

    @property
    def log_level_int(self) -> int:
        """Get effective log level as logging constant."""
        return getattr(logging, self.effective_log_level)


# =============================================================================
# Singleton Accessor
# =============================================================================


@lru_cache(maxsize=1)
def get_settings() -> ESISettings:
    """
    Get the singleton settings instance.

    The settings are validated at first access.
    """
    return ESISettings()


def reset_settings() -> None:
    """
    Reset the settings cache (for testing).

    After calling this, the next get_settings() call will
    reload settings from environment variables.
    """
    get_settings.cache_clear()
