"""Application configuration management using Pydantic Settings.

This module defines the `Settings` class, which loads configuration parameters
from environment variables and a `.env` file: the process-wide default tag
name under which field directives are looked up, and the logging level used
by the command line interface.

The `get_settings` function provides a cached, singleton instance of the
configuration, ensuring consistent settings throughout the application.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict as _SettingsConfigDict


class Settings(BaseSettings):
    """Defines all application configuration parameters.

    Values are read from environment variables prefixed with ``BSON_MAPPER_``
    or from a `.env` file, e.g. ``BSON_MAPPER_DEFAULT_TAG_NAME=mongo``.
    """

    model_config = _SettingsConfigDict(
        env_prefix="BSON_MAPPER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    DEFAULT_TAG_NAME: str = Field(
        default="bson",
        description="Metadata key holding field directives when none is set on a mapper",
    )
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    @field_validator("DEFAULT_TAG_NAME", mode="before")
    @classmethod
    def normalize_tag_name(cls, v: Any) -> str:
        """Trim whitespace; a blank tag name falls back to ``bson``."""
        if v is None:
            return "bson"
        trimmed = str(v).strip()
        return trimmed or "bson"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        return str(v).strip().upper() if v else "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:  # pragma: no cover - trivial
    """Return a cached, singleton instance of the application settings."""
    return Settings()


__all__ = ["Settings", "get_settings"]
