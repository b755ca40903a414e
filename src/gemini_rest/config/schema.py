"""Configuration schema and validation using Pydantic.

This module defines the settings schema that validates and coerces configuration
values from the various sources (environment, files, programmatic) into the
correct types with defaults.
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gemini_rest.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_MODEL,
    DEFAULT_POLL_INTERVAL,
    NETWORK_TIMEOUT,
)

CONFIG_FIELDS = (
    "api_key",
    "model",
    "base_url",
    "timeout_seconds",
    "poll_interval_seconds",
)


class GeminiSettings(BaseSettings):
    """Pydantic settings schema for the client configuration.

    Integrates with environment variables using the ``GEMINI_`` prefix, e.g.
    ``GEMINI_API_KEY`` or ``GEMINI_TIMEOUT_SECONDS``.
    """

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=None,  # Only used when explicitly requested
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(
        default=None,
        description="Gemini API key, sent as the `key` query parameter",
    )

    model: str = Field(
        default=DEFAULT_MODEL,
        description="Default model used by builders",
        min_length=1,
    )

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Versioned API root",
        min_length=1,
    )

    timeout_seconds: float = Field(
        default=NETWORK_TIMEOUT,
        description="HTTP timeout applied to every request",
        gt=0,
    )

    poll_interval_seconds: float = Field(
        default=DEFAULT_POLL_INTERVAL,
        description="Default delay between batch status polls",
        gt=0,
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Keep URL joins predictable."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got {v!r}")
        return v.rstrip("/")

    @field_validator("api_key")
    @classmethod
    def empty_key_is_missing(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v

    @classmethod
    def defaults(cls) -> dict[str, Any]:
        """Schema defaults without consulting the environment."""
        return {name: cls.model_fields[name].default for name in CONFIG_FIELDS}

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary keyed by field name."""
        return {name: getattr(self, name) for name in CONFIG_FIELDS}
