"""Configuration schema and validation using Pydantic.

This module defines the settings schema that validates and coerces configuration
values from the environment or programmatic overrides into the correct types
with proper defaults.
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from telegram_bot_http.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_TIMEOUT,
)


class TelegramSettings(BaseSettings):
    """Pydantic settings schema for the Bot API client.

    Environment variables use the ``TELEGRAM_`` prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="TELEGRAM_",
        env_file=None,  # Only used when explicitly requested
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    bot_token: str | None = Field(
        default=None,
        description="Bot API access token issued by @BotFather",
    )

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Bot API server root",
        min_length=1,
    )

    timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        description="Per-request timeout in seconds",
        gt=0,
    )

    connect_timeout: float = Field(
        default=DEFAULT_CONNECT_TIMEOUT,
        description="Connection timeout in seconds",
        gt=0,
    )

    async_requests: bool = Field(
        default=False,
        description="Dispatch requests without blocking the caller",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid base_url: {v}. Must start with http:// or https://")
        return v.rstrip("/")

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary suitable for SourceMap annotation."""
        return {
            "bot_token": self.bot_token,
            "base_url": self.base_url,
            "timeout": self.timeout,
            "connect_timeout": self.connect_timeout,
            "async_requests": self.async_requests,
        }
