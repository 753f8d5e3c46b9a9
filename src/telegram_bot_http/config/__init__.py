"""Configuration for the Telegram Bot API client.

Configuration is resolved once from programmatic overrides, ``TELEGRAM_*``
environment variables and defaults, then frozen and handed to the client:

    config = resolve_config(overrides={"timeout": 30})
    http = TelegramHttp.from_config(config.to_frozen())
"""

from pathlib import Path
from typing import Any

from .env_loader import EnvironmentConfigLoader
from .resolver import ConfigResolver
from .schema import TelegramSettings
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig, SourceMap


def resolve_config(
    overrides: dict[str, Any] | None = None,
    *,
    use_env_file: str | Path | None = None,
) -> ResolvedConfig:
    """Resolve configuration with programmatic > env > default precedence."""
    return ConfigResolver().resolve(overrides, use_env_file=use_env_file)


__all__ = [
    "ConfigOrigin",
    "ConfigResolver",
    "EnvironmentConfigLoader",
    "FrozenConfig",
    "ResolvedConfig",
    "SourceMap",
    "TelegramSettings",
    "resolve_config",
]
