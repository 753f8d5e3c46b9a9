"""Configuration resolution with precedence handling.

Precedence: Programmatic > Environment > Defaults
"""

from pathlib import Path
from typing import Any

from telegram_bot_http.exceptions import ConfigurationError

from .env_loader import EnvironmentConfigLoader
from .schema import TelegramSettings
from .types import ConfigOrigin, ResolvedConfig


class ConfigResolver:
    """Merges configuration sources and validates the result."""

    def __init__(self) -> None:
        """Initialize the configuration resolver."""
        self.env_loader = EnvironmentConfigLoader()

    def resolve(
        self,
        programmatic: dict[str, Any] | None = None,
        *,
        use_env_file: str | Path | None = None,
    ) -> ResolvedConfig:
        """Resolve configuration from all sources with proper precedence.

        Args:
            programmatic: Programmatic overrides (highest precedence).
            use_env_file: Optional .env file to load.

        Raises:
            ConfigurationError: If a source is invalid or the merged values
                fail validation.
        """
        origin: dict[str, ConfigOrigin] = {}
        merged_config: dict[str, Any] = {}

        # Step 1: schema defaults (constructed without reading the environment)
        defaults = TelegramSettings.model_construct().to_dict()
        for field, value in defaults.items():
            merged_config[field] = value
            origin[field] = "default"

        # Step 2: environment variables
        try:
            env_config = self.env_loader.load_env_config(env_file=use_env_file)
        except (ValueError, FileNotFoundError) as e:
            raise ConfigurationError(f"Environment configuration error: {e}") from e
        for field, value in env_config.items():
            merged_config[field] = value
            origin[field] = "env"

        # Step 3: programmatic overrides
        for field, value in (programmatic or {}).items():
            if field in merged_config:  # Only override known fields
                merged_config[field] = value
                origin[field] = "programmatic"

        # Step 4: validate the final configuration
        try:
            final_config = TelegramSettings.model_validate(merged_config).to_dict()
        except Exception as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

        return ResolvedConfig(**final_config, origin=origin)
