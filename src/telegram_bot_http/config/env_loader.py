"""Environment variable configuration loading.

This module handles loading configuration from environment variables with
the TELEGRAM_ prefix, including optional .env file support and type coercion.
"""

import os
from pathlib import Path
from typing import Any

from .schema import TelegramSettings

ENV_VARS = {
    "TELEGRAM_BOT_TOKEN": "bot_token",
    "TELEGRAM_BASE_URL": "base_url",
    "TELEGRAM_TIMEOUT": "timeout",
    "TELEGRAM_CONNECT_TIMEOUT": "connect_timeout",
    "TELEGRAM_ASYNC_REQUESTS": "async_requests",
}


class EnvironmentConfigLoader:
    """Loads configuration from TELEGRAM_* environment variables."""

    def load_env_config(self, env_file: str | Path | None = None) -> dict[str, Any]:
        """Load configuration from environment variables.

        Args:
            env_file: Optional path to a .env file loaded into the environment
                first. Variables already set are not overridden.

        Returns:
            Only the fields actually set in the environment, validated.

        Raises:
            FileNotFoundError: If ``env_file`` does not exist.
            ValueError: If environment variables contain invalid values.
        """
        if env_file:
            self._load_env_file(env_file)

        env_values = {
            field_name: os.environ[env_var]
            for env_var, field_name in ENV_VARS.items()
            if env_var in os.environ
        }
        if not env_values:
            return {}

        try:
            settings = TelegramSettings(**env_values)
        except Exception as e:
            env_var_list = [
                f"{env_var}={'<redacted>' if 'TOKEN' in env_var else os.environ[env_var]}"
                for env_var, field_name in ENV_VARS.items()
                if field_name in env_values
            ]
            raise ValueError(
                f"Invalid environment variable values: {', '.join(env_var_list)}. "
                f"Error: {e}"
            ) from e

        return {field_name: getattr(settings, field_name) for field_name in env_values}

    def _load_env_file(self, env_file: str | Path) -> None:
        """Load KEY=VALUE lines from a .env file into ``os.environ``."""
        env_path = Path(env_file)
        if not env_path.exists():
            raise FileNotFoundError(f"Environment file not found: {env_path}")

        try:
            with env_path.open(encoding="utf-8") as f:
                for line_num, line in enumerate(f, 1):
                    line = line.strip()

                    if not line or line.startswith("#"):
                        continue

                    if "=" not in line:
                        raise ValueError(
                            f"Invalid format at line {line_num}: expected KEY=VALUE format."
                        )

                    key, value = line.split("=", 1)
                    key = key.strip()
                    value = value.strip()

                    if (value.startswith('"') and value.endswith('"')) or (
                        value.startswith("'") and value.endswith("'")
                    ):
                        value = value[1:-1]

                    # Don't override existing env vars
                    if key not in os.environ:
                        os.environ[key] = value

        except OSError as e:
            raise ValueError(f"Failed to read environment file {env_path}: {e}") from e

    def get_env_summary(self) -> dict[str, str]:
        """Current TELEGRAM_* variables with the token redacted."""
        return {
            env_var: "<redacted>" if "TOKEN" in env_var else os.environ[env_var]
            for env_var in ENV_VARS
            if env_var in os.environ
        }
