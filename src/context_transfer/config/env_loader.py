"""Environment variable configuration loading.

This module handles loading configuration from environment variables with
the CONTEXT_TRANSFER_ prefix, including optional .env file support and type
coercion.
"""

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .schema import TransferSettings
from .types import FIELD_ORDER

ENV_PREFIX = "CONTEXT_TRANSFER_"


class EnvironmentConfigLoader:
    """Loads configuration from CONTEXT_TRANSFER_* environment variables."""

    def load_env_config(self, env_file: str | Path | None = None) -> dict[str, Any]:
        """Load configuration from environment variables.

        Args:
            env_file: Optional path to a .env file loaded first. Variables
                     already present in the environment are not overridden.

        Returns:
            Dictionary of configuration values found in environment.
            Only includes fields that are actually set (not defaults).

        Raises:
            FileNotFoundError: If ``env_file`` does not exist.
            ValueError: If environment variables contain invalid values.
        """
        if env_file:
            env_path = Path(env_file)
            if not env_path.exists():
                raise FileNotFoundError(f"Environment file not found: {env_path}")
            load_dotenv(env_path, override=False)

        env_values = {
            field: os.environ[ENV_PREFIX + field.upper()]
            for field in FIELD_ORDER
            if ENV_PREFIX + field.upper() in os.environ
        }
        if not env_values:
            return {}

        try:
            settings = TransferSettings(**env_values)
        except Exception as e:
            env_var_list = [
                f"{ENV_PREFIX}{field.upper()}={value}"
                for field, value in env_values.items()
            ]
            raise ValueError(
                f"Invalid environment variable values: {', '.join(env_var_list)}. "
                f"Error: {e}"
            ) from e

        return {field: getattr(settings, field) for field in env_values}
