"""Environment variable configuration loading.

Reads the ``GEMINI_*`` variables that map onto configuration fields. An
optional ``.env`` file is loaded first through python-dotenv; values already
present in the process environment win over the file.
"""

import os
from pathlib import Path
from typing import Any

import dotenv

from .schema import CONFIG_FIELDS

ENV_PREFIX = "GEMINI_"


def env_var_for(field_name: str) -> str:
    """Environment variable name for a configuration field."""
    return f"{ENV_PREFIX}{field_name.upper()}"


class EnvironmentConfigLoader:
    """Loads configuration from ``GEMINI_*`` environment variables."""

    def load_env_config(self, env_file: str | Path | None = None) -> dict[str, Any]:
        """Load configuration values that are set in the environment.

        Args:
            env_file: Optional ``.env`` file to load before reading variables.

        Returns:
            Raw (string) values for the fields that are actually set. Type
            coercion happens during final validation.

        Raises:
            FileNotFoundError: If ``env_file`` does not exist.
        """
        if env_file is not None:
            env_path = Path(env_file)
            if not env_path.exists():
                raise FileNotFoundError(f"Environment file not found: {env_path}")
            dotenv.load_dotenv(env_path, override=False)

        values: dict[str, Any] = {}
        for field_name in CONFIG_FIELDS:
            raw = os.environ.get(env_var_for(field_name))
            if raw is not None and raw != "":
                values[field_name] = raw
        return values
