"""Configuration resolution with precedence handling.

Merges configuration according to the documented precedence order:
Programmatic > Environment > Project file > Home file > Defaults
"""

import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from gemini_rest.exceptions import ConfigurationError

from .env_loader import EnvironmentConfigLoader
from .file_loader import FileConfigLoader
from .schema import CONFIG_FIELDS, GeminiSettings
from .types import ConfigOrigin, ResolvedConfig

logger = logging.getLogger(__name__)

PROFILE_ENV = "GEMINI_PROFILE"


class ConfigResolver:
    """Resolves configuration from multiple sources with proper precedence."""

    def __init__(
        self,
        file_loader: FileConfigLoader | None = None,
        env_loader: EnvironmentConfigLoader | None = None,
    ) -> None:
        self.file_loader = file_loader or FileConfigLoader()
        self.env_loader = env_loader or EnvironmentConfigLoader()

    def resolve(
        self,
        programmatic: dict[str, Any] | None = None,
        *,
        profile: str | None = None,
        env_file: str | Path | None = None,
        project_root: Path | None = None,
    ) -> ResolvedConfig:
        """Resolve configuration from all sources.

        Args:
            programmatic: Explicit overrides (highest precedence). ``None``
                values are ignored so callers can pass optional arguments
                straight through.
            profile: Profile name to load from files; defaults to
                ``GEMINI_PROFILE``.
            env_file: Optional ``.env`` file to load.
            project_root: Directory to search for ``pyproject.toml``.

        Returns:
            ResolvedConfig with merged values and per-field origins.

        Raises:
            ConfigFileError: If a configuration file is malformed.
            ConfigurationError: If the merged values fail validation.
        """
        if profile is None:
            profile = os.getenv(PROFILE_ENV) or None

        merged: dict[str, Any] = GeminiSettings.defaults()
        origin: dict[str, ConfigOrigin] = dict.fromkeys(merged, "default")

        def _apply(values: dict[str, Any], source: ConfigOrigin) -> None:
            for field, value in values.items():
                if field not in merged:
                    logger.debug("Ignoring unknown config field '%s' from %s", field, source)
                    continue
                if value is None:
                    continue
                merged[field] = value
                origin[field] = source

        _apply(self.file_loader.load_home_config(profile=profile), "file")
        _apply(
            self.file_loader.load_project_config(
                project_root=project_root, profile=profile
            ),
            "file",
        )
        _apply(self.env_loader.load_env_config(env_file=env_file), "env")
        _apply(programmatic or {}, "programmatic")

        try:
            validated = GeminiSettings.model_validate(merged).to_dict()
        except PydanticValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

        resolved = ResolvedConfig(
            **{field: validated[field] for field in CONFIG_FIELDS},
            origin=origin,
        )
        logger.debug("Resolved configuration: %s", resolved)
        return resolved
