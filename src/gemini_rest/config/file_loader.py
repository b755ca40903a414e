"""File-based configuration loading with profile support.

Two files are consulted:

- the project's ``pyproject.toml``, section ``[tool.gemini_rest]``
  (profiles under ``[tool.gemini_rest.profiles.<name>]``);
- a home file, ``~/.config/gemini_rest.toml`` (profiles under
  ``[profiles.<name>]``).

``GEMINI_REST_PYPROJECT_PATH`` and ``GEMINI_REST_CONFIG_HOME`` override the
two locations; tests use them to isolate configuration.
"""

import os
from pathlib import Path
import tomllib
from typing import Any

from gemini_rest.exceptions import ConfigurationError

CONFIG_TOOL_NAME = "gemini_rest"
PYPROJECT_PATH_ENV = "GEMINI_REST_PYPROJECT_PATH"
CONFIG_HOME_ENV = "GEMINI_REST_CONFIG_HOME"


class ConfigFileError(ConfigurationError):
    """Raised when configuration file loading fails."""

    def __init__(
        self, file_path: Path, message: str, cause: Exception | None = None
    ) -> None:
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(f"Config file error in {file_path}: {message}")


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open(mode="rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigFileError(path, f"Failed to parse TOML: {e}", cause=e) from e


def _select_profile(
    path: Path, section: dict[str, Any], profile: str | None
) -> dict[str, Any]:
    if profile:
        profiles = section.get("profiles", {})
        if profile not in profiles:
            available = sorted(profiles) if profiles else []
            raise ConfigFileError(
                path, f"Profile '{profile}' not found. Available profiles: {available}"
            )
        return dict(profiles[profile])
    config = dict(section)
    config.pop("profiles", None)
    return config


class FileConfigLoader:
    """Loads configuration from TOML files with profile support."""

    def load_project_config(
        self, project_root: Path | None = None, profile: str | None = None
    ) -> dict[str, Any]:
        """Load ``[tool.gemini_rest]`` from the nearest ``pyproject.toml``.

        Args:
            project_root: Directory to start the upward search from; defaults
                to the current directory.
            profile: Optional profile name.

        Returns:
            Configuration values, or an empty dict when there is no file or
            no section.

        Raises:
            ConfigFileError: If the file cannot be parsed or the profile does
                not exist.
        """
        pyproject_path = self._find_pyproject_toml(project_root)
        if pyproject_path is None:
            return {}
        section = _read_toml(pyproject_path).get("tool", {}).get(CONFIG_TOOL_NAME, {})
        if not section:
            return {}
        return _select_profile(pyproject_path, section, profile)

    def load_home_config(self, profile: str | None = None) -> dict[str, Any]:
        """Load the home configuration file.

        Returns:
            Configuration values, or an empty dict when the file is absent.

        Raises:
            ConfigFileError: If the file cannot be parsed or the profile does
                not exist.
        """
        home_path = self.home_config_path()
        if not home_path.exists():
            return {}
        return _select_profile(home_path, _read_toml(home_path), profile)

    def list_available_profiles(
        self, project_root: Path | None = None
    ) -> dict[str, list[str]]:
        """List profile names from the project and home files.

        Unreadable files are treated as having no profiles.
        """
        profiles: dict[str, list[str]] = {"project": [], "home": []}
        pyproject_path = self._find_pyproject_toml(project_root)
        if pyproject_path is not None:
            try:
                section = (
                    _read_toml(pyproject_path).get("tool", {}).get(CONFIG_TOOL_NAME, {})
                )
                profiles["project"] = sorted(section.get("profiles", {}))
            except ConfigFileError:
                pass
        home_path = self.home_config_path()
        if home_path.exists():
            try:
                profiles["home"] = sorted(_read_toml(home_path).get("profiles", {}))
            except ConfigFileError:
                pass
        return profiles

    def home_config_path(self) -> Path:
        """Path of the home configuration file."""
        override = os.getenv(CONFIG_HOME_ENV)
        if override:
            return Path(override)
        return Path.home() / ".config" / f"{CONFIG_TOOL_NAME}.toml"

    def _find_pyproject_toml(self, start_dir: Path | None = None) -> Path | None:
        override = os.getenv(PYPROJECT_PATH_ENV)
        if override:
            path = Path(override)
            return path if path.exists() else None

        current = Path(start_dir or Path.cwd()).resolve()
        while current != current.parent:
            candidate = current / "pyproject.toml"
            if candidate.exists():
                return candidate
            current = current.parent
        return None
