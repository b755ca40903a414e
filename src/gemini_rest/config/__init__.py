"""Configuration management for the Gemini REST client.

Resolve once, freeze, then flow:

- ``resolve_config()`` merges programmatic values, ``GEMINI_*`` environment
  variables, ``[tool.gemini_rest]`` in ``pyproject.toml``, the home file and
  schema defaults, in that order of precedence.
- ``ResolvedConfig`` records where every value came from (``audit()``).
- ``FrozenConfig`` is the immutable form a client holds.
"""

from pathlib import Path
from typing import Any

from .env_loader import EnvironmentConfigLoader
from .file_loader import ConfigFileError, FileConfigLoader
from .resolver import ConfigResolver
from .schema import GeminiSettings
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig, SourceMap


def resolve_config(
    overrides: dict[str, Any] | None = None,
    *,
    profile: str | None = None,
    env_file: str | Path | None = None,
    project_root: Path | None = None,
    **kwargs: Any,
) -> ResolvedConfig:
    """Resolve configuration from all sources.

    Examples:
        cfg = resolve_config()  # environment, files and defaults
        cfg = resolve_config(model="models/gemini-2.5-pro")
        print(cfg.audit())
    """
    programmatic = {**(overrides or {}), **kwargs}
    return ConfigResolver().resolve(
        programmatic,
        profile=profile,
        env_file=env_file,
        project_root=project_root,
    )


__all__ = [  # noqa: RUF022
    "resolve_config",
    "ResolvedConfig",
    "FrozenConfig",
    "SourceMap",
    "ConfigOrigin",
    "GeminiSettings",
    "ConfigResolver",
    "FileConfigLoader",
    "EnvironmentConfigLoader",
    "ConfigFileError",
]
