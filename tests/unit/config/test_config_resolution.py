"""Unit tests for configuration resolution.

These tests verify the core behaviors of the configuration module:
- Precedence: programmatic > environment > project file > home file > defaults
- Origins are tracked per field and the API key never leaks into output
- Profiles and .env files are honored
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from gemini_rest.config import ConfigFileError, FileConfigLoader, resolve_config
from gemini_rest.constants import DEFAULT_BASE_URL, DEFAULT_MODEL
from gemini_rest.exceptions import ConfigurationError


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestPrecedence:
    @pytest.mark.unit
    def test_defaults_without_any_source(self):
        resolved = resolve_config()

        assert resolved.api_key is None
        assert resolved.model == DEFAULT_MODEL
        assert resolved.base_url == DEFAULT_BASE_URL
        assert resolved.origin["model"] == "default"

    @pytest.mark.unit
    def test_environment_is_read_and_coerced(self):
        with patch.dict(
            os.environ,
            {
                "GEMINI_API_KEY": "env-api-key-123",
                "GEMINI_MODEL": "models/env-model",
                "GEMINI_TIMEOUT_SECONDS": "12.5",
            },
        ):
            resolved = resolve_config()

        assert resolved.api_key == "env-api-key-123"
        assert resolved.model == "models/env-model"
        assert resolved.timeout_seconds == 12.5
        assert resolved.origin["api_key"] == "env"

    @pytest.mark.unit
    def test_programmatic_beats_environment_and_none_is_ignored(self):
        with patch.dict(os.environ, {"GEMINI_API_KEY": "env-key", "GEMINI_MODEL": "env-model"}):
            resolved = resolve_config(api_key="explicit-key", model=None)

        assert resolved.api_key == "explicit-key"
        assert resolved.origin["api_key"] == "programmatic"
        assert resolved.model == "env-model"

    @pytest.mark.unit
    def test_project_file_beats_home_file(self, tmp_path):
        _write(
            Path(os.environ["GEMINI_REST_CONFIG_HOME"]),
            'model = "home-model"\ntimeout_seconds = 5\n',
        )
        _write(
            Path(os.environ["GEMINI_REST_PYPROJECT_PATH"]),
            '[tool.gemini_rest]\nmodel = "project-model"\n',
        )

        resolved = resolve_config()

        assert resolved.model == "project-model"
        assert resolved.timeout_seconds == 5
        assert resolved.origin["model"] == "file"

    @pytest.mark.unit
    def test_environment_beats_files(self):
        _write(
            Path(os.environ["GEMINI_REST_PYPROJECT_PATH"]),
            '[tool.gemini_rest]\nmodel = "project-model"\n',
        )

        with patch.dict(os.environ, {"GEMINI_MODEL": "env-model"}):
            assert resolve_config().model == "env-model"


class TestProfiles:
    @pytest.mark.unit
    def test_profile_selected_by_environment(self):
        _write(
            Path(os.environ["GEMINI_REST_PYPROJECT_PATH"]),
            '[tool.gemini_rest]\nmodel = "base"\n'
            '[tool.gemini_rest.profiles.pro]\nmodel = "models/gemini-2.5-pro"\n',
        )

        with patch.dict(os.environ, {"GEMINI_PROFILE": "pro"}):
            resolved = resolve_config()

        assert resolved.model == "models/gemini-2.5-pro"

    @pytest.mark.unit
    def test_unknown_profile_is_an_error(self):
        _write(
            Path(os.environ["GEMINI_REST_PYPROJECT_PATH"]),
            '[tool.gemini_rest.profiles.dev]\nmodel = "x"\n',
        )

        with pytest.raises(ConfigFileError, match="Profile 'prod' not found"):
            resolve_config(profile="prod")

    @pytest.mark.unit
    def test_list_available_profiles(self):
        _write(
            Path(os.environ["GEMINI_REST_PYPROJECT_PATH"]),
            "[tool.gemini_rest.profiles.b]\n[tool.gemini_rest.profiles.a]\n",
        )

        profiles = FileConfigLoader().list_available_profiles()

        assert profiles == {"project": ["a", "b"], "home": []}


class TestValidation:
    @pytest.mark.unit
    def test_invalid_value_raises_configuration_error(self):
        with pytest.raises(ConfigurationError):
            resolve_config(timeout_seconds=0)

    @pytest.mark.unit
    def test_non_http_base_url_is_rejected(self):
        with pytest.raises(ConfigurationError):
            resolve_config(base_url="ftp://example.test")

    @pytest.mark.unit
    def test_blank_api_key_counts_as_missing(self):
        assert resolve_config(api_key="   ").api_key is None

    @pytest.mark.unit
    def test_malformed_toml_is_a_file_error(self):
        _write(Path(os.environ["GEMINI_REST_CONFIG_HOME"]), "model = [unterminated")

        with pytest.raises(ConfigFileError):
            resolve_config()


class TestSecrets:
    @pytest.mark.unit
    def test_api_key_is_redacted_everywhere(self):
        resolved = resolve_config(api_key="super-secret-key")

        assert "super-secret-key" not in str(resolved)
        assert "super-secret-key" not in repr(resolved.to_frozen())
        assert "super-secret-key" not in resolved.audit()
        assert "api_key: programmatic:<redacted>" in resolved.audit()


class TestDotenv:
    @pytest.mark.unit
    @pytest.mark.allow_dotenv
    def test_env_file_is_loaded_without_overriding_environment(self, tmp_path):
        env_file = _write(tmp_path / ".env", "GEMINI_API_KEY=from-file\nGEMINI_MODEL=file-model\n")
        with patch.dict(os.environ, {"GEMINI_MODEL": "process-model"}):
            resolved = resolve_config(env_file=env_file)

        assert resolved.api_key == "from-file"
        assert resolved.model == "process-model"

    @pytest.mark.unit
    def test_missing_env_file_is_an_error(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            resolve_config(env_file=tmp_path / "nope.env")
