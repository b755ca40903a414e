"""
Global test configuration.
"""

import logging
import os

import pytest
import pytest_asyncio

from tests.helpers import TEST_API_KEY, RecordingHandler, make_transport


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def isolate_gemini_env(request, monkeypatch, tmp_path):
    """Ensure a clean GEMINI_* environment and no real config files.

    - Removes all GEMINI_* variables before each test
    - Points the home and project config paths at files that do not exist

    Escape hatch: @pytest.mark.allow_env_pollution keeps the current env.
    """
    if request.node.get_closest_marker("allow_env_pollution") or (
        "api" in request.node.keywords
    ):
        return

    for key in list(os.environ.keys()):
        if key.startswith("GEMINI_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("GEMINI_REST_CONFIG_HOME", str(tmp_path / "home" / "gemini_rest.toml"))
    monkeypatch.setenv("GEMINI_REST_PYPROJECT_PATH", str(tmp_path / "project" / "pyproject.toml"))


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading .env files unless a test opts in."""
    if request.node.get_closest_marker("allow_dotenv"):
        return
    monkeypatch.setattr("dotenv.load_dotenv", lambda *_args, **_kwargs: False)


# --- Logging Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Sets the log level for noisy external libraries to WARNING."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "contract: Behavioral guarantees of the public surface",
        "api: Real API integration tests (requires API key)",
        "allow_env_pollution: Keep the ambient GEMINI_* environment",
        "allow_dotenv: Let python-dotenv load .env files",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


def pytest_collection_modifyitems(config, items):  # noqa: ARG001
    """Automatically skip API tests when API key is unavailable."""
    if not (os.getenv("GEMINI_API_KEY") and os.getenv("ENABLE_API_TESTS")):
        skip_api = pytest.mark.skip(
            reason="API tests require GEMINI_API_KEY and ENABLE_API_TESTS=1",
        )
        for item in items:
            if "api" in item.keywords:
                item.add_marker(skip_api)


# --- Core Fixtures ---


@pytest.fixture
def mock_api_key():
    """Provide a consistent, fake API key for tests."""
    return TEST_API_KEY


@pytest.fixture
def http_handler():
    """Recording handler for an in-memory HTTP transport."""
    return RecordingHandler()


@pytest_asyncio.fixture
async def transport(http_handler):
    """``GeminiTransport`` wired to ``http_handler``."""
    transport = make_transport(http_handler)
    yield transport
    await transport._client.aclose()
