"""Shared pytest fixtures and configuration.

Fixtures: respx_mock, logfire_capture, isolated_tempdir.
Sample pages, snippets and the fake browser pool live in tests/helpers.py.
"""

import os
import tempfile
from unittest.mock import patch

import pytest

os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

import logfire
import respx

from content_to_reader.config import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    """Run every test against default settings."""
    for key in list(os.environ):
        if key.startswith("CTR_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def respx_mock():
    """Respx mock fixture for HTTP mocking."""
    with respx.mock:
        yield respx


@pytest.fixture
def isolated_tempdir(tmp_path, monkeypatch):
    """Point ``tempfile`` at a private directory so leftovers can be asserted."""
    directory = tmp_path / "tmp"
    directory.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(directory))
    return directory


@pytest.fixture
def logfire_capture():
    """
    Capture Logfire logs for testing.

    This fixture patches Logfire to capture log calls for assertion.
    """
    captured_logs = []

    original_info = logfire.info
    original_warning = logfire.warning
    original_error = logfire.error

    def capture_info(*args, **kwargs):
        captured_logs.append(("info", args, kwargs))
        return original_info(*args, **kwargs)

    def capture_warning(*args, **kwargs):
        captured_logs.append(("warning", args, kwargs))
        return original_warning(*args, **kwargs)

    def capture_error(*args, **kwargs):
        captured_logs.append(("error", args, kwargs))
        return original_error(*args, **kwargs)

    with (
        patch("logfire.info", side_effect=capture_info),
        patch("logfire.warning", side_effect=capture_warning),
        patch("logfire.error", side_effect=capture_error),
    ):
        yield captured_logs
