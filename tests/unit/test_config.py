"""Tests for application configuration."""

import pytest
from hypothesis import given, strategies as st
from pydantic import ValidationError
from unittest.mock import patch

from content_to_reader.config import Settings, get_settings


class TestSettings:
    """Test Settings model validation."""

    def test_settings_default_values(self):
        """Test that default values are set correctly when not overridden by env."""
        settings = Settings(_env_file=None)
        assert settings.env == "local"
        assert settings.fetch_concurrency == 16
        assert settings.browser_page_load_timeout_seconds == 30.0
        assert settings.redirect_triggers_fallback is True
        assert settings.max_html_errors == 2
        assert settings.smtp_port == 465
        assert settings.logfire_token is None

    @given(
        concurrency=st.integers(min_value=1, max_value=512),
        max_html_errors=st.integers(min_value=0, max_value=100),
        env=st.sampled_from(["local", "ci", "prod"]),
    )
    def test_settings_optional_fields_properties(
        self, concurrency: int, max_html_errors: int, env: str
    ):
        """Property: Settings should accept valid optional field values."""
        settings = Settings(
            _env_file=None,
            fetch_concurrency=concurrency,
            max_html_errors=max_html_errors,
            env=env,
        )
        assert settings.fetch_concurrency == concurrency
        assert settings.max_html_errors == max_html_errors
        assert settings.env == env

    @pytest.mark.parametrize(
        "overrides",
        [
            {"env": "invalid"},
            {"fetch_concurrency": 0},
            {"max_html_errors": -1},
            {"browser_page_load_timeout_seconds": 0},
        ],
    )
    def test_settings_rejects_invalid_values(self, overrides):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **overrides)


class TestGetSettings:
    """Test get_settings() function."""

    def test_get_settings_caching(self):
        """Test that get_settings() returns cached instance."""
        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

    @patch.dict(
        "os.environ",
        {
            "CTR_FETCH_CONCURRENCY": "4",
            "CTR_REDIRECT_TRIGGERS_FALLBACK": "false",
            "CTR_MAX_HTML_ERRORS": "5",
        },
    )
    def test_get_settings_from_env(self):
        """Test that get_settings() loads from prefixed environment variables."""
        get_settings.cache_clear()

        settings = get_settings()

        assert settings.fetch_concurrency == 4
        assert settings.redirect_triggers_fallback is False
        assert settings.max_html_errors == 5

    def test_get_settings_case_insensitive(self):
        """Test that environment variable names are case-insensitive."""
        with patch.dict("os.environ", {"ctr_smtp_host": "smtp.example.com"}):
            get_settings.cache_clear()
            settings = get_settings()

            assert settings.smtp_host == "smtp.example.com"
