"""
Unit tests for social.graze.uriresolve.app.config
"""

import pytest
from pydantic import ValidationError

from social.graze.uriresolve.app.config import Settings


class TestSettings:
    """Test suite for Settings."""

    def test_defaults(self):
        """Test development defaults."""
        settings = Settings()
        assert settings.debug is False
        assert settings.http_port == 5200
        assert settings.plugin_timeout == 10.0
        assert settings.max_resolver_set_swaps == 8
        assert settings.metrics_backend == "none"
        assert settings.sentry_dsn is None

    def test_from_environment(self, monkeypatch):
        """Test values are read from environment variables."""
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("PLUGIN_TIMEOUT", "2.5")
        monkeypatch.setenv("MAX_RESOLVER_SET_SWAPS", "3")
        monkeypatch.setenv("METRICS_BACKEND", "Telegraf")
        monkeypatch.setenv("TELEGRAF_HOST", "statsd.internal")

        settings = Settings()

        assert settings.http_port == 8080
        assert settings.plugin_timeout == 2.5
        assert settings.max_resolver_set_swaps == 3
        assert settings.metrics_backend == "telegraf"
        assert settings.statsd_host == "statsd.internal"

    @pytest.mark.parametrize("value", ["0", ""])
    def test_plugin_timeout_disabled(self, monkeypatch, value):
        """Test 0 or an empty value disables the plugin timeout."""
        monkeypatch.setenv("PLUGIN_TIMEOUT", value)
        assert Settings().plugin_timeout is None

    def test_invalid_metrics_backend(self):
        """Test unknown metrics backends are rejected."""
        with pytest.raises(ValidationError):
            Settings(metrics_backend="prometheus")
