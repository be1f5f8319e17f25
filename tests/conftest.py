"""
Shared test configuration and fixtures.

Keeps service settings independent of the environment the tests run in.
"""

import pytest

SETTINGS_ENVIRONMENT = (
    "DEBUG",
    "PORT",
    "PLUGIN_TIMEOUT",
    "MAX_RESOLVER_SET_SWAPS",
    "HEALTH_THRESHOLD",
    "HEALTH_TICK_INTERVAL",
    "SENTRY_DSN",
    "LOGGING_CONFIG_FILE",
    "METRICS_BACKEND",
    "TELEGRAF_HOST",
    "TELEGRAF_PORT",
    "STATSD_PREFIX",
)


@pytest.fixture(autouse=True)
def clean_settings_environment(monkeypatch):
    """Remove settings environment variables for each test."""
    for name in SETTINGS_ENVIRONMENT:
        monkeypatch.delenv(name, raising=False)
