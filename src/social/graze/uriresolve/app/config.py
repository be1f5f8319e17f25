"""
Configuration Module for the URI resolution service

Settings are loaded from environment variables through Pydantic settings,
with defaults suitable for development. Shared resources are handed to the
aiohttp application through typed AppKeys.

Key configuration areas include:
- Service networking
- Resolver invocation limits
- Monitoring and error reporting
"""

import asyncio
import logging
from typing import Final, Optional

from aiohttp import web
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from social.graze.uriresolve.engine.client import RegistryFactory
from social.graze.uriresolve.health import HealthGauge
from social.graze.uriresolve.metrics import MetricsClient
from social.graze.uriresolve.resolvers.registry import ResolverRegistry

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Settings for the URI resolution service.

    Environment variables map to fields by name, e.g. PLUGIN_TIMEOUT or
    MAX_RESOLVER_SET_SWAPS.
    """

    debug: bool = False
    """
    Enable debug mode for verbose logging.
    Set with DEBUG=true environment variable.
    """

    http_port: int = Field(alias="port", default=5200)
    """
    HTTP port for the service to listen on.
    Set with PORT environment variable.
    """

    plugin_timeout: Optional[float] = 10.0
    """
    Seconds a single resolver plugin call may take before it is treated as
    a plugin error. Set with PLUGIN_TIMEOUT environment variable.
    """

    max_resolver_set_swaps: int = 8
    """
    Maximum number of resolver set swaps within one resolution.
    Set with MAX_RESOLVER_SET_SWAPS environment variable.
    """

    health_threshold: int = 100
    """
    Outstanding plugin errors above which the readiness probe fails.
    Set with HEALTH_THRESHOLD environment variable.
    """

    health_tick_interval: float = 1.0
    """
    Seconds between each one-error drain of the health gauge.
    Set with HEALTH_TICK_INTERVAL environment variable.
    """

    sentry_dsn: Optional[str] = None
    """
    Sentry DSN for error reporting. No error reporting if not set.
    Set with SENTRY_DSN environment variable.
    """

    metrics_backend: str = "none"
    """
    Metrics backend, 'telegraf' or 'none'.
    Set with METRICS_BACKEND environment variable.
    """

    statsd_host: str = Field(alias="TELEGRAF_HOST", default="telegraf")
    """
    StatsD/Telegraf host for metrics collection.
    Set with TELEGRAF_HOST environment variable.
    """

    statsd_port: int = Field(alias="TELEGRAF_PORT", default=8125)
    """
    StatsD/Telegraf port for metrics collection.
    Set with TELEGRAF_PORT environment variable.
    """

    statsd_prefix: str = "uriresolve"
    """
    Prefix for all StatsD metrics from this service.
    Set with STATSD_PREFIX environment variable.
    """

    @field_validator("plugin_timeout", mode="before")
    @classmethod
    def decode_plugin_timeout(cls, v) -> Optional[float]:
        """
        Accept a number of seconds, or 0 / an empty value to disable the
        timeout.
        """
        if v is None or v == "" or v == 0 or v == "0":
            return None
        return float(v)

    @field_validator("metrics_backend")
    @classmethod
    def check_metrics_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in ("telegraf", "none"):
            raise ValueError("metrics_backend must be 'telegraf' or 'none'")
        return v


# Application context keys for dependency injection
SettingsAppKey: Final = web.AppKey("settings", Settings)
"""AppKey for accessing the application settings"""

RegistryAppKey: Final = web.AppKey("registry", ResolverRegistry)
"""AppKey for the initial resolver registry supplied by the embedding application"""

RegistryFactoryAppKey: Final = web.AppKey("registry_factory", RegistryFactory)
"""AppKey for the callable that builds a registry after a resolver set swap"""

MetricsClientAppKey: Final = web.AppKey("metrics_client", MetricsClient)
"""AppKey for the metrics client"""

HealthGaugeAppKey: Final = web.AppKey("health_gauge", HealthGauge)
"""AppKey for accessing the health monitoring gauge"""

TickHealthTaskAppKey: Final = web.AppKey("tick_health_task", asyncio.Task[None])
"""AppKey for the background task that drains the health gauge"""
