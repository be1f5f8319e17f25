"""
Metrics for URI resolution

Resolution emits a handful of counters and timers (plugin errors, redirects,
resolver set swaps, terminal outcomes, resolution time). This module hides the
backend behind a small interface so the engine and the service never talk to
a statsd client directly.

Backends:
- telegraf: aio-statsd TelegrafStatsdClient
- none: metrics disabled
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Union

from aio_statsd import TelegrafStatsdClient

logger = logging.getLogger(__name__)


class MetricsClient(ABC):
    """
    Backend-agnostic metrics interface.

    Tags are passed as a flat dictionary and are forwarded to the backend
    as-is.
    """

    @abstractmethod
    def increment(
        self,
        name: str,
        value: Union[int, float] = 1,
        tag_dict: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Increment a counter (e.g. 'uriresolve.engine.plugin_error')."""
        pass

    @abstractmethod
    def timer(
        self,
        name: str,
        value: Union[int, float],
        tag_dict: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Record a duration in seconds."""
        pass

    async def connect(self) -> None:
        pass

    @abstractmethod
    async def close(self) -> None:
        pass


class TelegrafCompatibilityClient(MetricsClient):
    """Delegates to an aio-statsd TelegrafStatsdClient."""

    def __init__(self, telegraf_client: Any, prefix: str = ""):
        self.client = telegraf_client
        self.prefix = prefix

    def _name(self, name: str) -> str:
        if self.prefix:
            return f"{self.prefix}.{name}"
        return name

    def increment(
        self,
        name: str,
        value: Union[int, float] = 1,
        tag_dict: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.client.increment(self._name(name), value, tag_dict=tag_dict or {})

    def timer(
        self,
        name: str,
        value: Union[int, float],
        tag_dict: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.client.timer(self._name(name), value, tag_dict=tag_dict or {})

    async def connect(self) -> None:
        await self.client.connect()

    async def close(self) -> None:
        try:
            await self.client.close()
        except Exception as e:
            logger.warning(f"Error closing Telegraf client: {e}")


class NoOpMetricsClient(MetricsClient):
    """Metrics disabled."""

    def increment(
        self,
        name: str,
        value: Union[int, float] = 1,
        tag_dict: Optional[Dict[str, Any]] = None,
    ) -> None:
        pass

    def timer(
        self,
        name: str,
        value: Union[int, float],
        tag_dict: Optional[Dict[str, Any]] = None,
    ) -> None:
        pass

    async def close(self) -> None:
        pass


def create_metrics_client(
    backend: str,
    host: str = "localhost",
    port: int = 8125,
    prefix: str = "",
    debug: bool = False,
) -> MetricsClient:
    """
    Create the metrics client for the configured backend.

    Args:
        backend: 'telegraf' or 'none'
        host: Telegraf/StatsD host
        port: Telegraf/StatsD port
        prefix: Prefix prepended to every metric name
        debug: Enable aio-statsd debug output

    Raises:
        ValueError: If the backend is unknown
    """
    backend = backend.lower()

    if backend == "telegraf":
        logger.debug(f"Creating telegraf metrics client for {host}:{port}")
        return TelegrafCompatibilityClient(
            TelegrafStatsdClient(host=host, port=port, debug=debug), prefix=prefix
        )

    elif backend == "none":
        logger.info("Metrics collection disabled (no-op client)")
        return NoOpMetricsClient()

    raise ValueError(
        f"Invalid metrics backend: {backend}. Supported backends: 'telegraf', 'none'"
    )
