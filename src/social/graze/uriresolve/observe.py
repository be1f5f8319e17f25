"""Observability hooks for resolution.

The engine and the aggregator report plugin errors, redirects, resolver set
swaps and terminal outcomes to a `ResolutionObserver`. The base class ignores
everything; `InstrumentedObserver` logs, reports to Sentry, feeds the health
gauge and emits metrics.
"""

import logging
from typing import TYPE_CHECKING, Optional

import sentry_sdk

from social.graze.uriresolve.errors import PluginError
from social.graze.uriresolve.health import HealthGauge
from social.graze.uriresolve.metrics import MetricsClient, NoOpMetricsClient
from social.graze.uriresolve.uri import Uri

if TYPE_CHECKING:
    from social.graze.uriresolve.engine.state import EngineResult
    from social.graze.uriresolve.resolvers.base import Resolver

logger = logging.getLogger(__name__)


class ResolutionObserver:
    async def plugin_error(self, error: PluginError, uri: Uri) -> None:
        pass

    async def redirect(self, resolver: "Resolver", uri: Uri, new_uri: Uri) -> None:
        pass

    async def resolver_set_swap(
        self, resolver: "Resolver", uri: Uri, new_resolver_uri: Uri
    ) -> None:
        pass

    async def outcome(self, result: "EngineResult") -> None:
        pass


NULL_OBSERVER = ResolutionObserver()


class InstrumentedObserver(ResolutionObserver):
    """Observer used by the service.

    Plugin errors are logged with their traceback, captured by Sentry and
    counted against the health gauge. Every event is also counted in metrics.
    """

    def __init__(
        self,
        metrics_client: Optional[MetricsClient] = None,
        health_gauge: Optional[HealthGauge] = None,
    ) -> None:
        self.metrics_client = metrics_client or NoOpMetricsClient()
        self.health_gauge = health_gauge

    async def plugin_error(self, error: PluginError, uri: Uri) -> None:
        logger.warning(
            "Resolver %s failed on %s: %s", error.resolver_uri, uri, error.reason
        )
        sentry_sdk.capture_exception(error)
        self.metrics_client.increment(
            "uriresolve.engine.plugin_error",
            1,
            tag_dict={"resolver": error.resolver_uri, "authority": uri.authority},
        )
        if self.health_gauge is not None:
            await self.health_gauge.womp()

    async def redirect(self, resolver: "Resolver", uri: Uri, new_uri: Uri) -> None:
        logger.debug("Resolver %s redirected %s to %s", resolver.uri, uri, new_uri)
        self.metrics_client.increment(
            "uriresolve.engine.redirect",
            1,
            tag_dict={"from": uri.authority, "to": new_uri.authority},
        )

    async def resolver_set_swap(
        self, resolver: "Resolver", uri: Uri, new_resolver_uri: Uri
    ) -> None:
        logger.info(
            "Resolver %s requested a new resolver set %s while resolving %s",
            resolver.uri,
            new_resolver_uri,
            uri,
        )
        self.metrics_client.increment(
            "uriresolve.engine.resolver_set_swap",
            1,
            tag_dict={"resolver": str(resolver.uri)},
        )

    async def outcome(self, result: "EngineResult") -> None:
        logger.info("Resolution of %s finished: %s", result.uri, result.status)
        self.metrics_client.increment(
            "uriresolve.engine.outcome", 1, tag_dict={"status": result.status}
        )
