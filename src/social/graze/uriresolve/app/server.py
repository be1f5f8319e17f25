import asyncio
import contextlib
import logging
from time import time
from typing import Mapping, Optional

from aiohttp import web
import sentry_sdk
from sentry_sdk.integrations.aiohttp import AioHttpIntegration

from social.graze.uriresolve.app.config import (
    HealthGaugeAppKey,
    MetricsClientAppKey,
    RegistryAppKey,
    RegistryFactoryAppKey,
    Settings,
    SettingsAppKey,
    TickHealthTaskAppKey,
)
from social.graze.uriresolve.app.handlers import (
    handle_internal_alive,
    handle_internal_ready,
    handle_internal_resolve,
)
from social.graze.uriresolve.app.logs import configure_logging
from social.graze.uriresolve.engine.client import RegistryFactory
from social.graze.uriresolve.health import HealthGauge, tick_health_task
from social.graze.uriresolve.metrics import create_metrics_client
from social.graze.uriresolve.resolvers.base import PluginResolver, ResolverPlugin
from social.graze.uriresolve.resolvers.registry import ResolverRegistry

logger = logging.getLogger(__name__)


def plugin_registry(
    plugins: Mapping[str, ResolverPlugin], settings: Settings
) -> ResolverRegistry:
    """Build a registry of plugin resolvers using the configured timeout.

    Args:
        plugins: Resolver URI to plugin, in priority order
        settings: Service settings
    """
    return ResolverRegistry(
        PluginResolver(uri, plugin, timeout=settings.plugin_timeout)
        for uri, plugin in plugins.items()
    )


async def background_tasks(app):
    logger.info("Starting up")

    metrics_client = app[MetricsClientAppKey]
    await metrics_client.connect()

    logger.info("Startup complete")

    app[TickHealthTaskAppKey] = asyncio.create_task(
        tick_health_task(
            app[HealthGaugeAppKey], app[SettingsAppKey].health_tick_interval
        )
    )

    yield

    logger.info("Shutting down background tasks")

    app[TickHealthTaskAppKey].cancel()

    with contextlib.suppress(asyncio.exceptions.CancelledError):
        await app[TickHealthTaskAppKey]

    await metrics_client.close()


@web.middleware
async def sentry_middleware(request: web.Request, handler):
    try:
        response = await handler(request)
        return response
    except web.HTTPException:
        raise
    except Exception as e:
        sentry_sdk.capture_exception(e)
        raise e


@web.middleware
async def statsd_middleware(request: web.Request, handler):
    metrics_client = request.app[MetricsClientAppKey]
    request_method: str = request.method
    request_path = request.path

    start_time: float = time()
    response_status_code = 0

    try:
        response = await handler(request)
        response_status_code = response.status
        return response
    except Exception as e:
        metrics_client.increment(
            "uriresolve.server.request.exception",
            1,
            tag_dict={
                "exception": type(e).__name__,
                "path": request_path,
                "method": request_method,
            },
        )
        raise e
    finally:
        metrics_client.timer(
            "uriresolve.server.request.time",
            time() - start_time,
            tag_dict={"path": request_path, "method": request_method},
        )
        metrics_client.increment(
            "uriresolve.server.request.count",
            1,
            tag_dict={
                "path": request_path,
                "method": request_method,
                "status": response_status_code,
            },
        )


def make_app(
    registry: ResolverRegistry,
    build_registry: Optional[RegistryFactory] = None,
    settings: Optional[Settings] = None,
) -> web.Application:
    """Create the resolution service.

    The initial registry and the registry construction callable are supplied
    by the embedding application.
    """
    if settings is None:
        settings = Settings()  # type: ignore
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            send_default_pii=True,
            integrations=[AioHttpIntegration()],
        )

    app = web.Application(middlewares=[statsd_middleware, sentry_middleware])

    app[SettingsAppKey] = settings
    app[RegistryAppKey] = registry
    if build_registry is not None:
        app[RegistryFactoryAppKey] = build_registry
    app[HealthGaugeAppKey] = HealthGauge(health_threshold=settings.health_threshold)
    app[MetricsClientAppKey] = create_metrics_client(
        settings.metrics_backend,
        host=settings.statsd_host,
        port=settings.statsd_port,
        prefix=settings.statsd_prefix,
        debug=settings.debug,
    )

    app.add_routes(
        [
            web.get("/internal/alive", handle_internal_alive),
            web.get("/internal/ready", handle_internal_ready),
            web.get("/internal/api/resolve", handle_internal_resolve),
        ]
    )

    app.cleanup_ctx.append(background_tasks)

    return app


def run_web_server(
    registry: ResolverRegistry,
    build_registry: Optional[RegistryFactory] = None,
    settings: Optional[Settings] = None,
) -> None:
    if settings is None:
        settings = Settings()  # type: ignore

    configure_logging(settings.debug)

    web.run_app(make_app(registry, build_registry, settings), port=settings.http_port)
