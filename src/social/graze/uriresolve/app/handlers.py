import logging
from typing import Any, Dict

from aiohttp import web

from social.graze.uriresolve.app.config import (
    HealthGaugeAppKey,
    MetricsClientAppKey,
    RegistryAppKey,
    RegistryFactoryAppKey,
    SettingsAppKey,
)
from social.graze.uriresolve.engine import (
    EngineResult,
    Exhausted,
    Failed,
    Found,
    ResolutionEngine,
    ResolverSetSwapped,
    resolve_uri,
)
from social.graze.uriresolve.errors import UriParseError
from social.graze.uriresolve.observe import InstrumentedObserver
from social.graze.uriresolve.uri import parse_uri

logger = logging.getLogger(__name__)


def result_to_dict(result: EngineResult) -> Dict[str, Any]:
    body: Dict[str, Any] = {"uri": str(result.uri), "status": result.status}
    if isinstance(result, Found):
        body["manifest"] = result.manifest
        body["resolver"] = str(result.resolver.uri)
    elif isinstance(result, Failed):
        body["reason"] = result.reason.value
    elif isinstance(result, ResolverSetSwapped):
        body["new_resolver_uri"] = str(result.new_resolver_uri)
        body["resolver"] = str(result.resolver.uri)
    if isinstance(result, (Found, Exhausted, Failed, ResolverSetSwapped)):
        body["visited"] = [str(uri) for uri in result.visited]
    return body


async def handle_internal_ready(request: web.Request):
    health_gauge = request.app[HealthGaugeAppKey]
    if await health_gauge.is_healthy():
        return web.Response(status=200)
    return web.Response(status=503)


async def handle_internal_alive(request: web.Request):
    return web.Response(status=200)


async def handle_internal_resolve(request: web.Request):
    uris = request.query.getall("uri", [])
    if len(uris) == 0:
        return web.json_response([])

    settings = request.app[SettingsAppKey]
    engine = ResolutionEngine(
        InstrumentedObserver(
            request.app[MetricsClientAppKey], request.app[HealthGaugeAppKey]
        )
    )

    results = []
    for value in uris:
        try:
            uri = parse_uri(value)
        except UriParseError as e:
            results.append({"uri": value, "status": "invalid", "error": str(e)})
            continue

        result = await resolve_uri(
            uri,
            request.app[RegistryAppKey],
            build_registry=request.app.get(RegistryFactoryAppKey),
            engine=engine,
            max_swaps=settings.max_resolver_set_swaps,
        )
        results.append(result_to_dict(result))
    return web.json_response(results)
