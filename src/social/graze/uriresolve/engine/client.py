"""Caller-side helpers around the engine.

The engine stops when a resolver asks for a different resolver set. Building
that set needs package loading machinery the engine knows nothing about, so
`resolve_uri` takes a `build_registry` callable and drives the
swap-and-retry loop. `ResolutionRequest` runs a resolution in its own task so
it can be cancelled. `load_manifest` and `fetch_file` are the follow-up steps
once a manifest has been found.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Set, Type, Union

from pydantic import BaseModel

from social.graze.uriresolve.engine.engine import ResolutionEngine
from social.graze.uriresolve.engine.state import (
    Cancelled,
    EngineResult,
    Failed,
    Found,
    ResolverSetSwapped,
)
from social.graze.uriresolve.errors import (
    FailureReason,
    FileUnavailable,
    ManifestInvalid,
)
from social.graze.uriresolve.resolvers.registry import ResolverRegistry
from social.graze.uriresolve.uri import Uri, parse_uri

logger = logging.getLogger(__name__)

RegistryFactory = Callable[[Found], Awaitable[ResolverRegistry]]
"""Builds a registry from the manifest found at a resolver set URI."""

DEFAULT_MAX_RESOLVER_SET_SWAPS = 8


async def resolve_uri(
    uri: Union[Uri, str],
    registry: ResolverRegistry,
    build_registry: Optional[RegistryFactory] = None,
    engine: Optional[ResolutionEngine] = None,
    max_swaps: int = DEFAULT_MAX_RESOLVER_SET_SWAPS,
) -> EngineResult:
    """Resolve a URI, rebuilding the registry whenever a resolver asks for it.

    On a resolver set swap the new resolver set URI is resolved against the
    current registry, `build_registry` turns the manifest found there into a
    new registry, and resolution restarts on the same URI with the new
    registry. The visited log is carried over, so a URI visited before the
    swap still counts towards cycle detection.

    Resolving a resolver set URI goes through the same swap handling, so a
    resolver set can itself ask for another set. Every swap of the whole
    resolution counts towards `max_swaps` and towards resolver set cycle
    detection. Only the terminal result of the whole resolution is passed to
    the observer.

    Without `build_registry` the ResolverSetSwapped result is returned as is.

    Args:
        uri: URI or URI string to resolve
        registry: Initial registry
        build_registry: Registry construction boundary
        engine: Engine to run, a default one when None
        max_swaps: Maximum number of resolver set swaps

    Returns:
        The terminal engine result
    """
    if not isinstance(uri, Uri):
        uri = parse_uri(uri)
    engine = engine or ResolutionEngine()

    swapped_to: Set[Uri] = set()

    async def drive(uri: Uri, registry: ResolverRegistry) -> EngineResult:
        visited = None
        while True:
            result = await engine.run(uri, registry, visited, report_outcome=False)
            if not isinstance(result, ResolverSetSwapped) or build_registry is None:
                return result

            if result.new_resolver_uri in swapped_to:
                return Failed(
                    reason=FailureReason.resolver_set_cycle,
                    uri=result.new_resolver_uri,
                    visited=result.visited,
                )
            swapped_to.add(result.new_resolver_uri)

            if len(swapped_to) > max_swaps:
                return Failed(
                    reason=FailureReason.swap_limit_exceeded,
                    uri=result.uri,
                    visited=result.visited,
                )

            set_result = await drive(result.new_resolver_uri, registry)
            if not isinstance(set_result, Found):
                logger.warning(
                    "Resolver set %s could not be resolved: %s",
                    result.new_resolver_uri,
                    set_result.status,
                )
                return set_result

            registry = await build_registry(set_result)
            logger.info(
                "Swapped resolver set to %s (%d resolvers)",
                result.new_resolver_uri,
                len(registry),
            )
            uri = result.uri
            visited = result.visited

    result = await drive(uri, registry)
    if isinstance(result, ResolverSetSwapped):
        return result
    return await engine.report(result)


class ResolutionRequest:
    """A single cancellable resolution.

    `outcome()` starts the resolution if needed and waits for it. After
    `cancel()` it returns `Cancelled`; nothing else is reported for a
    cancelled resolution and a new request can be made for the same URI.
    """

    def __init__(
        self,
        uri: Union[Uri, str],
        registry: ResolverRegistry,
        build_registry: Optional[RegistryFactory] = None,
        engine: Optional[ResolutionEngine] = None,
        max_swaps: int = DEFAULT_MAX_RESOLVER_SET_SWAPS,
    ) -> None:
        self.uri = uri if isinstance(uri, Uri) else parse_uri(uri)
        self._registry = registry
        self._build_registry = build_registry
        self._engine = engine
        self._max_swaps = max_swaps
        self._task: Optional[asyncio.Task[EngineResult]] = None

    def start(self) -> "ResolutionRequest":
        self._ensure_task()
        return self

    def _ensure_task(self) -> "asyncio.Task[EngineResult]":
        if self._task is None:
            self._task = asyncio.create_task(
                resolve_uri(
                    self.uri,
                    self._registry,
                    build_registry=self._build_registry,
                    engine=self._engine,
                    max_swaps=self._max_swaps,
                )
            )
        return self._task

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()

    def cancel(self) -> bool:
        if self._task is None:
            return False
        return self._task.cancel()

    async def outcome(self) -> EngineResult:
        task = self._ensure_task()
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                # The waiter itself is being cancelled.
                raise
            logger.debug("Resolution of %s cancelled", self.uri)
            return Cancelled(uri=self.uri)


Deserializer = Union[Type[BaseModel], Callable[[str], Any]]


async def load_manifest(found: Found, deserializer: Deserializer) -> Any:
    """Deserialize the manifest text of a found package.

    `deserializer` is a pydantic model (the text is validated as JSON) or a
    callable taking the text, sync or async.

    Raises:
        ManifestInvalid: If deserialization fails for any reason
    """
    try:
        if isinstance(deserializer, type) and issubclass(deserializer, BaseModel):
            return deserializer.model_validate_json(found.manifest)
        manifest = deserializer(found.manifest)
        if inspect.isawaitable(manifest):
            manifest = await manifest
        return manifest
    except ManifestInvalid:
        raise
    except Exception as e:
        raise ManifestInvalid(f"Invalid manifest at {found.uri}: {e}") from e


async def fetch_file(found: Found, path: str) -> bytes:
    """Fetch a file from the resolver that found the manifest.

    Raises:
        FileUnavailable: If that resolver cannot serve files or the file is
            not there
    """
    get_file = getattr(found.resolver, "get_file", None)
    if get_file is None:
        raise FileUnavailable(f"Resolver {found.resolver.uri} does not serve files")
    return await get_file(path)
