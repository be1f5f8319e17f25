"""Resolver handles and the plugin invocation adapter.

A `Resolver` is anything the engine can ask about a URI. `PluginResolver`
wraps a concrete plugin (ENS lookup, IPFS fetch, ...) and turns everything
that can go wrong with it into a `PluginError`.
"""

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Protocol, Union, runtime_checkable

from social.graze.uriresolve.errors import FileUnavailable, PluginError
from social.graze.uriresolve.observe import NULL_OBSERVER, ResolutionObserver
from social.graze.uriresolve.outcome import PluginResponse, ResolutionOutcome
from social.graze.uriresolve.uri import Uri, parse_uri

logger = logging.getLogger(__name__)


@runtime_checkable
class ResolverPlugin(Protocol):
    """What a resolver plugin has to provide.

    `try_resolve_uri` returns a `PluginResponse`, a mapping with the
    `newUri` / `manifest` / `newResolverUri` keys, or `None` for no opinion.
    Plugins that serve files also provide `get_file(path) -> bytes`.
    """

    async def try_resolve_uri(self, authority: str, path: str) -> Any: ...


class Resolver(ABC):
    """A resolver handle: an identifier plus the ability to be invoked."""

    def __init__(self, uri: Union[Uri, str]) -> None:
        self.uri: Uri = uri if isinstance(uri, Uri) else parse_uri(uri)

    @abstractmethod
    async def invoke(
        self, uri: Uri, observer: ResolutionObserver = NULL_OBSERVER
    ) -> ResolutionOutcome:
        """Ask this resolver about `uri`.

        Raises:
            PluginError: If the underlying plugin failed or misbehaved
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.uri})"


async def _call(func: Any, *args: Any) -> Any:
    result = func(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class PluginResolver(Resolver):
    """Adapter between the engine and a single resolver plugin.

    Each call runs under `timeout` seconds (no limit when None). Plugin
    exceptions, timeouts and ambiguous responses surface as `PluginError`.
    Cancellation is never converted.
    """

    def __init__(
        self,
        uri: Union[Uri, str],
        plugin: ResolverPlugin,
        timeout: Optional[float] = None,
    ) -> None:
        super().__init__(uri)
        self.plugin = plugin
        self.timeout = timeout

    async def invoke(
        self, uri: Uri, observer: ResolutionObserver = NULL_OBSERVER
    ) -> ResolutionOutcome:
        resolver_uri = str(self.uri)
        try:
            async with asyncio.timeout(self.timeout):
                result = await _call(
                    self.plugin.try_resolve_uri, uri.authority, uri.path
                )
        except TimeoutError as e:
            raise PluginError(resolver_uri, f"timed out after {self.timeout}s") from e
        except PluginError:
            raise
        except Exception as e:
            raise PluginError(resolver_uri, f"{type(e).__name__}: {e}") from e

        response = PluginResponse.from_plugin_result(result, resolver_uri)
        return response.to_outcome(resolver_uri)

    async def get_file(self, path: str) -> bytes:
        """Fetch a file through this resolver's plugin.

        Raises:
            FileUnavailable: If the plugin cannot serve files, fails, times
                out or has no content at `path`
        """
        get_file = getattr(self.plugin, "get_file", None)
        if get_file is None:
            raise FileUnavailable(f"Resolver {self.uri} does not serve files")

        try:
            async with asyncio.timeout(self.timeout):
                content = await _call(get_file, path)
        except TimeoutError as e:
            raise FileUnavailable(
                f"Resolver {self.uri} timed out fetching {path}"
            ) from e
        except FileUnavailable:
            raise
        except Exception as e:
            raise FileUnavailable(
                f"Resolver {self.uri} failed fetching {path}: {e}"
            ) from e

        if content is None:
            raise FileUnavailable(f"Resolver {self.uri} has no file at {path}")
        return content
