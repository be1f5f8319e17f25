"""
Common testing utilities for resolution tests.

Provides in-memory resolver plugins with scripted answers, plus shortcuts for
building URIs and registries.
"""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

from social.graze.uriresolve.resolvers import (
    PluginResolver,
    Resolver,
    ResolverRegistry,
)
from social.graze.uriresolve.uri import Uri, parse_uri


def u(value: str) -> Uri:
    """Parse a URI string for testing."""
    return parse_uri(value)


class ScriptedPlugin:
    """Plugin answering from a fixed table keyed by URI string.

    Unknown URIs get no opinion. Every call is recorded.
    """

    def __init__(
        self,
        answers: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, bytes]] = None,
    ) -> None:
        self.answers = answers or {}
        self.files = files or {}
        self.calls: List[Tuple[str, str]] = []

    async def try_resolve_uri(self, authority: str, path: str) -> Any:
        self.calls.append((authority, path))
        return self.answers.get(f"w3://{authority}/{path}")

    async def get_file(self, path: str) -> Optional[bytes]:
        return self.files.get(path)


class AuthorityPlugin:
    """Plugin that answers for every path under one authority."""

    def __init__(self, authority: str, answer: Dict[str, Any]) -> None:
        self.authority = authority
        self.answer = answer
        self.calls: List[Tuple[str, str]] = []

    async def try_resolve_uri(self, authority: str, path: str) -> Any:
        self.calls.append((authority, path))
        if authority == self.authority:
            return self.answer
        return None


class FailingPlugin:
    """Plugin whose every call raises."""

    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error or RuntimeError("plugin exploded")
        self.calls = 0

    async def try_resolve_uri(self, authority: str, path: str) -> Any:
        self.calls += 1
        raise self.error


class BlockingPlugin:
    """Plugin that blocks until released, recording whether it was cancelled."""

    def __init__(self, answer: Optional[Dict[str, Any]] = None) -> None:
        self.answer = answer
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.cancelled = False

    async def try_resolve_uri(self, authority: str, path: str) -> Any:
        self.started.set()
        try:
            await self.release.wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return self.answer


def plugin_resolver(
    uri: str, plugin: Any, timeout: Optional[float] = None
) -> PluginResolver:
    """Wrap a plugin in a resolver handle."""
    return PluginResolver(uri, plugin, timeout=timeout)


def registry(*resolvers: Resolver) -> ResolverRegistry:
    """Build a registry from resolvers in priority order."""
    return ResolverRegistry(resolvers)
