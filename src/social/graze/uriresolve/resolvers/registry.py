from typing import Iterable, Iterator, Optional, Tuple

from social.graze.uriresolve.errors import DuplicateResolverError
from social.graze.uriresolve.resolvers.base import Resolver
from social.graze.uriresolve.uri import Uri


class ResolverRegistry:
    """Ordered, immutable collection of resolvers.

    Order is the trial order: the first resolver with an opinion wins.
    Identifiers must be unique. A registry is never modified after
    construction; `replaced_with` builds a new one, so a registry shared by
    concurrent resolutions is safe.
    """

    __slots__ = ("_resolvers",)

    def __init__(self, resolvers: Iterable[Resolver] = ()) -> None:
        resolvers = tuple(resolvers)
        seen = set()
        for resolver in resolvers:
            if resolver.uri in seen:
                raise DuplicateResolverError(
                    f"Resolver {resolver.uri} appears more than once"
                )
            seen.add(resolver.uri)
        self._resolvers: Tuple[Resolver, ...] = resolvers

    def replaced_with(self, resolvers: Iterable[Resolver]) -> "ResolverRegistry":
        return ResolverRegistry(resolvers)

    @property
    def uris(self) -> Tuple[Uri, ...]:
        return tuple(resolver.uri for resolver in self._resolvers)

    def index_of(self, uri: Uri) -> Optional[int]:
        for index, resolver in enumerate(self._resolvers):
            if resolver.uri == uri:
                return index
        return None

    def __len__(self) -> int:
        return len(self._resolvers)

    def __iter__(self) -> Iterator[Resolver]:
        return iter(self._resolvers)

    def __getitem__(self, index: int) -> Resolver:
        return self._resolvers[index]

    def __repr__(self) -> str:
        return f"ResolverRegistry({', '.join(str(uri) for uri in self.uris)})"
