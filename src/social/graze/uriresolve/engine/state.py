"""Engine state and terminal results."""

from dataclasses import dataclass, field
from typing import ClassVar, Iterable, List, Optional, Tuple, Union

from social.graze.uriresolve.errors import FailureReason
from social.graze.uriresolve.resolvers.base import Resolver
from social.graze.uriresolve.resolvers.registry import ResolverRegistry
from social.graze.uriresolve.uri import Uri


@dataclass
class EngineState:
    """Loop state for a single engine run. Never shared between runs."""

    current_uri: Uri
    registry: ResolverRegistry
    cursor: int = 0
    visited: List[Uri] = field(default_factory=list)

    @staticmethod
    def start(
        uri: Uri, registry: ResolverRegistry, visited: Optional[Iterable[Uri]] = None
    ) -> "EngineState":
        log = list(visited or [])
        if uri not in log:
            log.append(uri)
        return EngineState(current_uri=uri, registry=registry, visited=log)

    @property
    def resolver(self) -> Resolver:
        return self.registry[self.cursor]

    def advance(self) -> None:
        self.cursor += 1

    def redirect(self, new_uri: Uri) -> None:
        self.visited.append(new_uri)
        self.current_uri = new_uri
        self.cursor = 0


@dataclass(frozen=True)
class Found:
    status: ClassVar[str] = "found"

    uri: Uri
    manifest: str
    resolver: Resolver
    visited: Tuple[Uri, ...] = ()


@dataclass(frozen=True)
class Exhausted:
    """No resolver in the active registry had an opinion on `uri`."""

    status: ClassVar[str] = "exhausted"

    uri: Uri
    visited: Tuple[Uri, ...] = ()


@dataclass(frozen=True)
class Failed:
    status: ClassVar[str] = "failed"

    reason: FailureReason
    uri: Uri
    visited: Tuple[Uri, ...] = ()


@dataclass(frozen=True)
class ResolverSetSwapped:
    """A resolver asked for the registry to be rebuilt from `new_resolver_uri`.

    The caller resolves `new_resolver_uri`, builds a new registry from the
    manifest found there and runs the engine again on `uri` with `visited`.
    """

    status: ClassVar[str] = "resolver_set_swapped"

    uri: Uri
    new_resolver_uri: Uri
    resolver: Resolver
    visited: Tuple[Uri, ...] = ()


@dataclass(frozen=True)
class Cancelled:
    status: ClassVar[str] = "cancelled"

    uri: Uri


EngineResult = Union[Found, Exhausted, Failed, ResolverSetSwapped, Cancelled]
