"""The resolution engine.

The engine walks the registry in order against the current URI:

- no opinion (or a plugin error): move on to the next resolver
- redirect: remember the new URI and start again from the first resolver,
  unless the URI was already visited, which ends in a detected cycle
- manifest found: done
- resolver set changed: hand control back to the caller, which has to build
  the new registry

Running off the end of the registry means nobody understood the URI.
"""

import logging
from typing import Iterable, Optional

from social.graze.uriresolve.errors import FailureReason, PluginError
from social.graze.uriresolve.observe import NULL_OBSERVER, ResolutionObserver
from social.graze.uriresolve.outcome import (
    NO_OPINION,
    ManifestFound,
    NoOpinion,
    Redirect,
    ResolverSetChanged,
)
from social.graze.uriresolve.engine.state import (
    EngineResult,
    EngineState,
    Exhausted,
    Failed,
    Found,
    ResolverSetSwapped,
)
from social.graze.uriresolve.resolvers.registry import ResolverRegistry
from social.graze.uriresolve.uri import Uri

logger = logging.getLogger(__name__)


class ResolutionEngine:
    def __init__(self, observer: Optional[ResolutionObserver] = None) -> None:
        self.observer = observer or NULL_OBSERVER

    async def run(
        self,
        uri: Uri,
        registry: ResolverRegistry,
        visited: Optional[Iterable[Uri]] = None,
        report_outcome: bool = True,
    ) -> EngineResult:
        """Resolve `uri` against `registry`.

        Args:
            uri: URI to resolve
            registry: Resolvers to consult, in priority order
            visited: URIs already visited by an earlier run of the same
                resolution, carried over after a resolver set swap
            report_outcome: Pass the terminal result to the observer. Off
                for runs that are one step of a larger resolution.

        Returns:
            Found, Exhausted, Failed or ResolverSetSwapped
        """
        finish = self.report if report_outcome else _unreported
        state = EngineState.start(uri, registry, visited)

        while state.cursor < len(state.registry):
            resolver = state.resolver
            try:
                outcome = await resolver.invoke(state.current_uri, self.observer)
            except PluginError as e:
                await self.observer.plugin_error(e, state.current_uri)
                outcome = NO_OPINION

            if isinstance(outcome, NoOpinion):
                state.advance()

            elif isinstance(outcome, Redirect):
                if outcome.new_uri in state.visited:
                    logger.warning(
                        "Redirect cycle: %s redirected %s back to %s",
                        resolver.uri,
                        state.current_uri,
                        outcome.new_uri,
                    )
                    return await finish(
                        Failed(
                            reason=FailureReason.cycle_detected,
                            uri=outcome.new_uri,
                            visited=tuple(state.visited) + (outcome.new_uri,),
                        )
                    )
                await self.observer.redirect(
                    outcome.resolver or resolver, state.current_uri, outcome.new_uri
                )
                state.redirect(outcome.new_uri)

            elif isinstance(outcome, ManifestFound):
                return await finish(
                    Found(
                        uri=state.current_uri,
                        manifest=outcome.manifest,
                        resolver=outcome.resolver or resolver,
                        visited=tuple(state.visited),
                    )
                )

            elif isinstance(outcome, ResolverSetChanged):
                await self.observer.resolver_set_swap(
                    resolver, state.current_uri, outcome.new_resolver_uri
                )
                return ResolverSetSwapped(
                    uri=state.current_uri,
                    new_resolver_uri=outcome.new_resolver_uri,
                    resolver=resolver,
                    visited=tuple(state.visited),
                )

            else:
                raise TypeError(f"Unknown resolution outcome {outcome!r}")

        return await finish(
            Exhausted(uri=state.current_uri, visited=tuple(state.visited))
        )

    async def report(self, result: EngineResult) -> EngineResult:
        await self.observer.outcome(result)
        return result


async def _unreported(result: EngineResult) -> EngineResult:
    return result
