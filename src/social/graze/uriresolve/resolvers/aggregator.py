"""Aggregator resolver.

Presents an ordered list of resolvers as a single resolver. The first inner
resolver with an opinion wins, and redirects or manifests it produces are
attributed to it so the engine can report the concrete resolver that found a
package without knowing how the aggregator is composed.

An aggregator only resolves. Files are fetched from the inner resolver named
in the outcome, never from the aggregator itself.
"""

import dataclasses
import logging
from typing import Sequence, Tuple, Union

from social.graze.uriresolve.errors import PluginError
from social.graze.uriresolve.observe import NULL_OBSERVER, ResolutionObserver
from social.graze.uriresolve.outcome import (
    NO_OPINION,
    ManifestFound,
    NoOpinion,
    Redirect,
    ResolutionOutcome,
)
from social.graze.uriresolve.resolvers.base import Resolver
from social.graze.uriresolve.uri import Uri

logger = logging.getLogger(__name__)


class AggregatorResolver(Resolver):
    def __init__(self, uri: Union[Uri, str], inner: Sequence[Resolver]) -> None:
        super().__init__(uri)
        self.inner: Tuple[Resolver, ...] = tuple(inner)

    async def invoke(
        self, uri: Uri, observer: ResolutionObserver = NULL_OBSERVER
    ) -> ResolutionOutcome:
        for resolver in self.inner:
            try:
                outcome = await resolver.invoke(uri, observer)
            except PluginError as e:
                await observer.plugin_error(e, uri)
                continue

            if isinstance(outcome, NoOpinion):
                continue

            logger.debug("Aggregator %s: %s answered %s", self.uri, resolver.uri, uri)

            # Nested aggregators have already attributed the hit to the
            # innermost resolver.
            if isinstance(outcome, (Redirect, ManifestFound)) and outcome.resolver is None:
                return dataclasses.replace(outcome, resolver=resolver)
            return outcome

        return NO_OPINION
