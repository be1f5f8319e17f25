"""
Resolvers

- base.py: Resolver handle interface, the ResolverPlugin protocol and the
  PluginResolver invocation adapter
- registry.py: Ordered, immutable resolver registry
- aggregator.py: Resolver that fans out to an inner list of resolvers
"""

from social.graze.uriresolve.resolvers.aggregator import AggregatorResolver
from social.graze.uriresolve.resolvers.base import (
    PluginResolver,
    Resolver,
    ResolverPlugin,
)
from social.graze.uriresolve.resolvers.registry import ResolverRegistry

__all__ = [
    "AggregatorResolver",
    "PluginResolver",
    "Resolver",
    "ResolverPlugin",
    "ResolverRegistry",
]
