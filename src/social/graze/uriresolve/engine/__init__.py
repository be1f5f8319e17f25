"""
Resolution Engine

- engine.py: The resolution state machine
- state.py: Per-run loop state and terminal results
- client.py: Resolver set swap driver, cancellable requests, manifest and
  file follow-ups
"""

from social.graze.uriresolve.engine.client import (
    RegistryFactory,
    ResolutionRequest,
    fetch_file,
    load_manifest,
    resolve_uri,
)
from social.graze.uriresolve.engine.engine import ResolutionEngine
from social.graze.uriresolve.engine.state import (
    Cancelled,
    EngineResult,
    EngineState,
    Exhausted,
    Failed,
    Found,
    ResolverSetSwapped,
)

__all__ = [
    "Cancelled",
    "EngineResult",
    "EngineState",
    "Exhausted",
    "Failed",
    "Found",
    "RegistryFactory",
    "ResolutionEngine",
    "ResolutionRequest",
    "ResolverSetSwapped",
    "fetch_file",
    "load_manifest",
    "resolve_uri",
]
