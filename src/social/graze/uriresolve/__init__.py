"""
URI Resolve - Authority-qualified URI resolution

This package resolves `w3://<authority>/<path>` URIs into package manifests by
asking an ordered chain of resolver plugins to interpret them. Resolvers can
answer with a redirect to a new URI, a manifest, a change of the resolver set
itself, or no opinion at all.

Key Components:
- uri: Immutable URI value type and parsing rules
- outcome: Tagged resolution outcomes and the raw plugin response boundary
- resolvers: Resolver handles, the plugin invocation adapter, the registry and
  the aggregator resolver
- engine: The resolution state machine and the caller-side driver that
  rebuilds the registry when a resolver set change is requested
- observe: Observability hooks (logging, Sentry, metrics, health)
- app: aiohttp service exposing resolution over an internal API

Resolution Flow:
1. The engine starts with the input URI and the supplied registry
2. Each resolver is asked in registry order; the first opinion wins
3. Redirects restart the scan from the first resolver with the new URI
4. A revisited URI ends the resolution with a detected cycle
5. A resolver set change is handed back to the caller, which builds a new
   registry and runs the engine again with the same URI
"""
