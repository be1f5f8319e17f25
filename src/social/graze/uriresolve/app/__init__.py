"""
Resolution Service

Exposes URI resolution over an internal HTTP API using aiohttp. The
embedding application supplies the initial resolver registry and the
callable used to rebuild it after a resolver set swap.

Key Components:
- server.py: Application factory, middleware and background tasks
- config.py: Configuration management using Pydantic settings
- handlers.py: Request handlers
- logs.py: Logging configuration

Endpoints:
- /internal/alive: Liveness probe
- /internal/ready: Readiness probe backed by the health gauge
- /internal/api/resolve?uri=...: Resolve one or more URIs
"""
