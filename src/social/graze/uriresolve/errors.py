"""Exceptions and failure reasons raised during URI resolution."""

from enum import Enum
from typing import Optional


class UriResolveError(Exception):
    """Base class for all errors raised by this package."""


class UriParseError(UriResolveError, ValueError):
    """Raised when a URI string cannot be parsed."""


class DuplicateResolverError(UriResolveError, ValueError):
    """Raised when a registry would contain the same resolver identifier twice."""


class PluginError(UriResolveError):
    """A single resolver invocation failed.

    Covers plugin exceptions, timeouts and responses that populate more than
    one outcome field. The engine treats it as "no opinion" and moves on.
    """

    def __init__(self, resolver_uri: Optional[str], reason: str) -> None:
        super().__init__(f"resolver {resolver_uri}: {reason}")
        self.resolver_uri = resolver_uri
        self.reason = reason


class ManifestInvalid(UriResolveError):
    """Raised when the manifest text located by a resolver fails to deserialize."""


class FileUnavailable(UriResolveError):
    """Raised when a resolver cannot return the requested file."""


class FailureReason(str, Enum):
    cycle_detected = "cycle_detected"
    resolver_set_cycle = "resolver_set_cycle"
    swap_limit_exceeded = "swap_limit_exceeded"
