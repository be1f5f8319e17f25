"""Resolution outcomes.

Every resolver invocation produces exactly one of the outcome variants defined
here. Plugins speak a looser format (`PluginResponse`) with up to three
optional fields; it is converted into a variant at the boundary so that the
rest of the package never sees an ambiguous answer.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from social.graze.uriresolve.errors import PluginError, UriParseError
from social.graze.uriresolve.uri import Uri, parse_uri

if TYPE_CHECKING:
    from social.graze.uriresolve.resolvers.base import Resolver


@dataclass(frozen=True)
class NoOpinion:
    """The resolver does not recognize the URI."""


@dataclass(frozen=True)
class Redirect:
    """Resolution continues with `new_uri` in place of the current URI.

    `resolver` is set when an aggregator relays the redirect and names the
    inner resolver that produced it.
    """

    new_uri: Uri
    resolver: Optional["Resolver"] = None


@dataclass(frozen=True)
class ManifestFound:
    """The package manifest lives at the current URI.

    `resolver` is set when an aggregator relays the hit and names the inner
    resolver that found it.
    """

    manifest: str
    resolver: Optional["Resolver"] = None


@dataclass(frozen=True)
class ResolverSetChanged:
    """The set of resolvers to consult should be rebuilt from `new_resolver_uri`."""

    new_resolver_uri: Uri


ResolutionOutcome = Union[NoOpinion, Redirect, ManifestFound, ResolverSetChanged]

NO_OPINION = NoOpinion()


class PluginResponse(BaseModel):
    """Raw answer from a resolver plugin.

    At most one field may be populated. Both snake_case and the camelCase
    names used by plugins are accepted.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    new_uri: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("new_uri", "newUri")
    )
    manifest: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("manifest", "packageManifest", "package_manifest"),
    )
    new_resolver_uri: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("new_resolver_uri", "newResolverUri"),
    )

    @staticmethod
    def from_plugin_result(
        value: Any, resolver_uri: Optional[str] = None
    ) -> "PluginResponse":
        """Coerce whatever a plugin returned into a PluginResponse.

        `None` means no opinion. Mappings are validated; anything else is a
        plugin error.
        """
        if value is None:
            return PluginResponse()
        if isinstance(value, PluginResponse):
            return value
        if isinstance(value, Mapping):
            try:
                return PluginResponse.model_validate(dict(value))
            except ValidationError as e:
                raise PluginError(resolver_uri, f"invalid response: {e}") from e
        raise PluginError(
            resolver_uri, f"unexpected response type {type(value).__name__}"
        )

    def to_outcome(self, resolver_uri: Optional[str] = None) -> ResolutionOutcome:
        """Convert to exactly one outcome variant.

        Raises:
            PluginError: If more than one field is populated or a returned
                URI cannot be parsed
        """
        populated = [
            name
            for name in ("new_uri", "manifest", "new_resolver_uri")
            if getattr(self, name)
        ]
        if len(populated) == 0:
            return NO_OPINION
        if len(populated) > 1:
            raise PluginError(
                resolver_uri,
                f"ambiguous response, populated fields: {', '.join(populated)}",
            )

        try:
            if self.new_uri:
                return Redirect(new_uri=parse_uri(self.new_uri))
            if self.new_resolver_uri:
                return ResolverSetChanged(
                    new_resolver_uri=parse_uri(self.new_resolver_uri)
                )
        except UriParseError as e:
            raise PluginError(resolver_uri, f"invalid URI in response: {e}") from e

        return ManifestFound(manifest=self.manifest)  # type: ignore[arg-type]
