"""URI value type.

A URI is an authority (the naming or addressing system a path belongs to) and
an opaque, resolver-defined path. URIs are rendered and parsed in the
`w3://<authority>/<path>` form.
"""

import re

from pydantic import BaseModel, ConfigDict, field_validator

from social.graze.uriresolve.errors import UriParseError

SCHEME = "w3://"

URI_PATTERN = re.compile(r"w3://([a-z][a-z0-9-_]*)/(.*)")

URI_EXAMPLES = (
    "w3://ens/domain.eth",
    "w3://ipfs/QmHASH",
    "w3://https/domain.com",
)


class Uri(BaseModel):
    """Immutable authority and path pair.

    Two URIs are equal when authority and path match exactly. Every redirect
    produces a new value.
    """

    model_config = ConfigDict(frozen=True)

    authority: str
    path: str

    @field_validator("authority")
    @classmethod
    def check_authority(cls, v: str) -> str:
        if not v:
            raise ValueError("authority must not be empty")
        return v

    @property
    def uri(self) -> str:
        return f"{SCHEME}{self.authority}/{self.path}"

    @staticmethod
    def parse(value: str) -> "Uri":
        return parse_uri(value)

    def __str__(self) -> str:
        return self.uri


def parse_uri(value: str) -> Uri:
    """Parse and normalize a URI string.

    Leading `/` characters are dropped and the `w3://` scheme is added when
    missing, so `ens/domain.eth`, `/ens/domain.eth` and
    `w3://ens/domain.eth` all parse to the same URI.

    Args:
        value: Raw URI string

    Returns:
        Parsed Uri

    Raises:
        UriParseError: If the input is empty, the scheme is misplaced or the
            authority/path cannot be extracted
    """
    if value is None or not value.strip():
        raise UriParseError("The provided URI is empty")

    processed = value.strip().lstrip("/")

    scheme_index = processed.find(SCHEME)
    if scheme_index == -1:
        processed = SCHEME + processed
    elif scheme_index != 0:
        raise UriParseError(
            f"The {SCHEME} scheme must be at the beginning of the URI string"
        )

    match = URI_PATTERN.fullmatch(processed)
    if match is None:
        raise UriParseError(
            "URI is malformed, here are some examples of valid URIs: "
            + ", ".join(URI_EXAMPLES)
        )

    return Uri(authority=match.group(1), path=match.group(2))
