"""Request and response shapes for the Pocket v3 API.

The request dataclasses mirror the JSON bodies Pocket expects, field names
included (note the camel-cased ``redirectUri``).
"""

from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass, field

from .errors import validation_error


@dataclass(frozen=True)
class RequestTokenRequest:
    consumer_key: str
    redirectUri: str

    def to_payload(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AccessTokenRequest:
    consumer_key: str
    code: str  # the request token being exchanged

    def to_payload(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AddRequest:
    url: str
    title: str
    tags: str  # comma-separated
    tweet_id: int
    consumer_key: str
    access_token: str

    def to_payload(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AuthorizeResponse:
    access_token: str
    username: str = ""

    @classmethod
    def from_values(cls, values: Mapping[str, list[str]]) -> "AuthorizeResponse":
        """Build from decoded form values, taking the first value of each field."""
        return cls(
            access_token=first_value(values, "access_token"),
            username=first_value(values, "username"),
        )


@dataclass(frozen=True)
class AddInput:
    """A bookmark to submit with ``PocketClient.add``."""

    url: str
    access_token: str
    title: str = ""
    tags: Sequence[str] = field(default_factory=tuple)
    tweet_id: int = 0

    def validate(self) -> None:
        if not self.url:
            raise validation_error("required URL value is empty")
        if not self.access_token:
            raise validation_error("access token is empty")

    def to_request(self, consumer_key: str) -> AddRequest:
        tags = self.tags or ()
        if isinstance(tags, str):
            # a bare string is one tag, not a sequence of characters
            tags = (tags,)
        return AddRequest(
            url=self.url,
            title=self.title,
            tags=",".join(tags),
            tweet_id=self.tweet_id,
            consumer_key=consumer_key,
            access_token=self.access_token,
        )


def first_value(values: Mapping[str, list[str]], key: str) -> str:
    """Return the first value for ``key``, or an empty string if absent."""
    found = values.get(key)
    if not found:
        return ""
    return found[0]
