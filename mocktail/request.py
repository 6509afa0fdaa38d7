"""Mock requests and HTTP methods."""

from __future__ import annotations

import dataclasses
import enum
import functools
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple, Union
from urllib.parse import parse_qsl, urlsplit

from .body import Body, BytesLike
from .errors import InvalidError
from .headers import Headers

Text = Union[str, bytes, bytearray]


def _text(value: Text) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("latin-1")
    return str(value)


@functools.total_ordering
class Method(enum.Enum):
    """An HTTP method."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PATCH = "PATCH"

    @classmethod
    def parse(cls, value: Union[str, "Method"]) -> "Method":
        """Parses a method name, ignoring case."""
        if isinstance(value, Method):
            return value
        try:
            return cls[str(value).upper()]
        except KeyError:
            raise InvalidError(f"Invalid HTTP method {value}") from None

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Method):
            return NotImplemented
        members = list(Method)
        return members.index(self) < members.index(other)

    def __str__(self) -> str:
        return self.value


def _wire_method(value: Union[Text, Method]) -> Method:
    if isinstance(value, Method):
        return value
    name = _text(value)
    try:
        return Method(name)
    except ValueError:
        raise InvalidError(f"Invalid HTTP method {name}") from None


@dataclass
class Request:
    """An HTTP request as seen by the matchers."""

    method: Method
    url: str
    headers: Headers = field(default_factory=Headers)
    body: Body = field(default_factory=Body)

    @classmethod
    def from_parts(
        cls,
        method: Union[Text, Method],
        target: Text,
        headers: Optional[Iterable[Tuple[Text, Text]]] = None,
    ) -> "Request":
        """Builds a request with an empty body from a request line and headers.

        A target without an authority is resolved against http://localhost.
        Header names are lower-cased; method names must be upper case.
        """
        target_text = _text(target)
        if urlsplit(target_text).netloc:
            url = target_text
        else:
            url = f"http://localhost{target_text}"
        pairs = [(_text(name).lower(), _text(value)) for name, value in headers or ()]
        return cls(method=_wire_method(method), url=url, headers=Headers(pairs))

    def with_headers(self, headers: Headers) -> "Request":
        return dataclasses.replace(self, headers=headers)

    def with_body(self, body: Union[Body, BytesLike]) -> "Request":
        if not isinstance(body, Body):
            body = Body.bytes(body)
        return dataclasses.replace(self, body=body)

    def path(self) -> str:
        return urlsplit(self.url).path or "/"

    def query(self) -> Optional[str]:
        """Returns the raw query string, or None if the URL has none."""
        without_fragment = self.url.split("#", 1)[0]
        if "?" not in without_fragment:
            return None
        return without_fragment.split("?", 1)[1]

    def query_pairs(self) -> list[Tuple[str, str]]:
        """Returns the decoded query parameters in order."""
        query = self.query()
        if not query:
            return []
        return parse_qsl(query, keep_blank_values=True)