"""Request matchers."""

from __future__ import annotations

import abc
import dataclasses
from dataclasses import dataclass
from typing import Any, Iterable, Tuple, Union

from .body import Body
from .headers import Headers
from .request import Method, Request


class Matcher(abc.ABC):
    """A condition a request must meet for a mock to match.

    Matchers of the same type compare by value; matchers of different
    types order by name. Custom matchers that are not dataclasses compare
    by identity.
    """

    name: str = "custom"

    @abc.abstractmethod
    def matches(self, request: Request) -> bool:
        """Returns True if the request meets the condition."""

    def _key(self) -> Tuple[Any, ...]:
        if dataclasses.is_dataclass(self):
            return tuple(getattr(self, f.name) for f in dataclasses.fields(self))
        return (id(self),)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matcher):
            return NotImplemented
        return type(self) is type(other) and self._key() == other._key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Matcher):
            return NotImplemented
        if type(self) is type(other):
            try:
                return self._key() < other._key()
            except TypeError:
                return False
        return self.name < other.name

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Matcher):
            return NotImplemented
        return other.__lt__(self)

    __hash__ = None  # type: ignore[assignment]


@dataclass(frozen=True, eq=False)
class AnyMatcher(Matcher):
    name = "any"

    def matches(self, request: Request) -> bool:
        return True


@dataclass(frozen=True, eq=False)
class MethodMatcher(Matcher):
    method: Method
    name = "method"

    def matches(self, request: Request) -> bool:
        return request.method == self.method


@dataclass(frozen=True, eq=False)
class PathMatcher(Matcher):
    path: str
    name = "path"

    def matches(self, request: Request) -> bool:
        return request.path() == self.path


@dataclass(frozen=True, eq=False)
class PathPrefixMatcher(Matcher):
    prefix: str
    name = "path_prefix"

    def matches(self, request: Request) -> bool:
        return request.path().startswith(self.prefix)


@dataclass(frozen=True, eq=False)
class BodyMatcher(Matcher):
    body: Body
    name = "body"

    def matches(self, request: Request) -> bool:
        return self.body == request.body


@dataclass(frozen=True, eq=False)
class HeadersMatcher(Matcher):
    """Matches when the request holds at least these headers."""

    headers: Headers
    name = "headers"

    def matches(self, request: Request) -> bool:
        return request.headers.is_superset(self.headers)


@dataclass(frozen=True, eq=False)
class HeadersExactMatcher(Matcher):
    """Matches when the request holds exactly these headers, in order."""

    headers: Headers
    name = "headers_exact"

    def matches(self, request: Request) -> bool:
        return request.headers == self.headers


@dataclass(frozen=True, eq=False)
class HeaderMatcher(Matcher):
    header_name: str
    header_value: str
    name = "header"

    def matches(self, request: Request) -> bool:
        return request.headers.contains(self.header_name, self.header_value)


@dataclass(frozen=True, eq=False)
class HeaderExistsMatcher(Matcher):
    header_name: str
    name = "header_exists"

    def matches(self, request: Request) -> bool:
        return request.headers.contains_name(self.header_name)


@dataclass(frozen=True, eq=False)
class QueryParamsMatcher(Matcher):
    """Matches when the query parameters are exactly these pairs, in order."""

    pairs: Tuple[Tuple[str, str], ...]
    name = "query_params"

    def matches(self, request: Request) -> bool:
        return request.query_pairs() == list(self.pairs)


@dataclass(frozen=True, eq=False)
class QueryParamMatcher(Matcher):
    key: str
    value: str
    name = "query_param"

    def matches(self, request: Request) -> bool:
        return any(
            key == self.key and value == self.value
            for key, value in request.query_pairs()
        )


@dataclass(frozen=True, eq=False)
class QueryParamExistsMatcher(Matcher):
    key: str
    name = "query_param_exists"

    def matches(self, request: Request) -> bool:
        return any(key == self.key for key, _ in request.query_pairs())


def any_request() -> AnyMatcher:
    return AnyMatcher()


def method(method: Union[Method, str]) -> MethodMatcher:
    return MethodMatcher(Method.parse(method))


def path(path: str) -> PathMatcher:
    return PathMatcher(str(path))


def path_prefix(prefix: str) -> PathPrefixMatcher:
    return PathPrefixMatcher(str(prefix))


def body(body: Body) -> BodyMatcher:
    return BodyMatcher(body)


def headers(headers: Union[Headers, Iterable[Tuple[str, str]]]) -> HeadersMatcher:
    return HeadersMatcher(headers if isinstance(headers, Headers) else Headers(headers))


def headers_exact(
    headers: Union[Headers, Iterable[Tuple[str, str]]],
) -> HeadersExactMatcher:
    return HeadersExactMatcher(
        headers if isinstance(headers, Headers) else Headers(headers)
    )


def header(name: str, value: str) -> HeaderMatcher:
    return HeaderMatcher(str(name), str(value))


def header_exists(name: str) -> HeaderExistsMatcher:
    return HeaderExistsMatcher(str(name))


def query_params(pairs: Iterable[Tuple[str, str]]) -> QueryParamsMatcher:
    return QueryParamsMatcher(tuple((str(key), str(value)) for key, value in pairs))


def query_param(key: str, value: str) -> QueryParamMatcher:
    return QueryParamMatcher(str(key), str(value))


def query_param_exists(key: str) -> QueryParamExistsMatcher:
    return QueryParamExistsMatcher(str(key))