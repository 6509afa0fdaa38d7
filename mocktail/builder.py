"""Builders for mock request conditions and mock responses."""

from __future__ import annotations

from typing import Any, Iterable, List, Tuple, Union

from . import matchers as _m
from .body import Body, BytesLike
from .headers import Headers
from .matchers import Matcher
from .request import Method
from .response import Response
from .status import StatusCode

HeaderPairs = Union[Headers, Iterable[Tuple[str, str]]]


class When:
    """Collects the conditions a request must meet for a mock to match.

    Every method adds a matcher and returns the builder, so calls chain.
    """

    def __init__(self) -> None:
        self._matchers: List[Matcher] = []

    def into_inner(self) -> List[Matcher]:
        """Returns the matchers sorted, with adjacent duplicates removed."""
        result: List[Matcher] = []
        for matcher in sorted(self._matchers):
            if not result or result[-1] != matcher:
                result.append(matcher)
        return result

    def _push(self, matcher: Matcher) -> "When":
        self._matchers.append(matcher)
        return self

    def any(self) -> "When":
        """Matches every request; not meant to be combined with other matchers."""
        return self._push(_m.any_request())

    def method(self, method: Union[Method, str]) -> "When":
        return self._push(_m.method(method))

    def path(self, path: str) -> "When":
        return self._push(_m.path(path))

    def path_prefix(self, prefix: str) -> "When":
        return self._push(_m.path_prefix(prefix))

    def body(self, body: Body) -> "When":
        return self._push(_m.body(body))

    def headers(self, headers: HeaderPairs) -> "When":
        return self._push(_m.headers(headers))

    def headers_exact(self, headers: HeaderPairs) -> "When":
        return self._push(_m.headers_exact(headers))

    def header(self, name: str, value: str) -> "When":
        return self._push(_m.header(name, value))

    def header_exists(self, name: str) -> "When":
        return self._push(_m.header_exists(name))

    def query_params(self, pairs: Iterable[Tuple[str, str]]) -> "When":
        return self._push(_m.query_params(pairs))

    def query_param(self, key: str, value: str) -> "When":
        return self._push(_m.query_param(key, value))

    def query_param_exists(self, key: str) -> "When":
        return self._push(_m.query_param_exists(key))

    def matcher(self, matcher: Matcher) -> "When":
        """Adds a custom matcher."""
        if not isinstance(matcher, Matcher):
            raise TypeError("matcher must be a Matcher instance")
        return self._push(matcher)

    def empty(self) -> "When":
        return self._push(_m.body(Body.empty()))

    def bytes(self, data: BytesLike) -> "When":
        return self._push(_m.body(Body.bytes(data)))

    def bytes_stream(self, messages: Iterable[BytesLike]) -> "When":
        return self._push(_m.body(Body.bytes_stream(messages)))

    def text(self, text: str) -> "When":
        return self._push(_m.body(Body.bytes(str(text))))

    def text_stream(self, messages: Iterable[str]) -> "When":
        return self._push(_m.body(Body.bytes_stream(str(msg) for msg in messages)))

    def json(self, value: Any) -> "When":
        return self._push(_m.body(Body.json(value)))

    def json_lines_stream(self, messages: Iterable[Any]) -> "When":
        return self._push(_m.body(Body.json_lines_stream(messages)))

    def pb(self, message: Any) -> "When":
        return self._push(_m.body(Body.pb(message)))

    def pb_stream(self, messages: Iterable[Any]) -> "When":
        return self._push(_m.body(Body.pb_stream(messages)))

    def get(self) -> "When":
        return self._push(_m.method(Method.GET))

    def post(self) -> "When":
        return self._push(_m.method(Method.POST))

    def put(self) -> "When":
        return self._push(_m.method(Method.PUT))

    def delete(self) -> "When":
        return self._push(_m.method(Method.DELETE))

    def head(self) -> "When":
        return self._push(_m.method(Method.HEAD))


class Then:
    """Builds the response a mock sends; 200 OK with an empty body by default."""

    def __init__(self) -> None:
        self._response = Response()

    def into_inner(self) -> Response:
        """Returns the built response and resets the builder."""
        response, self._response = self._response, Response()
        return response

    def status(self, status: Union[StatusCode, int]) -> "Then":
        self._response.status = StatusCode(status)
        return self

    def headers(self, headers: HeaderPairs) -> "Then":
        """Replaces the response headers."""
        self._response.headers = Headers(headers)
        return self

    def body(self, body: Body) -> "Then":
        self._response.body = body
        return self

    def message(self, message: str) -> "Then":
        self._response.message = str(message)
        return self

    def empty(self) -> "Then":
        return self.body(Body.empty())

    def bytes(self, data: BytesLike) -> "Then":
        return self.body(Body.bytes(data))

    def bytes_stream(self, messages: Iterable[BytesLike]) -> "Then":
        return self.body(Body.bytes_stream(messages))

    def text(self, text: str) -> "Then":
        return self.body(Body.bytes(str(text)))

    def text_stream(self, messages: Iterable[str]) -> "Then":
        return self.body(Body.bytes_stream(str(msg) for msg in messages))

    def json(self, value: Any) -> "Then":
        self._response.headers.insert("content-type", "application/json")
        return self.body(Body.json(value))

    def json_lines_stream(self, messages: Iterable[Any]) -> "Then":
        self._response.headers.insert("content-type", "application/x-ndjson")
        return self.body(Body.json_lines_stream(messages))

    def pb(self, message: Any) -> "Then":
        return self.body(Body.pb(message))

    def pb_stream(self, messages: Iterable[Any]) -> "Then":
        return self.body(Body.pb_stream(messages))

    def error(self, status: Union[StatusCode, int], message: str) -> "Then":
        """Sets an error status and message together."""
        self._response.status = StatusCode(status)
        self._response.message = str(message)
        return self

    def ok(self) -> "Then":
        return self.status(StatusCode.OK)

    def bad_request(self) -> "Then":
        return self.status(StatusCode.BAD_REQUEST)

    def unauthorized(self) -> "Then":
        return self.status(StatusCode.UNAUTHORIZED)

    def forbidden(self) -> "Then":
        return self.status(StatusCode.FORBIDDEN)

    def not_found(self) -> "Then":
        return self.status(StatusCode.NOT_FOUND)

    def unsupported_media_type(self) -> "Then":
        return self.status(StatusCode.UNSUPPORTED_MEDIA_TYPE)

    def unprocessable_content(self) -> "Then":
        return self.status(StatusCode.UNPROCESSABLE_ENTITY)

    def internal_server_error(self) -> "Then":
        return self.status(StatusCode.INTERNAL_SERVER_ERROR)

    def not_implemented(self) -> "Then":
        return self.status(StatusCode.NOT_IMPLEMENTED)

    def bad_gateway(self) -> "Then":
        return self.status(StatusCode.BAD_GATEWAY)

    def service_unavailable(self) -> "Then":
        return self.status(StatusCode.SERVICE_UNAVAILABLE)

    def gateway_timeout(self) -> "Then":
        return self.status(StatusCode.GATEWAY_TIMEOUT)