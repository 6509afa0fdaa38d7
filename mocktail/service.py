"""HTTP and gRPC services that answer requests from a set of mocks."""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from .headers import Headers
from .mock import Mock
from .mock_set import MockSet
from .request import Request
from .status import Code

logger = logging.getLogger(__name__)

Frame = Union[bytes, Headers]

ALLOWED_METHODS = ("GET", "POST", "PUT", "HEAD", "DELETE")
_NOT_FOUND_MESSAGE = "mock not found"


class MockServerState:
    """The mocks a server answers from, shared between its connections."""

    def __init__(self, mocks: Optional[MockSet] = None) -> None:
        self.mocks = mocks if mocks is not None else MockSet()
        self.lock = threading.Lock()

    def _match(self, request: Request) -> Optional[Mock]:
        with self.lock:
            return self.mocks.match_by_request(request)


@dataclass
class RequestHead:
    """The request line and headers of an incoming request."""

    method: str
    target: str
    headers: List[Tuple[str, str]] = field(default_factory=list)

    def _header(self, name: str) -> Optional[str]:
        name = name.lower()
        return next((v for k, v in self.headers if k.lower() == name), None)


@dataclass
class ServiceResponse:
    """A response produced by a service.

    ``frames`` yields data chunks as bytes and trailers as Headers.
    A streaming response is sent as it is produced; otherwise its data
    frames make up the whole body.
    """

    status: int
    headers: List[Tuple[str, str]] = field(default_factory=list)
    frames: Iterable[Frame] = field(default_factory=list)
    streaming: bool = False


def _request(head: RequestHead) -> Request:
    return Request.from_parts(head.method, head.target, head.headers)


class HttpMockService:
    """Answers plain HTTP requests from the mocks in a state."""

    def __init__(self, state: MockServerState) -> None:
        self._state = state

    def call(self, head: RequestHead, body: Iterable[bytes]) -> ServiceResponse:
        """Handles a request whose body arrives as an iterable of chunks."""
        logger.debug("handling request %s %s", head.method, head.target)
        if head.method not in ALLOWED_METHODS:
            return ServiceResponse(405, [("allow", ", ".join(ALLOWED_METHODS))])

        chunks = iter(body)
        first = next(chunks, None)
        second = next(chunks, None) if first is not None else None

        if second is None:
            request = _request(head).with_body(first or b"")
            mock = self._state._match(request)
            if mock is None:
                logger.debug("no mocks found, sending error")
                return ServiceResponse(404, [], [_NOT_FOUND_MESSAGE.encode()])
            response = mock.response
            payload = response.body.as_bytes()
            if response.is_error() and response.message is not None:
                payload = response.message.encode("utf-8")
            return ServiceResponse(
                response.status.as_u16(), list(response.headers), [payload]
            )

        rest = itertools.chain([second], chunks)
        return ServiceResponse(200, [], self._stream(head, first, rest), streaming=True)

    def _stream(
        self, head: RequestHead, first: bytes, rest: Iterator[bytes]
    ) -> Iterator[Frame]:
        request = _request(head)
        matched = False
        buf = bytearray(first)
        for chunk in rest:
            buf += chunk
            request = request.with_body(bytes(buf))
            mock = self._state._match(request)
            if mock is None:
                continue
            matched = True
            response = mock.response
            yield from response.body
            if response.is_error():
                yield (response.message or "").encode("utf-8")
            yield response.headers.copy()
            buf.clear()
        if not matched:
            logger.debug("no mocks found, sending error")
            yield _NOT_FOUND_MESSAGE.encode()


class GrpcMockService:
    """Answers gRPC requests from the mocks in a state."""

    def __init__(self, state: MockServerState) -> None:
        self._state = state

    def call(self, head: RequestHead, body: Iterable[bytes]) -> ServiceResponse:
        """Handles a gRPC call whose body arrives as an iterable of chunks."""
        logger.debug("handling request %s %s", head.method, head.target)
        if head.method != "POST":
            return ServiceResponse(405, [("allow", "POST")])
        content_type = head._header("content-type") or ""
        if not content_type.startswith("application/grpc"):
            return ServiceResponse(415, [("accept-post", "application/grpc")])
        return ServiceResponse(
            200,
            [("content-type", "application/grpc")],
            self._stream(head, iter(body)),
            streaming=True,
        )

    def _stream(self, head: RequestHead, chunks: Iterator[bytes]) -> Iterator[Frame]:
        request = _request(head)
        matched = False
        buf = bytearray()
        for chunk in chunks:
            buf += chunk
            request = request.with_body(bytes(buf))
            mock = self._state._match(request)
            if mock is None:
                continue
            matched = True
            response = mock.response
            yield from response.body
            trailers = response.headers.copy()
            trailers.remove("grpc-status")
            trailers.insert("grpc-status", response.status.as_grpc().to_header_value())
            if response.message is not None:
                trailers.remove("grpc-message")
                trailers.insert("grpc-message", response.message)
            yield trailers
            buf.clear()
        if not matched:
            logger.debug("no mocks found, sending error")
            yield Headers(
                [
                    ("grpc-status", Code.NOT_FOUND.to_header_value()),
                    ("grpc-message", _NOT_FOUND_MESSAGE),
                ]
            )