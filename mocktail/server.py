"""A mock server answering HTTP/1.1, HTTP/2 and gRPC requests from mocks."""

from __future__ import annotations

import enum
import logging
import queue
import random
import socket
import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Union
from urllib.parse import urljoin

import h11
import h2.config
import h2.connection
import h2.events
import h2.exceptions

from .builder import Then, When
from .errors import ServerError
from .headers import Headers
from .mock import Mock
from .mock_set import MockSet
from .service import (
    GrpcMockService,
    HttpMockService,
    MockServerState,
    RequestHead,
    ServiceResponse,
)

logger = logging.getLogger(__name__)

_H2_PREFACE = b"PRI * HTTP/2.0\r\n\r\nSM\r\n\r\n"
_Service = Union[HttpMockService, GrpcMockService]
BuildFn = Callable[[When, Then], object]


class _ServerKind(enum.Enum):
    HTTP = "http"
    GRPC = "grpc"


@dataclass
class MockServerConfig:
    """Where and how a mock server binds and waits to become ready."""

    listen_addr: str = "0.0.0.0"
    port_range_start: int = 10000
    port_range_end: int = 30000
    bind_max_retries: int = 10
    ready_connect_max_retries: int = 30
    ready_connect_timeout: float = 0.01


def _format_host(host: str) -> str:
    return f"[{host}]" if ":" in host else host


def _connect_host(host: str) -> str:
    return {"0.0.0.0": "127.0.0.1", "::": "::1"}.get(host, host)


class MockServer:
    """A server that answers requests from a set of mocks."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._kind = _ServerKind.HTTP
        self._state = MockServerState()
        self._config = MockServerConfig()
        self._addr: Optional[tuple] = None
        self._listener: Optional[socket.socket] = None
        self._stopping = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def grpc(self) -> "MockServer":
        """Makes this a gRPC server (HTTP/2 only)."""
        self._kind = _ServerKind.GRPC
        return self

    def with_mocks(self, mocks: MockSet) -> "MockServer":
        self._state.mocks = mocks
        return self

    def with_config(self, config: MockServerConfig) -> "MockServer":
        self._config = config
        return self

    def start(self) -> None:
        """Binds a random port in the configured range and starts serving."""
        if self.is_running():
            raise ServerError("already running")
        config = self._config
        family = socket.AF_INET6 if ":" in config.listen_addr else socket.AF_INET
        rng = random.Random()
        counter = 0
        while True:
            port = rng.randrange(config.port_range_start, config.port_range_end)
            listener = socket.socket(family, socket.SOCK_STREAM)
            try:
                listener.bind((config.listen_addr, port))
                listener.listen(128)
                break
            except OSError:
                listener.close()
            if counter == config.bind_max_retries:
                raise ServerError("server failed to bind to port")
            counter += 1

        addr = listener.getsockname()[:2]
        logger.info("started %s [%s] server on %s", self.name, self._kind.value, addr)
        listener.settimeout(0.1)
        service: _Service = (
            GrpcMockService(self._state)
            if self._kind is _ServerKind.GRPC
            else HttpMockService(self._state)
        )
        self._stopping = threading.Event()
        self._thread = threading.Thread(
            target=_accept_loop,
            args=(listener, self._stopping, self._kind, service),
            daemon=True,
        )
        self._thread.start()
        self._listener = listener

        target = (_connect_host(addr[0]), addr[1])
        counter = 0
        while True:
            try:
                socket.create_connection(target, timeout=config.ready_connect_timeout).close()
                break
            except OSError:
                pass
            if counter == config.ready_connect_max_retries:
                self._shutdown()
                raise ServerError("server failed to become ready")
            counter += 1
            time.sleep(0.01)
        logger.info("%s server ready", self.name)
        self._addr = addr

    def stop(self) -> None:
        """Stops accepting connections."""
        self._shutdown()
        self._addr = None

    def _shutdown(self) -> None:
        self._stopping.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        if self._listener is not None:
            self._listener.close()
            self._listener = None

    def __enter__(self) -> "MockServer":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    @property
    def addr(self) -> Optional[tuple]:
        return self._addr

    def hostname(self) -> Optional[str]:
        return self._addr[0] if self._addr else None

    def port(self) -> Optional[int]:
        return self._addr[1] if self._addr else None

    @property
    def base_url(self) -> Optional[str]:
        if self._addr is None:
            return None
        return f"http://{_format_host(self._addr[0])}:{self._addr[1]}"

    def url(self, path: str) -> str:
        """Returns the URL of a path on this server; raises if not running."""
        base = self.base_url
        if base is None:
            raise ServerError("server not running")
        return urljoin(base + "/", path)

    def is_running(self) -> bool:
        return self._addr is not None

    def mocks(self) -> MockSet:
        """Returns the live set of mocks, which may be changed while serving."""
        return self._state.mocks

    def mock(self, f: BuildFn) -> None:
        with self._state.lock:
            self._state.mocks.insert(Mock.build(f))

    def mock_with_options(self, priority: int, limit: Optional[int], f: BuildFn) -> None:
        mock = Mock.build(f).with_priority(priority)
        if limit is not None:
            mock = mock.with_limit(limit)
        with self._state.lock:
            self._state.mocks.insert(mock)


def _accept_loop(
    listener: socket.socket, stopping: threading.Event, kind: _ServerKind, service: _Service
) -> None:
    while not stopping.is_set():
        try:
            conn, peer = listener.accept()
        except socket.timeout:
            continue
        except OSError as err:
            if stopping.is_set():
                break
            logger.error("connection accept error: %s", err)
            continue
        conn.settimeout(None)
        logger.debug("connection accepted: %s", peer)
        threading.Thread(
            target=_serve_connection, args=(conn, kind, service), daemon=True
        ).start()


def _serve_connection(sock: socket.socket, kind: _ServerKind, service: _Service) -> None:
    try:
        with sock:
            try:
                preface = sock.recv(len(_H2_PREFACE), socket.MSG_PEEK)
            except OSError:
                return
            if preface.startswith(b"PRI"):
                _H2Connection(sock, service).run()
            elif kind is _ServerKind.HTTP and preface:
                _serve_h11(sock, service)
    except Exception as err:  # a broken connection must not take down the server
        logger.debug("connection error: %s", err)


def _serve_h11(sock: socket.socket, service: _Service) -> None:
    conn = h11.Connection(h11.SERVER)

    def next_event():
        while True:
            event = conn.next_event()
            if event is h11.NEED_DATA:
                conn.receive_data(sock.recv(65536))
                continue
            return event

    while True:
        event = next_event()
        if not isinstance(event, h11.Request):
            return
        head = RequestHead(
            event.method.decode("ascii"),
            event.target.decode("latin-1"),
            [(n.decode("latin-1"), v.decode("latin-1")) for n, v in event.headers],
        )

        def body():
            while True:
                item = next_event()
                if isinstance(item, h11.Data):
                    yield bytes(item.data)
                else:
                    return

        response = service.call(head, body())
        _send_h11(sock, conn, head.method == "HEAD", response)

        while conn.their_state is h11.SEND_BODY:
            if isinstance(next_event(), h11.ConnectionClosed):
                return
        if conn.our_state is h11.DONE and conn.their_state is h11.DONE:
            conn.start_next_cycle()
        else:
            return


def _clean_headers(headers: Iterable[tuple]) -> list:
    drop = {"content-length", "transfer-encoding", "connection"}
    return [(n.lower(), v) for n, v in headers if n.lower() not in drop]


def _send_h11(
    sock: socket.socket, conn: h11.Connection, is_head: bool, response: ServiceResponse
) -> None:
    headers = _clean_headers(response.headers)
    if not response.streaming:
        payload = b"".join(f for f in response.frames if isinstance(f, bytes))
        headers.append(("content-length", str(len(payload))))
        sock.sendall(conn.send(h11.Response(status_code=response.status, headers=headers)))
        if payload and not is_head:
            sock.sendall(conn.send(h11.Data(data=payload)))
        sock.sendall(conn.send(h11.EndOfMessage()))
        return

    headers.append(("transfer-encoding", "chunked"))
    sock.sendall(conn.send(h11.Response(status_code=response.status, headers=headers)))
    trailers: list = []
    for frame in response.frames:
        if isinstance(frame, Headers):
            trailers = [(n.lower(), v) for n, v in frame]
            break
        if frame and not is_head:
            sock.sendall(conn.send(h11.Data(data=frame)))
    sock.sendall(conn.send(h11.EndOfMessage(headers=trailers)))


class _H2Connection:
    """Serves one HTTP/2 connection; each stream is handled on its own thread."""

    def __init__(self, sock: socket.socket, service: _Service) -> None:
        self._sock = sock
        self._service = service
        config = h2.config.H2Configuration(client_side=False, header_encoding="utf-8")
        self._conn = h2.connection.H2Connection(config=config)
        self._cond = threading.Condition()
        self._closed = False
        self._streams: dict = {}

    def _flush(self) -> None:
        data = self._conn.data_to_send()
        if data:
            self._sock.sendall(data)

    def run(self) -> None:
        try:
            with self._cond:
                self._conn.initiate_connection()
                self._flush()
            while True:
                data = self._sock.recv(65536)
                if not data:
                    break
                with self._cond:
                    events = self._conn.receive_data(data)
                    self._flush()
                if not self._dispatch(events):
                    break
        except (OSError, h2.exceptions.ProtocolError) as err:
            logger.debug("connection error: %s", err)
        finally:
            with self._cond:
                self._closed = True
                self._cond.notify_all()
            for chunks in self._streams.values():
                chunks.put(None)

    def _dispatch(self, events: list) -> bool:
        for event in events:
            if isinstance(event, h2.events.RequestReceived):
                chunks: queue.Queue = queue.Queue()
                self._streams[event.stream_id] = chunks
                threading.Thread(
                    target=self._handle_stream,
                    args=(event.stream_id, event.headers, chunks),
                    daemon=True,
                ).start()
            elif isinstance(event, h2.events.DataReceived):
                chunks = self._streams.get(event.stream_id)
                if chunks is not None:
                    chunks.put(event.data)
                with self._cond:
                    self._conn.acknowledge_received_data(
                        event.flow_controlled_length, event.stream_id
                    )
                    self._flush()
            elif isinstance(event, (h2.events.StreamEnded, h2.events.StreamReset)):
                chunks = self._streams.get(event.stream_id)
                if chunks is not None:
                    chunks.put(None)
                with self._cond:
                    self._cond.notify_all()
            elif isinstance(event, (h2.events.WindowUpdated, h2.events.RemoteSettingsChanged)):
                with self._cond:
                    self._cond.notify_all()
            elif isinstance(event, h2.events.ConnectionTerminated):
                return False
        return True

    def _handle_stream(self, stream_id: int, raw_headers: list, chunks: queue.Queue) -> None:
        pseudo = {n: v for n, v in raw_headers if n.startswith(":")}
        head = RequestHead(
            pseudo.get(":method", ""),
            pseudo.get(":path", "/"),
            [(n, v) for n, v in raw_headers if not n.startswith(":")],
        )
        try:
            response = self._service.call(head, iter(chunks.get, None))
            headers = [(":status", str(response.status))] + _clean_headers(response.headers)
            with self._cond:
                self._conn.send_headers(stream_id, headers)
                self._flush()
            for frame in response.frames:
                if isinstance(frame, Headers):
                    with self._cond:
                        self._conn.send_headers(
                            stream_id, [(n.lower(), v) for n, v in frame], end_stream=True
                        )
                        self._flush()
                    return
                if frame and head.method != "HEAD":
                    self._send_data(stream_id, frame)
            with self._cond:
                self._conn.end_stream(stream_id)
                self._flush()
        except Exception as err:  # report the failure on this stream only
            logger.debug("stream %d error: %s", stream_id, err)
            with self._cond:
                try:
                    self._conn.reset_stream(stream_id)
                    self._flush()
                except (h2.exceptions.ProtocolError, OSError):
                    pass

    def _send_data(self, stream_id: int, data: bytes) -> None:
        view = memoryview(data)
        while view:
            with self._cond:
                while True:
                    if self._closed:
                        raise ServerError("connection closed")
                    window = self._conn.local_flow_control_window(stream_id)
                    if window > 0:
                        break
                    self._cond.wait(0.5)
                size = min(window, len(view), self._conn.max_outbound_frame_size)
                self._conn.send_data(stream_id, bytes(view[:size]))
                self._flush()
            view = view[size:]