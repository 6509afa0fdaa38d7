from mocktail.body import encode_grpc_message
from mocktail.headers import Headers
from mocktail.mock_set import MockSet
from mocktail.service import (
    GrpcMockService,
    HttpMockService,
    MockServerState,
    RequestHead,
)

HELLO_DAN = b"\x0a\x03dan"
HELLO_MATEUS = b"\x0a\x06mateus"
HELLO_PAULO = b"\x0a\x05paulo"
RESP_DAN = b"\x0a\x0ahello dan!"
RESP_GAURAV = b"\x0a\x0dhello gaurav!"
GRPC = [("content-type", "application/grpc")]


def http_service(build):
    mocks = MockSet()
    mocks.mock(build)
    return HttpMockService(MockServerState(mocks))


def grpc_service(build):
    mocks = MockSet()
    mocks.mock(build)
    return GrpcMockService(MockServerState(mocks))


def test_state_defaults_to_empty_mocks():
    assert len(MockServerState().mocks) == 0


def test_http_unary_match():
    def build(when, then):
        when.post().path("/hello").text("hi")
        then.text("hello!")

    resp = http_service(build).call(RequestHead("POST", "/hello"), [b"hi"])
    assert resp.status == 200
    assert list(resp.frames) == [b"hello!"]
    assert resp.streaming is False


def test_http_unary_not_found():
    def build(when, then):
        when.get().path("/world")
        then.text("hello!")

    resp = http_service(build).call(RequestHead("GET", "/other"), [])
    assert resp.status == 404
    assert list(resp.frames) == [b"mock not found"]


def test_http_method_not_allowed():
    resp = HttpMockService(MockServerState()).call(RequestHead("PATCH", "/"), [])
    assert resp.status == 405
    assert ("allow", "GET, POST, PUT, HEAD, DELETE") in resp.headers


def test_http_error_message_replaces_body():
    def build(when, then):
        when.get().path("/e")
        then.text("ignored").internal_server_error().message("unexpected error")

    resp = http_service(build).call(RequestHead("GET", "/e"), [])
    assert resp.status == 500
    assert list(resp.frames) == [b"unexpected error"]


def test_http_streaming_match():
    def build(when, then):
        when.post().path("/hello").bytes_stream(["dan", "mateus"])
        then.bytes_stream(["hello dan!", "hello mateus!"])

    resp = http_service(build).call(RequestHead("POST", "/hello"), [b"dan", b"mateus"])
    assert resp.streaming is True
    frames = list(resp.frames)
    assert frames[:2] == [b"hello dan!", b"hello mateus!"]
    assert frames[2] == Headers()


def test_http_streaming_not_found():
    resp = HttpMockService(MockServerState()).call(
        RequestHead("POST", "/x"), [b"a", b"b"]
    )
    assert list(resp.frames) == [b"mock not found"]


def test_grpc_rejects_non_post():
    resp = GrpcMockService(MockServerState()).call(RequestHead("GET", "/hello"), [])
    assert resp.status == 405
    assert resp.headers == [("allow", "POST")]


def test_grpc_rejects_content_type():
    resp = GrpcMockService(MockServerState()).call(RequestHead("POST", "/hello"), [])
    assert resp.status == 415
    assert resp.headers == [("accept-post", "application/grpc")]


def test_grpc_unary():
    def build(when, then):
        when.path("/example.Hello/HelloUnary").pb(HELLO_DAN)
        then.pb(RESP_DAN)

    resp = grpc_service(build).call(
        RequestHead("POST", "/example.Hello/HelloUnary", GRPC),
        [encode_grpc_message(HELLO_DAN)],
    )
    assert resp.headers == [("content-type", "application/grpc")]
    frames = list(resp.frames)
    assert frames[0] == encode_grpc_message(RESP_DAN)
    assert frames[1].get("grpc-status") == "0"


def test_grpc_unary_errors():
    def build(when, then):
        when.path("/example.Hello/HelloUnary").pb(b"\x0a\x10unexpected_error")
        then.internal_server_error().message("unexpected error")

    service = grpc_service(build)
    head = RequestHead("POST", "/example.Hello/HelloUnary", GRPC)
    frames = list(service.call(head, [encode_grpc_message(b"\x0a\x10unexpected_error")]).frames)
    assert frames[-1].get("grpc-status") == "13"
    assert frames[-1].get("grpc-message") == "unexpected error"

    frames = list(service.call(head, [encode_grpc_message(b"\x0a\x0edoes_not_exist")]).frames)
    assert frames == [
        Headers([("grpc-status", "5"), ("grpc-message", "mock not found")])
    ]


def test_grpc_client_streaming():
    def build(when, then):
        when.path("/example.Hello/HelloClientStreaming").pb_stream(
            [HELLO_MATEUS, HELLO_PAULO]
        )
        then.pb(b"\x0a\x02ok")

    resp = grpc_service(build).call(
        RequestHead("POST", "/example.Hello/HelloClientStreaming", GRPC),
        [encode_grpc_message(HELLO_MATEUS), encode_grpc_message(HELLO_PAULO)],
    )
    frames = list(resp.frames)
    assert frames[0] == encode_grpc_message(b"\x0a\x02ok")
    assert frames[1].get("grpc-status") == "0"


def test_grpc_server_streaming():
    def build(when, then):
        when.path("/example.Hello/HelloServerStreaming").pb(HELLO_DAN)
        then.pb_stream([RESP_DAN, RESP_GAURAV])

    resp = grpc_service(build).call(
        RequestHead("POST", "/example.Hello/HelloServerStreaming", GRPC),
        [encode_grpc_message(HELLO_DAN)],
    )
    frames = list(resp.frames)
    data = [f for f in frames if isinstance(f, bytes)]
    assert data == [encode_grpc_message(RESP_DAN), encode_grpc_message(RESP_GAURAV)]
    assert frames[-1].get("grpc-status") == "0"