# mocktail

mocktail runs a small local HTTP or gRPC server that answers requests from a
set of mocks you define. It is meant for tests: point your client at the mock
server, describe which requests to expect and what to send back, and check how
your code behaves.

## Defining mocks

A mock is built from two parts: `When` (in `mocktail.builder`) describes the
request to match, `Then` describes the response. Both are passed to a
function you write, and the builder methods can be chained.

```python
from mocktail.mock_set import MockSet

mocks = MockSet()

def hello(when, then):
    when.post().path("/hello").json({"name": "dan"})
    then.json({"message": "hello dan!"})

def world(when, then):
    when.get().path("/world")
    then.text("hello!")

mocks.mock(hello)
mocks.mock(world)
```

Request conditions include the method (`get`, `post`, `put`, `delete`,
`head`, or `method`), `path`, `path_prefix`, headers (`header`,
`headers`, `headers_exact`, `header_exists`), query parameters
(`query_param`, `query_params`, `query_param_exists`) and the body (`text`,
`bytes`, `json`, `empty`, `body`, plus the streaming forms `bytes_stream`,
`text_stream`, `json_lines_stream`, `pb` and `pb_stream`). `any` matches
every request, and `matcher` adds your own `mocktail.matchers.Matcher`
subclass. All conditions of a mock must hold for it to match.

Header names of incoming requests are lower-cased before matching, so write
header conditions with lower-case names. JSON bodies are compared as their
compact encoding (no spaces after separators).

Responses default to `200 OK` with an empty body. Set the status with
`status`, or with helpers such as `bad_request`, `not_found`,
`internal_server_error` or `service_unavailable`; set a body with the same
body helpers as above; add an error text with `message` or `error`.
`json` and `json_lines_stream` also set a `content-type` header.

Mocks have a priority (lower numbers are tried first, the default is 5) and an
optional limit on how often they may match:

```python
mocks.mock_with_options(1, 2, hello)  # priority 1, matches at most twice
```

A `Mock` can also be built directly with `Mock.build(fn)`, and counts its
matches (`match_count()`, `reset()`).

## Running a server

```python
from mocktail.server import MockServer

server = MockServer("hello").with_mocks(mocks)
server.start()
try:
    url = server.url("/hello")
    # send requests to `url` with any HTTP client
finally:
    server.stop()
```

`MockServer` is also a context manager that starts on entry and stops on
exit. It binds a random port in the range given by `MockServerConfig`
(10000 to 30000 on `0.0.0.0` by default); `hostname()`, `port()` and
`url(path)` tell you where it listens, and `url` raises `ServerError` when
the server is not running. The server speaks HTTP/1.1 and HTTP/2 with prior
knowledge.

A request that matches no mock gets `404` with the body `mock not found`.
When a matched mock has an error status and a message, the message is sent as
the body. Methods other than GET, POST, PUT, HEAD and DELETE are answered with
`405`. Streaming request bodies are matched as they arrive; each time the
buffered body matches a mock, its response chunks are sent.

Mocks can be changed while the server runs:

```python
from mocktail.status import StatusCode

server.mocks().clear()

def unavailable(when, then):
    when.text("give me an error")
    then.status(StatusCode.from_u16(503))

server.mock(unavailable)
```

## gRPC

Call `grpc()` to serve gRPC over HTTP/2. Request and response bodies use the
gRPC length-prefixed framing; `pb` and `pb_stream` take either serialized
message bytes or objects with a `SerializeToString` method, and frame them
for you. Status codes are turned into `grpc-status` trailers (for example
`500` becomes `INTERNAL`, see `mocktail.status.Code.from_http`), and
`message` becomes `grpc-message`.

```python
server = MockServer("example.Hello").grpc().with_mocks(mocks)
```

Requests that are not POST get `405`, and requests without an
`application/grpc` content type get `415`. Unmatched calls end with status
`NOT_FOUND` and the message `mock not found`.

## What it does not do

There is no command-line tool; the server is started from Python code. It
does not serve TLS, does not upgrade HTTP/1.1 connections to HTTP/2, and does
not compile `.proto` files: protobuf messages come from your own generated
code or as bytes.