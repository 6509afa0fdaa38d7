import pytest

from mocktail.body import Body
from mocktail.builder import Then, When
from mocktail.errors import InvalidError
from mocktail.headers import Headers
from mocktail.matchers import Matcher
from mocktail.request import Method, Request
from mocktail.status import StatusCode


def _request(method=Method.POST, url="http://localhost/hello", body=b""):
    return Request(method, url).with_body(body)


def test_when_chains_and_sorts_by_name():
    matchers = When().path("/hello").post().into_inner()
    assert [m.name for m in matchers] == ["method", "path"]


def test_when_dedups_duplicates():
    matchers = When().get().get().path("/a").path("/a").into_inner()
    assert len(matchers) == 2


def test_when_keeps_distinct_values_of_same_type():
    matchers = When().path("/a").path("/b").into_inner()
    assert len(matchers) == 2
    assert all(m.name == "path" for m in matchers)


def test_when_text_matches_request_body():
    matchers = When().post().path("/hello").text("hello").into_inner()
    assert all(m.matches(_request(body=b"hello")) for m in matchers)
    assert not all(m.matches(_request(body=b"hey")) for m in matchers)


def test_when_method_accepts_string():
    [matcher] = When().method("get").into_inner()
    assert matcher.matches(_request(method=Method.GET))
    assert not matcher.matches(_request(method=Method.POST))


def test_when_pb_body_uses_grpc_frame():
    [matcher] = When().pb(b"abc").into_inner()
    assert matcher.body.as_bytes() == b"\x00\x00\x00\x00\x03abc"


def test_when_bytes_stream_matches_merged_body():
    [matcher] = When().bytes_stream([b"dan", b"mateus"]).into_inner()
    assert matcher.matches(_request(body=b"danmateus"))


def test_when_empty_matches_empty_body():
    [matcher] = When().empty().into_inner()
    assert matcher.matches(_request())
    assert not matcher.matches(_request(body=b"x"))


def test_when_headers_is_subset_match():
    [matcher] = When().headers([("header1", "value1")]).into_inner()
    req = Request(Method.GET, "http://localhost/").with_headers(
        Headers([("header1", "value1"), ("header2", "value2")])
    )
    assert matcher.matches(req)


def test_when_custom_matcher_rejects_non_matcher():
    with pytest.raises(TypeError):
        When().matcher("nope")


def test_when_custom_matcher_is_kept():
    class Always(Matcher):
        def matches(self, request):
            return True

    custom = Always()
    assert custom in When().matcher(custom).into_inner()


def test_then_defaults_to_ok_empty():
    response = Then().into_inner()
    assert response.status == 200
    assert response.body.is_empty()
    assert response.message is None


def test_then_json_sets_content_type():
    response = Then().json({"message": "hello dan!"}).into_inner()
    assert response.headers.get("content-type") == "application/json"
    assert response.body == Body.json({"message": "hello dan!"})


def test_then_json_lines_sets_content_type():
    response = Then().json_lines_stream([{"a": 1}, {"a": 2}]).into_inner()
    assert response.headers.get("content-type") == "application/x-ndjson"
    assert len(list(response.body)) == 2


def test_then_error_sets_status_and_message():
    response = Then().error(StatusCode.INTERNAL_SERVER_ERROR, "unexpected error").into_inner()
    assert response.status == StatusCode.INTERNAL_SERVER_ERROR
    assert response.message == "unexpected error"
    assert response.is_error()


@pytest.mark.parametrize(
    "name, expected",
    [
        ("ok", StatusCode.OK),
        ("bad_request", StatusCode.BAD_REQUEST),
        ("unauthorized", StatusCode.UNAUTHORIZED),
        ("forbidden", StatusCode.FORBIDDEN),
        ("not_found", StatusCode.NOT_FOUND),
        ("unsupported_media_type", StatusCode.UNSUPPORTED_MEDIA_TYPE),
        ("unprocessable_content", StatusCode.UNPROCESSABLE_ENTITY),
        ("internal_server_error", StatusCode.INTERNAL_SERVER_ERROR),
        ("not_implemented", StatusCode.NOT_IMPLEMENTED),
        ("bad_gateway", StatusCode.BAD_GATEWAY),
        ("service_unavailable", StatusCode.SERVICE_UNAVAILABLE),
        ("gateway_timeout", StatusCode.GATEWAY_TIMEOUT),
    ],
)
def test_then_status_shortcuts(name, expected):
    then = Then()
    getattr(then, name)()
    assert then.into_inner().status == expected


def test_then_headers_replace():
    response = Then().json(1).headers([("x", "y")]).into_inner()
    assert list(response.headers) == [("x", "y")]


def test_then_status_rejects_invalid():
    with pytest.raises(InvalidError):
        Then().status(42)


def test_then_text_stream_chunks():
    response = Then().text_stream(["hello dan!", "hello mateus!"]).into_inner()
    assert list(response.body) == [b"hello dan!", b"hello mateus!"]


def test_then_into_inner_resets():
    then = Then().text("hello!")
    first = then.into_inner()
    assert first.body.as_bytes() == b"hello!"
    assert then.into_inner().body.is_empty()