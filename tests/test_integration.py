"""End-to-end checks against a local uvicorn server."""

import json

import pytest

import httpchain

pytestmark = pytest.mark.network


def test_get(server):
    with httpchain.RequestBuilder() as builder:
        assert builder.get(str(server.url)).end() is None
        assert builder.resp_status == 200
        assert builder.raw_resp_body == b"Hello, world!"
        assert builder.resp_length == 13
        assert builder.resp_headers["content-type"] == "text/plain"


def test_post_echo(server):
    url = str(server.url.copy_with(path="/echo"))
    with httpchain.RequestBuilder() as builder:
        error = (
            builder.post(url)
            .set_header("Content-Type", "application/json")
            .append_header("X-Multi", "a")
            .append_header("X-Multi", "b")
            .set_basic_auth("user", "pass")
            .payload(b'{"a":1}')
            .end()
        )
        assert error is None

    echoed = json.loads(builder.raw_resp_body)
    assert echoed["method"] == "POST"
    assert echoed["body"] == '{"a":1}'
    assert echoed["headers"]["content-type"] == ["application/json"]
    assert echoed["headers"]["x-multi"] == ["a", "b"]
    assert echoed["headers"]["authorization"] == ["Basic dXNlcjpwYXNz"]


def test_head_has_no_body(server):
    with httpchain.RequestBuilder() as builder:
        builder.head(str(server.url)).end()
        assert builder.resp_status == 200
        assert builder.raw_resp_body == b""


def test_status_codes(server):
    with httpchain.RequestBuilder() as builder:
        assert builder.get(str(server.url.copy_with(path="/status/404"))).end() is None
        assert builder.resp_status == 404


def test_session_cookies(server):
    with httpchain.RequestBuilder() as builder:
        builder.get(str(server.url.copy_with(path="/set_cookie"))).end()
        builder.get(str(server.url.copy_with(path="/echo"))).add_cookies([("c1", "v1")])
        builder.end()

    echoed = json.loads(builder.raw_resp_body)
    assert echoed["headers"]["cookie"] == ["c1=v1; session=abc123"]


def test_redirect(server):
    with httpchain.RequestBuilder() as builder:
        builder.get(str(server.url.copy_with(path="/redirect_301"))).end()
        assert builder.resp_status == 200
        assert json.loads(builder.raw_resp_body)["path"] == "/echo/redirected"


def test_connection_refused():
    with httpchain.RequestBuilder() as builder:
        error = builder.get("http://127.0.0.1:1/").end()
        assert isinstance(error, httpchain.TransportError)
