"""Tests for Response construction and parsing."""

from __future__ import annotations

import pytest

from fluentreq.client.request import Request
from fluentreq.client.response import Response
from fluentreq.exceptions import JsonParseError, MalformedResponse
from fluentreq.registry import MimeRegistry


def _headers(content_type: str | None = None, status: str = "200 OK") -> str:
    block = f"HTTP/1.1 {status}\r\n"
    if content_type is not None:
        block += f"Content-Type: {content_type}\r\n"
    return block


@pytest.fixture
def request_(registry: MimeRegistry) -> Request:
    return Request.get("http://example.com/").with_registry(registry)


class TestParsing:
    def test_json_by_content_type(self, request_: Request) -> None:
        response = Response(b'{"a":1}', _headers("application/json"), request_)
        assert response.code == 200
        assert response.body == {"a": 1}
        assert response.raw_body == '{"a":1}'
        assert str(response) == '{"a":1}'

    def test_bom_prefixed_json(self, request_: Request) -> None:
        response = Response(b"\xef\xbb\xbf{}", _headers("application/json"), request_)
        assert response.body == {}

    def test_bom_prefixed_text_default_charset(self, request_: Request) -> None:
        request_.expects("json")
        response = Response(b"\xef\xbb\xbf[1]", _headers("text/plain"), request_)
        assert response.body == [1]

    @pytest.mark.parametrize(
        "mark",
        [b"\xff\xfe", b"\xfe\xff", b"\xff\xfe\x00\x00", b"\x00\x00\xfe\xff"],
        ids=["utf-16-le", "utf-16-be", "utf-32-le", "utf-32-be"],
    )
    def test_wide_bom_prefixed_json(self, request_: Request, mark: bytes) -> None:
        response = Response(mark + b"{}", _headers("application/json"), request_)
        assert response.body == {}
        assert response.raw_body == "{}"

    def test_utf16_body_with_bom(self, request_: Request) -> None:
        body = '{"a": "\u00e9"}'.encode("utf-16")
        response = Response(body, _headers("application/json; charset=utf-16"), request_)
        assert response.body == {"a": "\u00e9"}

    def test_suffix_type_uses_parent_codec(self, request_: Request) -> None:
        response = Response(b'{"data":[]}', _headers("application/vnd.api+json"), request_)
        assert response.body == {"data": []}
        assert response.content_type == "application/vnd.api+json"
        assert response.parent_type == "application/json"
        assert response.is_mime_vendor_specific
        assert not response.is_mime_personal

    def test_expected_type_wins(self, request_: Request) -> None:
        request_.expects("csv")
        response = Response("a,b\n", _headers("application/json"), request_)
        assert response.body == [["a", "b"]]

    def test_without_auto_parsing(self, request_: Request) -> None:
        request_.without_auto_parsing()
        response = Response(b"{bad", _headers("application/json"), request_)
        assert response.body == "{bad"

    def test_parse_callback(self, request_: Request) -> None:
        request_.parse_with(lambda body: body.upper())
        response = Response(b"abc", _headers("application/json"), request_)
        assert response.body == "ABC"

    def test_codec_error_propagates(self, request_: Request) -> None:
        with pytest.raises(JsonParseError):
            Response(b"{bad", _headers("application/json"), request_)

    def test_untyped_body_is_raw(self, request_: Request) -> None:
        response = Response(b"hello", _headers(), request_)
        assert response.body == "hello"
        assert response.content_type == ""


class TestDecoding:
    def test_explicit_charset(self, request_: Request) -> None:
        body = "café".encode("utf-16-le")
        response = Response(body, _headers("text/plain; charset=utf-16-le"), request_)
        assert response.raw_body == "café"
        assert response.charset == "utf-16-le"

    def test_text_defaults_to_latin1(self, request_: Request) -> None:
        response = Response("café".encode("latin-1"), _headers("text/plain"), request_)
        assert response.raw_body == "café"

    def test_unknown_charset_falls_back_to_utf8(self, request_: Request) -> None:
        response = Response("café".encode("utf-8"), _headers("text/plain; charset=x-bogus"), request_)
        assert response.raw_body == "café"


class TestStatus:
    def test_has_errors(self, request_: Request) -> None:
        assert Response(b"", _headers(status="404 Not Found"), request_).has_errors()
        assert not Response(b"", _headers(status="302 Found"), request_).has_errors()

    def test_has_body(self, request_: Request) -> None:
        assert not Response(b"", _headers(), request_).has_body()
        assert Response(b"x", _headers(), request_).has_body()

    def test_headers_and_meta(self, request_: Request) -> None:
        block = "HTTP/1.1 200 OK\r\nX-A: 1\r\nx-a: 2\r\n"
        response = Response(b"", block, request_, {"url": "http://example.com/"})
        assert response.headers["X-A"] == "1,2"
        assert response.raw_headers == block
        assert response.meta_data == {"url": "http://example.com/"}
        assert response.request is request_

    def test_malformed_status_line(self, request_: Request) -> None:
        with pytest.raises(MalformedResponse):
            Response(b"", "garbage\r\n", request_)


class TestXmlDecoding:
    def test_latin1_declaration(self, request_: Request) -> None:
        body = '<?xml version="1.0" encoding="ISO-8859-1"?><a>café</a>'.encode("latin-1")
        response = Response(body, _headers("application/xml; charset=ISO-8859-1"), request_)
        assert response.body.tag == "a"
        assert response.body.text == "café"
