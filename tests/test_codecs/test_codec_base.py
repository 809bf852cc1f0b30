"""Tests for byte-order-mark handling and the passthrough codec."""

from __future__ import annotations

import pytest

from fluentreq.codecs import Codec, strip_bom


class TestStripBom:
    @pytest.mark.parametrize(
        "mark",
        [b"\xef\xbb\xbf", b"\xff\xfe\x00\x00", b"\x00\x00\xfe\xff", b"\xff\xfe", b"\xfe\xff"],
    )
    def test_bytes(self, mark: bytes) -> None:
        assert strip_bom(mark + b"{}") == b"{}"

    def test_decoded_mark(self) -> None:
        assert strip_bom("\ufeff{}") == "{}"

    def test_latin1_decoded_mark(self) -> None:
        assert strip_bom(b"\xef\xbb\xbf{}".decode("latin-1")) == "{}"

    def test_no_mark(self) -> None:
        assert strip_bom("{}") == "{}"
        assert strip_bom(b"") == b""

    def test_utf32_le_not_taken_for_utf16(self) -> None:
        assert strip_bom(b"\xff\xfe\x00\x00a") == b"a"


class TestPassthrough:
    def test_parse_returns_body(self) -> None:
        assert Codec().parse("<b>hi</b>") == "<b>hi</b>"

    def test_serialize(self) -> None:
        codec = Codec()
        assert codec.serialize(None) == ""
        assert codec.serialize(b"abc") == "abc"
        assert codec.serialize(42) == "42"
