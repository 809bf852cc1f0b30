"""Tests for the URL-encoded form codec."""

from __future__ import annotations

from fluentreq.codecs import FormCodec


class TestParse:
    def test_pairs(self) -> None:
        assert FormCodec().parse("a=1&b=hello+world&c=") == {"a": "1", "b": "hello world", "c": ""}

    def test_last_value_wins(self) -> None:
        assert FormCodec().parse("a=1&a=2") == {"a": "2"}

    def test_bracket_keys_collect_lists(self) -> None:
        assert FormCodec().parse("tag[]=x&tag[]=y") == {"tag": ["x", "y"]}

    def test_empty(self) -> None:
        assert FormCodec().parse("") == {}


class TestSerialize:
    def test_mapping(self) -> None:
        assert FormCodec().serialize({"a": 1, "b": "x y"}) == "a=1&b=x+y"

    def test_lists_none_and_bools(self) -> None:
        payload = {"tag": ["x", "y"], "skip": None, "on": True, "off": False}
        assert FormCodec().serialize(payload) == "tag%5B%5D=x&tag%5B%5D=y&on=1&off=0"

    def test_non_mapping_is_stringified(self) -> None:
        assert FormCodec().serialize("a=1") == "a=1"
