"""Tests for Content-Type interpretation."""

from __future__ import annotations

from fluentreq.content_type import interpret


class TestBaseTypeAndCharset:
    def test_explicit_charset(self) -> None:
        result = interpret("application/json; charset=UTF-8")
        assert result.base_type == "application/json"
        assert result.charset == "UTF-8"
        assert result.parent_type == "application/json"

    def test_text_defaults_to_latin1(self) -> None:
        assert interpret("text/plain").charset == "iso-8859-1"
        assert interpret("text/csv").charset == "iso-8859-1"

    def test_non_text_defaults_to_utf8(self) -> None:
        assert interpret("application/xml").charset == "utf-8"

    def test_only_first_parameter_is_checked(self) -> None:
        result = interpret("text/html; boundary=x; charset=utf-8")
        assert result.charset == "iso-8859-1"

    def test_charset_value_is_trimmed(self) -> None:
        assert interpret("text/html;charset= koi8-r ").charset == "koi8-r"

    def test_missing_header(self) -> None:
        result = interpret(None)
        assert result.raw_content_type == ""
        assert result.base_type == ""
        assert result.parent_type == ""
        assert result.charset == "utf-8"

    def test_raw_value_kept(self) -> None:
        raw = "application/json; charset=utf-8"
        assert interpret(raw).raw_content_type == raw


class TestSubtypeTrees:
    def test_vendor_specific(self) -> None:
        result = interpret("application/vnd.github.v3+json")
        assert result.is_vendor_specific
        assert not result.is_personal_type

    def test_personal(self) -> None:
        result = interpret("application/prs.me")
        assert result.is_personal_type
        assert not result.is_vendor_specific

    def test_standard_tree(self) -> None:
        result = interpret("application/json")
        assert not result.is_vendor_specific
        assert not result.is_personal_type


class TestParentType:
    def test_json_suffix(self) -> None:
        result = interpret("application/vnd.api+json")
        assert result.base_type == "application/vnd.api+json"
        assert result.parent_type == "application/json"

    def test_xml_suffix(self) -> None:
        assert interpret("application/atom+xml").parent_type == "application/xml"

    def test_unknown_suffix_keeps_base_type(self) -> None:
        result = interpret("application/vnd.foo+bar")
        assert result.parent_type == "application/vnd.foo+bar"

    def test_no_suffix(self) -> None:
        assert interpret("text/csv").parent_type == "text/csv"
