"""Tests for outgoing payload serialization."""

from __future__ import annotations

from fluentreq import mime
from fluentreq.client.serializer import PayloadSerializer, is_empty_payload
from fluentreq.models import SerializeMode
from fluentreq.registry import MimeRegistry


class TestEmptyPayload:
    def test_empty_values(self) -> None:
        for payload in (None, "", b"", [], {}, ()):
            assert is_empty_payload(payload)

    def test_non_empty_values(self) -> None:
        for payload in (0, False, "x", [0], {"a": None}):
            assert not is_empty_payload(payload)


class TestModes:
    def test_empty_payload_untouched(self, registry: MimeRegistry) -> None:
        serializer = PayloadSerializer(registry)
        assert serializer.serialize(None, mime.JSON, SerializeMode.ALWAYS) is None
        assert serializer.serialize({}, mime.JSON, SerializeMode.ALWAYS) == {}

    def test_never_mode(self, registry: MimeRegistry) -> None:
        payload = {"a": 1}
        assert PayloadSerializer(registry).serialize(payload, mime.JSON, SerializeMode.NEVER) is payload

    def test_smart_mode_skips_scalars(self, registry: MimeRegistry) -> None:
        serializer = PayloadSerializer(registry)
        assert serializer.serialize('{"a":1}', mime.JSON) == '{"a":1}'
        assert serializer.serialize(5, mime.JSON) == 5

    def test_smart_mode_serializes_containers(self, registry: MimeRegistry) -> None:
        assert PayloadSerializer(registry).serialize({"a": 1}, mime.JSON) == '{"a": 1}'

    def test_always_mode_serializes_scalars(self, registry: MimeRegistry) -> None:
        assert PayloadSerializer(registry).serialize("x", mime.JSON, SerializeMode.ALWAYS) == '"x"'


class TestSerializerSelection:
    def test_exact_type_beats_wildcard(self, registry: MimeRegistry) -> None:
        serializers = {mime.JSON: lambda p: "exact", "*": lambda p: "wildcard"}
        result = PayloadSerializer(registry).serialize({"a": 1}, mime.JSON, serializers=serializers)
        assert result == "exact"

    def test_wildcard_used_when_no_exact(self, registry: MimeRegistry) -> None:
        serializers = {mime.XML: lambda p: "xml", "*": lambda p: "wildcard"}
        result = PayloadSerializer(registry).serialize({"a": 1}, mime.JSON, serializers=serializers)
        assert result == "wildcard"

    def test_registry_codec_by_content_type(self, registry: MimeRegistry) -> None:
        assert PayloadSerializer(registry).serialize({"a": 1, "b": 2}, mime.FORM) == "a=1&b=2"

    def test_unregistered_type_uses_passthrough(self, registry: MimeRegistry) -> None:
        assert PayloadSerializer(registry).serialize([1, 2], "text/plain") == "[1, 2]"

    def test_no_content_type_uses_passthrough(self, registry: MimeRegistry) -> None:
        assert PayloadSerializer(registry).serialize({"a": 1}, None) == "{'a': 1}"
