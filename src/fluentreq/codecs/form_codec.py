"""Codec for ``application/x-www-form-urlencoded``."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl, urlencode

from fluentreq.codecs.base import Body, Codec, as_text


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


class FormCodec(Codec):
    """Parse and serialize ``&``/``=`` delimited query strings.

    Repeated keys keep the last value, except keys written as ``name[]``
    which collect every value into a list under ``name``.  Serializing
    mirrors that: list and tuple values are written as ``name[]`` pairs,
    ``None`` values are skipped, and booleans become ``1`` / ``0``.
    """

    def parse(self, body: Body) -> dict[str, Any]:
        parsed: dict[str, Any] = {}
        for key, value in parse_qsl(as_text(body), keep_blank_values=True):
            if key.endswith("[]"):
                parsed.setdefault(key[:-2], []).append(value)
            else:
                parsed[key] = value
        return parsed

    def serialize(self, payload: Any) -> str:
        if not isinstance(payload, Mapping):
            return super().serialize(payload)

        pairs: list[tuple[str, str]] = []
        for key, value in payload.items():
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                name = key if key.endswith("[]") else f"{key}[]"
                pairs.extend((name, _form_value(v)) for v in value if v is not None)
            else:
                pairs.append((key, _form_value(value)))
        return urlencode(pairs)
