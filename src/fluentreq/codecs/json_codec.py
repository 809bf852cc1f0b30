"""Codec for ``application/json``."""

from __future__ import annotations

import dataclasses
import json
from types import SimpleNamespace
from typing import Any, Optional

from fluentreq.codecs.base import Body, Codec, as_text
from fluentreq.exceptions import JsonParseError


def _encode_default(value: Any) -> Any:
    """``json.dumps`` fallback for pydantic models, dataclasses and namespaces."""
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, SimpleNamespace):
        return vars(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class JsonCodec(Codec):
    """Parse and serialize JSON bodies.

    Args:
        decode_as_dict: When ``True`` (the default) JSON objects decode to
            ``dict``.  When ``False`` they decode to
            :class:`types.SimpleNamespace` so fields read as attributes
            (``response.body.user.name``).
        indent: Passed to :func:`json.dumps` when serializing.
    """

    def __init__(self, decode_as_dict: bool = True, indent: Optional[int] = None) -> None:
        self.decode_as_dict = decode_as_dict
        self.indent = indent

    def parse(self, body: Body) -> Any:
        """Decode *body* as JSON.

        Returns ``None`` for an empty body and for a literal ``null``
        (any case).

        Raises:
            JsonParseError: If the body is not valid JSON.  The message
                carries the decoder's own description of the problem.
        """
        text = as_text(body)
        if not text:
            return None
        if text.strip().lower() == "null":
            return None

        object_hook = None if self.decode_as_dict else (lambda d: SimpleNamespace(**d))
        try:
            return json.loads(text, object_hook=object_hook)
        except json.JSONDecodeError as exc:
            raise JsonParseError(f"Unable to parse response as JSON: {exc.msg}") from exc

    def serialize(self, payload: Any) -> str:
        return json.dumps(payload, indent=self.indent, default=_encode_default)

    def __repr__(self) -> str:
        return f"JsonCodec(decode_as_dict={self.decode_as_dict!r})"
