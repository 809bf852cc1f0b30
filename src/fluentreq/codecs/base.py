"""Base codec class and byte-order-mark handling.

This module defines the foundation of the codec subsystem:

- :class:`Codec` -- the base class every MIME codec extends.  Used as-is it
  is the *passthrough* codec: ``parse`` returns the body unchanged and
  ``serialize`` stringifies the payload.  The registry hands it out for any
  content type that has no dedicated codec.
- :func:`strip_bom` -- removes a leading UTF-8/16/32 byte-order mark so text
  codecs see clean input.

To support a new content type, subclass :class:`Codec`, capture any
configuration in ``__init__``, override :meth:`Codec.parse` and
:meth:`Codec.serialize`, and register an instance with
:meth:`~fluentreq.registry.MimeRegistry.register`.

See Also:
    :mod:`fluentreq.registry` for MIME type -> codec dispatch.
"""

from __future__ import annotations

from typing import Any, Union

Body = Union[str, bytes]

# Longer marks first so a UTF-32 LE mark is not mistaken for UTF-16 LE.
_BYTE_MARKS: tuple[bytes, ...] = (
    b"\xef\xbb\xbf",  # UTF-8
    b"\xff\xfe\x00\x00",  # UTF-32 LE
    b"\x00\x00\xfe\xff",  # UTF-32 BE
    b"\xff\xfe",  # UTF-16 LE
    b"\xfe\xff",  # UTF-16 BE
)
_TEXT_MARKS: tuple[str, ...] = tuple(mark.decode("latin-1") for mark in _BYTE_MARKS)


def strip_bom(body: Body) -> Body:
    """Remove a leading byte-order mark from *body*.

    Bytes are matched against the raw UTF-8, UTF-32 and UTF-16 marks.
    Text is matched against the decoded mark (``U+FEFF``) and against the
    same raw sequences as they appear after a latin-1 decode, which is what
    ``text/*`` responses without an explicit charset end up as.

    Args:
        body: The response body, as ``str`` or ``bytes``.

    Returns:
        *body* without its byte-order mark, or unchanged if it has none.
    """
    if isinstance(body, bytes):
        for mark in _BYTE_MARKS:
            if body.startswith(mark):
                return body[len(mark):]
        return body

    if body.startswith("\ufeff"):
        return body[1:]
    for mark in _TEXT_MARKS:
        if body.startswith(mark):
            return body[len(mark):]
    return body


def as_text(body: Body) -> str:
    """Strip the byte-order mark from *body* and return it as ``str``.

    Bytes are decoded as UTF-8 (undecodable sequences replaced).
    """
    body = strip_bom(body)
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body


class Codec:
    """Paired parse/serialize functions for one MIME type.

    The base implementation is the passthrough codec used whenever no
    dedicated codec is registered for a content type, so that an unhandled
    type never stops the caller from seeing the raw body.

    Subclasses hold their configuration as attributes set in ``__init__``
    and must keep :meth:`parse` and :meth:`serialize` free of per-call
    state: one registered instance is shared by every request.
    """

    def parse(self, body: Body) -> Any:
        """Turn a response body into structured data.

        Args:
            body: The raw response body.

        Returns:
            The parsed value.  The passthrough returns *body* unchanged.
        """
        return body

    def serialize(self, payload: Any) -> str:
        """Turn structured data into a request body string.

        Args:
            payload: The value to encode.

        Returns:
            The encoded body.  The passthrough returns ``str(payload)``,
            decoding ``bytes`` as UTF-8 and mapping ``None`` to ``""``.
        """
        if payload is None:
            return ""
        if isinstance(payload, bytes):
            return payload.decode("utf-8", errors="replace")
        return str(payload)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
