"""Parsed HTTP responses.

A :class:`Response` is built from what the transport hands back: the raw
header block and the body bytes.  Construction does all of the work in
one pass:

1. The status code is read from the header block's first line.
2. The remaining lines become :class:`~fluentreq.headers.ParsedHeaders`.
3. ``Content-Type`` is interpreted (base type, charset, parent type).
4. The body is decoded with the interpreted charset and handed to the
   :class:`~fluentreq.client.resolver.ResponseBodyResolver`, using the
   originating request's registry and parsing options.

Codec errors raised in step 4 propagate out of the constructor, and so
out of :meth:`Request.send() <fluentreq.client.request.Request.send>`.
"""

from __future__ import annotations

import codecs
from typing import TYPE_CHECKING, Any, Optional, Union

from fluentreq.client.resolver import ResponseBodyResolver
from fluentreq.codecs import strip_bom
from fluentreq.content_type import InterpretedContentType, interpret
from fluentreq.headers import ParsedHeaders, parse_status_code

if TYPE_CHECKING:
    from fluentreq.client.request import Request

_BOM_CONSUMING = frozenset({"utf-16", "utf-32"})


def _decode(body: Union[str, bytes], charset: str) -> str:
    if isinstance(body, str):
        return body
    try:
        charset = codecs.lookup(charset).name
    except LookupError:
        charset = "utf-8"
    # Plain utf-16/utf-32 consume their own BOM; anything else would turn it
    # into replacement characters.
    if charset not in _BOM_CONSUMING:
        body = strip_bom(body)
    return body.decode(charset, errors="replace")


class Response:
    """A response received for a :class:`~fluentreq.client.request.Request`.

    Args:
        body: The raw body, as received from the transport.
        headers: The raw header block (status line first).
        request: The request this is a response to.
        meta_data: Transport details (final URL, redirect count, ...).

    Raises:
        MalformedResponse: If no status code can be read from *headers*.
        CodecError: If the selected codec cannot parse the body.

    Example::

        response = Request.get("https://example.com/users.json").send()
        if not response.has_errors():
            print(response.body["users"])
    """

    def __init__(
        self,
        body: Union[str, bytes],
        headers: str,
        request: Request,
        meta_data: Optional[dict[str, Any]] = None,
    ) -> None:
        self.request = request
        self.raw_headers = headers
        self.meta_data: dict[str, Any] = dict(meta_data or {})

        self.code = parse_status_code(headers)
        self.headers = ParsedHeaders.from_string(headers)

        self._interpreted = interpret(self.headers.get("Content-Type"))
        self.raw_body = _decode(body, self._interpreted.charset)
        self.body = self._parse(self.raw_body)

    def _parse(self, raw_body: str) -> Any:
        request = self.request
        resolver = ResponseBodyResolver(request.registry)
        return resolver.resolve(
            raw_body,
            self._interpreted,
            expected_type=request.expected_type,
            parse_callback=request.parse_callback,
            auto_parse=request.parse_automatically,
            codec=request.codec_override,
        )

    # ------------------------------------------------------------------ #
    # Content type
    # ------------------------------------------------------------------ #

    @property
    def interpreted_content_type(self) -> InterpretedContentType:
        return self._interpreted

    @property
    def content_type(self) -> str:
        """Base media type of the response, without parameters."""
        return self._interpreted.base_type

    @property
    def parent_type(self) -> str:
        """Canonical type behind a ``+suffix``, else :attr:`content_type`."""
        return self._interpreted.parent_type

    @property
    def charset(self) -> str:
        return self._interpreted.charset

    @property
    def is_mime_vendor_specific(self) -> bool:
        return self._interpreted.is_vendor_specific

    @property
    def is_mime_personal(self) -> bool:
        return self._interpreted.is_personal_type

    # ------------------------------------------------------------------ #
    # Status
    # ------------------------------------------------------------------ #

    def has_errors(self) -> bool:
        """``True`` for 4xx and 5xx responses."""
        return self.code >= 400

    def has_body(self) -> bool:
        return bool(self.raw_body)

    def __str__(self) -> str:
        return self.raw_body

    def __repr__(self) -> str:
        return f"<Response [{self.code}] {self.content_type or 'untyped'}>"
