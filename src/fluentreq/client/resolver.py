"""Response body codec selection.

:class:`ResponseBodyResolver` decides how a response body is parsed.  The
first rule that applies wins:

1. Auto-parsing disabled on the request -> the raw body string.
2. A custom parse callback on the request -> its result, verbatim.
3. An explicit expected type (or a per-request codec) on the request ->
   that codec, else ``registry.get(expected_type)``.
4. A codec registered for the response's base type -> that codec.
5. ``registry.get(parent_type)`` -- which degrades to the passthrough
   codec when the parent type is not registered either.

Whatever codec is chosen, its errors propagate: no second codec is tried.
Picking the right expected type is the caller's job.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from fluentreq.codecs import Codec
from fluentreq.content_type import InterpretedContentType
from fluentreq.registry import MimeRegistry, get_default_registry

logger = logging.getLogger(__name__)

ParseCallback = Callable[[str], Any]


class ResponseBodyResolver:
    """Picks the codec for an incoming body and runs it.

    Args:
        registry: Registry to look codecs up in.  Defaults to
            :data:`~fluentreq.registry.default_registry`.
    """

    def __init__(self, registry: Optional[MimeRegistry] = None) -> None:
        self._registry = registry if registry is not None else get_default_registry()

    def select_codec(
        self,
        interpreted: InterpretedContentType,
        expected_type: Optional[str] = None,
        codec: Optional[Codec] = None,
    ) -> Codec:
        """Return the codec rules 3-5 pick for this response."""
        if codec is not None:
            return codec
        if expected_type:
            return self._registry.get(expected_type)
        if self._registry.has(interpreted.base_type):
            return self._registry.get(interpreted.base_type)
        return self._registry.get(interpreted.parent_type)

    def resolve(
        self,
        raw_body: str,
        interpreted: InterpretedContentType,
        expected_type: Optional[str] = None,
        parse_callback: Optional[ParseCallback] = None,
        auto_parse: bool = True,
        codec: Optional[Codec] = None,
    ) -> Any:
        """Parse *raw_body* according to the precedence rules above.

        Args:
            raw_body: The decoded response body.
            interpreted: The response's interpreted ``Content-Type``.
            expected_type: Canonical MIME type the request expects, if any.
            parse_callback: Custom parser set on the request.
            auto_parse: ``False`` returns *raw_body* untouched.
            codec: Per-request codec override, owned by the request.

        Returns:
            The parsed body.

        Raises:
            CodecError: Whatever the selected codec raises.
        """
        if not auto_parse:
            return raw_body
        if parse_callback is not None:
            return parse_callback(raw_body)

        selected = self.select_codec(interpreted, expected_type, codec)
        logger.debug(
            "Parsing %s response with %r",
            expected_type or interpreted.base_type or "untyped",
            selected,
        )
        return selected.parse(raw_body)
