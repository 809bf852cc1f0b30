"""Outgoing payload serialization.

:class:`PayloadSerializer` decides whether and how a request payload is
turned into a body string before it goes to the transport.  The decision
follows the request's :class:`~fluentreq.models.SerializeMode`:

1. Empty payloads and ``NEVER`` mode -> payload returned untouched.
2. ``SMART`` mode and a scalar payload -> untouched (assumed to be
   serialized already, e.g. a pre-built JSON string).
3. A custom serializer registered on the request for the content type,
   or for ``*`` -> its result.  An exact type beats ``*``.
4. Otherwise the registry's codec for the content type (the passthrough
   codec if none is registered).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional

from fluentreq.models import SerializeMode
from fluentreq.registry import MimeRegistry, get_default_registry

logger = logging.getLogger(__name__)

WILDCARD = "*"

PayloadSerializerFn = Callable[[Any], Any]

_SCALARS = (str, bytes, bytearray, int, float, bool)


def is_empty_payload(payload: Any) -> bool:
    """``None``, an empty string, or an empty container."""
    if payload is None:
        return True
    if isinstance(payload, (str, bytes, bytearray, list, tuple, dict, set)):
        return len(payload) == 0
    return False


class PayloadSerializer:
    """Chooses and applies the codec for an outgoing payload.

    Args:
        registry: Registry to look codecs up in.  Defaults to
            :data:`~fluentreq.registry.default_registry`.
    """

    def __init__(self, registry: Optional[MimeRegistry] = None) -> None:
        self._registry = registry if registry is not None else get_default_registry()

    def serialize(
        self,
        payload: Any,
        content_type: Optional[str],
        mode: SerializeMode = SerializeMode.SMART,
        serializers: Optional[Mapping[str, PayloadSerializerFn]] = None,
    ) -> Any:
        """Serialize *payload* for a request declaring *content_type*.

        Args:
            payload: The request payload.
            content_type: Canonical MIME type of the request body.
            mode: The request's serialization policy.
            serializers: Per-request serializer callbacks keyed by MIME
                type or ``"*"``.

        Returns:
            The body to send.  A ``str`` whenever a codec or callback ran;
            otherwise *payload* itself.
        """
        if is_empty_payload(payload) or mode == SerializeMode.NEVER:
            return payload

        if mode == SerializeMode.SMART and isinstance(payload, _SCALARS):
            return payload

        serializers = serializers or {}
        if content_type in serializers:
            logger.debug("Serializing payload with custom serializer for %s", content_type)
            return serializers[content_type](payload)
        if WILDCARD in serializers:
            logger.debug("Serializing payload with wildcard serializer")
            return serializers[WILDCARD](payload)

        codec = self._registry.get(content_type)
        logger.debug("Serializing payload for %s with %r", content_type, codec)
        return codec.serialize(payload)
