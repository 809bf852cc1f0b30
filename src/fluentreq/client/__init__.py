"""Request/response pipeline.

Classes:
    :class:`Request` -- fluent request builder; ``send()`` runs the pipeline.
    :class:`Response` -- parsed response.
    :class:`PayloadSerializer` -- picks the codec for outgoing payloads.
    :class:`ResponseBodyResolver` -- picks the codec for incoming bodies.
    :class:`HttpxTransport` -- default transport backed by :class:`httpx.Client`.

Example::

    from fluentreq.client import Request

    Request.post("https://example.com/items", {"a": 1}, "json").send()
"""

from fluentreq.client.request import Request
from fluentreq.client.resolver import ResponseBodyResolver
from fluentreq.client.response import Response
from fluentreq.client.serializer import PayloadSerializer
from fluentreq.client.transport import HttpxTransport, Transport, TransportOptions, TransportResult

__all__ = [
    "Request",
    "Response",
    "PayloadSerializer",
    "ResponseBodyResolver",
    "HttpxTransport",
    "Transport",
    "TransportOptions",
    "TransportResult",
]
