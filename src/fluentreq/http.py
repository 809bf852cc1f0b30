"""HTTP method names and their safety / idempotency classes."""

from __future__ import annotations

import enum


class HTTPMethod(str, enum.Enum):
    """HTTP methods supported by :class:`~fluentreq.client.request.Request`."""

    HEAD = "HEAD"
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"


def safe_methods() -> list[str]:
    """Methods that must not change server state."""
    return [HTTPMethod.HEAD.value, HTTPMethod.GET.value, HTTPMethod.OPTIONS.value, HTTPMethod.TRACE.value]


def is_safe_method(method: str) -> bool:
    return method.upper() in safe_methods()


def is_unsafe_method(method: str) -> bool:
    return not is_safe_method(method)


def idempotent_methods() -> list[str]:
    """Methods that are always idempotent.

    POST can be idempotent but is not guaranteed to be, so it is left out.
    """
    return [
        HTTPMethod.HEAD.value,
        HTTPMethod.GET.value,
        HTTPMethod.PUT.value,
        HTTPMethod.DELETE.value,
        HTTPMethod.OPTIONS.value,
        HTTPMethod.TRACE.value,
        HTTPMethod.PATCH.value,
    ]


def is_idempotent(method: str) -> bool:
    return method.upper() in idempotent_methods()


def is_not_idempotent(method: str) -> bool:
    return not is_idempotent(method)
