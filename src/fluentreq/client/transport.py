"""The transport seam between fluentreq and the network.

The request/response pipeline never touches sockets.  It hands a fully
prepared request to a :class:`Transport` and gets back the raw status
line, header block and body bytes, which it then parses itself.

:class:`HttpxTransport` is the default implementation, backed by
:class:`httpx.Client`.  Connection handling, TLS, redirects, proxies and
timeouts are all httpx's business; they arrive as plain
:class:`TransportOptions`.

Tests (and callers that need to fake the network) can pass an
:class:`httpx.MockTransport` through ``HttpxTransport(transport=...)`` or
supply any object with a matching ``execute`` method.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol, Union

import httpx

from fluentreq.exceptions import TransportError

logger = logging.getLogger(__name__)

ClientCert = Union[str, tuple[str, str], tuple[str, str, Optional[str]]]


@dataclass
class TransportOptions:
    """Per-request settings passed through to the transport.

    Attributes:
        timeout: Seconds before giving up, or ``None`` for the transport's
            default.
        follow_redirects: Follow 3xx responses.
        max_redirects: Upper bound on redirects when following.
        verify_ssl: Verify the server's TLS certificate.
        client_cert: Client certificate: a PEM path, or ``(cert, key)`` /
            ``(cert, key, passphrase)``.
        proxy: Proxy URL.
        auth: An :class:`httpx.Auth` instance (basic, digest, ...).
    """

    timeout: Optional[float] = None
    follow_redirects: bool = False
    max_redirects: int = 25
    verify_ssl: bool = True
    client_cert: Optional[ClientCert] = None
    proxy: Optional[str] = None
    auth: Optional[httpx.Auth] = None


@dataclass
class TransportResult:
    """What the transport hands back for a completed exchange.

    Attributes:
        status_line: e.g. ``"HTTP/1.1 200 OK"``.
        header_block: The status line followed by ``Name: value`` lines,
            CRLF-delimited.
        body: The response body bytes (content-encoding already undone).
        meta: Transport details such as the final URL and redirect count.
    """

    status_line: str
    header_block: str
    body: bytes
    meta: dict[str, Any] = field(default_factory=dict)


class Transport(Protocol):
    """Anything that can execute a prepared request."""

    def execute(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[Union[str, bytes]],
        options: TransportOptions,
    ) -> TransportResult:
        """Send the request and return the raw response.

        Raises:
            TransportError: On any network-level failure.
        """
        ...


class HttpxTransport:
    """Default :class:`Transport` backed by :class:`httpx.Client`.

    A short-lived client is built per call so that per-request options
    (TLS verification, client certificates, proxy) apply cleanly.

    Args:
        transport: Optional lower-level :class:`httpx.BaseTransport`, e.g.
            :class:`httpx.MockTransport` in tests.
    """

    def __init__(self, transport: Optional[httpx.BaseTransport] = None) -> None:
        self._transport = transport

    def execute(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[Union[str, bytes]],
        options: TransportOptions,
    ) -> TransportResult:
        client_kwargs: dict[str, Any] = {
            "verify": options.verify_ssl,
            "follow_redirects": options.follow_redirects,
            "max_redirects": options.max_redirects,
        }
        if options.timeout is not None:
            client_kwargs["timeout"] = options.timeout
        if options.client_cert is not None:
            client_kwargs["cert"] = options.client_cert
        if options.proxy is not None:
            client_kwargs["proxy"] = options.proxy
        if options.auth is not None:
            client_kwargs["auth"] = options.auth
        if self._transport is not None:
            client_kwargs["transport"] = self._transport

        try:
            with httpx.Client(**client_kwargs) as client:
                response = client.request(method, url, headers=dict(headers), content=body)
        except httpx.RequestError as exc:
            raise TransportError(f'Unable to connect to "{url}": {exc}', url=url, cause=exc) from exc

        return self._to_result(response)

    @staticmethod
    def _to_result(response: httpx.Response) -> TransportResult:
        status_line = f"{response.http_version} {response.status_code} {response.reason_phrase}".rstrip()
        lines = [status_line]
        lines.extend(
            f"{name.decode('latin-1')}: {value.decode('latin-1')}"
            for name, value in response.headers.raw
        )
        meta = {
            "url": str(response.url),
            "redirect_count": len(response.history),
            "http_version": response.http_version,
        }
        logger.debug("%s -> %s", meta["url"], status_line)
        return TransportResult(
            status_line=status_line,
            header_block="\r\n".join(lines) + "\r\n",
            body=response.content,
            meta=meta,
        )
