"""Fluent request builder.

:class:`Request` collects everything about an outgoing HTTP call through
chainable setters and sends it with :meth:`Request.send`::

    response = (
        Request.post("https://example.com/users")
        .sends_json()
        .expects_json()
        .body({"name": "Ada"})
        .add_header("X-Trace", "abc")
        .send()
    )

New requests start from a *template*: the library defaults from
:func:`fluentreq.config.get_config`, or whatever request was installed
with :meth:`Request.ini`.  Attributes whose names start with ``_`` are
never taken from the template.

Sending runs these steps in order:

1. Merge added/removed query parameters into the URI.
2. Serialize the payload (:class:`~fluentreq.client.serializer.PayloadSerializer`).
3. Call the ``before_send`` callback.
4. Build the final headers (``User-Agent``, ``Content-Type``, ``Accept``).
5. Hand the request to the transport.
6. Build a :class:`~fluentreq.client.response.Response`, which parses the
   body through the request's registry.

Besides the named setters, every MIME alias gets ``sends_<alias>`` and
``expects_<alias>`` shortcuts (``sends_json()``, ``expects_csv()``, ...),
and :meth:`Request.directive` accepts those names (and custom header
names) as strings.
"""

from __future__ import annotations

import copy
import logging
import mimetypes
import os
import platform
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable, ClassVar, Optional, Union
from urllib.parse import quote_plus

import httpx

from fluentreq import __version__, mime
from fluentreq.client.response import Response
from fluentreq.client.serializer import WILDCARD, PayloadSerializer
from fluentreq.client.transport import HttpxTransport, Transport, TransportOptions
from fluentreq.codecs import Codec
from fluentreq.config import bootstrap, get_config
from fluentreq.exceptions import FluentreqError, TransportError
from fluentreq.http import HTTPMethod
from fluentreq.models import SerializeMode
from fluentreq.output import get_output
from fluentreq.registry import MimeRegistry, default_registry

logger = logging.getLogger(__name__)

DEFAULT_ACCEPT = "*/*; q=0.5, text/plain; q=0.8, text/html;level=3"

_PROXY_ENV_VARS = ("http_proxy", "HTTPS_PROXY")
_HEADER_WORDS = re.compile(r"_|(?=[A-Z])")

Callback = Callable[..., Any]


def _header_name(name: str) -> str:
    """``x_my_header`` / ``xMyHeader`` -> ``X-My-Header``."""
    words = [word for word in _HEADER_WORDS.split(name) if word]
    return "-".join(word[:1].upper() + word[1:] for word in words)


class Request:
    """A chainable description of one HTTP request.

    Use the factories (:meth:`get`, :meth:`post`, ..., :meth:`init`)
    rather than the constructor: they apply the template defaults and
    make sure the built-in codecs are registered.

    Attributes:
        method: HTTP method.
        url: Target URI.
        content_type: Canonical MIME type of the request body.
        expected_type: Canonical MIME type expected back, used to pick the
            response codec.
        headers: Extra request headers.
        payload: The body as given to :meth:`body`.
        serialized_payload: The body actually sent, set by :meth:`send`.
        serialize_mode: Payload serialization policy.
        parse_automatically: Parse response bodies by content type.
        registry: Codec registry used on the way out and in.
        transport: Transport that executes the request.
    """

    _template: ClassVar[Optional[Request]] = None

    def __init__(self, method: str = HTTPMethod.GET.value) -> None:
        self.method = method
        self.url = ""
        self.content_type: Optional[str] = None
        self.expected_type: Optional[str] = None
        self.headers: dict[str, str] = {}

        self.payload: Any = None
        self.serialized_payload: Any = None
        self.serialize_mode = SerializeMode.SMART
        self.payload_serializers: dict[str, Callback] = {}
        self.files: dict[str, str] = {}

        self.parse_automatically = True
        self.parse_callback: Optional[Callback] = None
        self.codec_override: Optional[Codec] = None
        self.error_callback: Optional[Callback] = None
        self.send_callback: Optional[Callback] = None

        self.timeout_seconds: Optional[float] = None
        self.follows_redirects = False
        self.max_redirects = 25
        self.verify_ssl = True
        self.username: Optional[str] = None
        self.password: Optional[str] = None
        self.auth_scheme: Optional[str] = None
        self.client_cert: Optional[str] = None
        self.client_key: Optional[str] = None
        self.client_passphrase: Optional[str] = None
        self.proxy: Optional[str] = None
        self.debug = False

        self.registry: MimeRegistry = default_registry
        self.transport: Optional[Transport] = None

        self._uri_parameters: dict[str, Optional[str]] = {}
        self._uri_parameters_without_equal_sign: set[str] = set()
        self._removed_uri_parameters: list[str] = []

    # ------------------------------------------------------------------ #
    # Template defaults
    # ------------------------------------------------------------------ #

    @classmethod
    def ini(cls, template: Request) -> None:
        """Use a copy of *template* as the starting point for new requests."""
        cls._template = template._snapshot()

    @classmethod
    def reset_ini(cls) -> None:
        """Go back to the library defaults for new requests."""
        cls._initialize_defaults()

    @classmethod
    def _initialize_defaults(cls) -> None:
        defaults = get_config().request
        template = cls()
        template.timeout_seconds = defaults.timeout
        template.verify_ssl = defaults.verify_ssl
        template.follows_redirects = defaults.follow_redirects
        template.max_redirects = defaults.max_redirects
        template.parse_automatically = defaults.auto_parse
        template.serialize_mode = defaults.serialize_mode
        template.headers = dict(defaults.headers)
        template.mime(defaults.mime)
        cls._template = template

    def _snapshot(self) -> Request:
        clone = Request.__new__(Request)
        for name, value in vars(self).items():
            setattr(clone, name, copy.copy(value) if isinstance(value, (dict, list, set)) else value)
        return clone

    def _set_defaults(self) -> Request:
        if Request._template is None:
            Request._initialize_defaults()
        for name, value in vars(Request._template).items():
            if name.startswith("_"):
                continue
            setattr(self, name, copy.copy(value) if isinstance(value, (dict, list, set)) else value)
        return self

    # ------------------------------------------------------------------ #
    # Factories
    # ------------------------------------------------------------------ #

    @classmethod
    def init(cls, method: Optional[str] = None, mime_type: Optional[str] = None) -> Request:
        """Create a request from the template defaults.

        Args:
            method: HTTP method; the template's method when omitted.
            mime_type: Alias or MIME type used as both content and
                expected type.
        """
        bootstrap()
        request = cls()._set_defaults()
        if method:
            request.method = method
        if mime_type:
            request.sends_type(mime_type)
            request.expects_type(mime_type)
        return request

    @classmethod
    def get(cls, uri: str, mime_type: Optional[str] = None) -> Request:
        return cls.init(HTTPMethod.GET.value).uri(uri).mime(mime_type)

    @classmethod
    def post(cls, uri: str, payload: Any = None, mime_type: Optional[str] = None) -> Request:
        return cls.init(HTTPMethod.POST.value).uri(uri).body(payload, mime_type)

    @classmethod
    def put(cls, uri: str, payload: Any = None, mime_type: Optional[str] = None) -> Request:
        return cls.init(HTTPMethod.PUT.value).uri(uri).body(payload, mime_type)

    @classmethod
    def patch(cls, uri: str, payload: Any = None, mime_type: Optional[str] = None) -> Request:
        return cls.init(HTTPMethod.PATCH.value).uri(uri).body(payload, mime_type)

    @classmethod
    def delete(cls, uri: str, mime_type: Optional[str] = None) -> Request:
        return cls.init(HTTPMethod.DELETE.value).uri(uri).mime(mime_type)

    @classmethod
    def head(cls, uri: str) -> Request:
        return cls.init(HTTPMethod.HEAD.value).uri(uri)

    @classmethod
    def options(cls, uri: str) -> Request:
        return cls.init(HTTPMethod.OPTIONS.value).uri(uri)

    @classmethod
    def get_quick(cls, uri: str, mime_type: Optional[str] = None) -> Response:
        """Send a GET to *uri* and return the response."""
        return cls.get(uri, mime_type).send()

    # ------------------------------------------------------------------ #
    # MIME types
    # ------------------------------------------------------------------ #

    def mime(self, mime_type: Optional[str]) -> Request:
        """Set both the content type and the expected type."""
        if not mime_type:
            return self
        self.content_type = self.expected_type = mime.get_full_mime(mime_type)
        if self.is_upload():
            self.never_serialize_payload()
        return self

    sends_and_expects = mime
    sends_and_expects_type = mime

    def sends(self, mime_type: Optional[str]) -> Request:
        """Set the content type of the request body.

        Switching to ``multipart/form-data`` also switches serialization
        off: uploads are encoded by the transport.
        """
        if not mime_type:
            return self
        self.content_type = mime.get_full_mime(mime_type)
        if self.is_upload():
            self.never_serialize_payload()
        return self

    sends_type = sends

    def expects(self, mime_type: Optional[str]) -> Request:
        """Set the type the response body is parsed as."""
        if not mime_type:
            return self
        self.expected_type = mime.get_full_mime(mime_type)
        return self

    expects_type = expects

    def is_upload(self) -> bool:
        return self.content_type == mime.UPLOAD

    def directive(self, name: str, value: Any = None) -> Request:
        """Apply a setter given by name.

        ``sends_<alias>`` / ``expects_<alias>`` (or ``sendsJson`` style)
        set the content or expected type when the alias is known.  Any
        other name with a *value* becomes a header: a leading ``with`` is
        dropped and the rest is dash-cased, so ``with_x_my_header`` and
        ``withXMyHeader`` both set ``X-My-Header``.  Unknown names without
        a value are ignored.
        """
        for prefix, setter in (("sends", self.sends), ("expects", self.expects)):
            if name.startswith(prefix):
                alias = name[len(prefix):].lstrip("_").lower()
                if mime.supports_mime_type(alias):
                    return setter(alias)

        if value is None:
            return self
        if name.startswith("with"):
            name = name[len("with"):].lstrip("_")
        return self.add_header(_header_name(name), str(value))

    # ------------------------------------------------------------------ #
    # Body and serialization
    # ------------------------------------------------------------------ #

    def body(self, payload: Any, mime_type: Optional[str] = None) -> Request:
        """Set the payload; it is serialized when the request is sent."""
        self.mime(mime_type)
        self.payload = payload
        return self

    def attach(self, files: Mapping[str, Union[str, Path]]) -> Request:
        """Attach files by form field name and switch to a multipart upload."""
        for field_name, path in files.items():
            self.files[field_name] = str(path)
        return self.sends_type(mime.UPLOAD)

    def serialize_payload(self, mode: SerializeMode) -> Request:
        self.serialize_mode = SerializeMode(mode)
        return self

    def never_serialize_payload(self) -> Request:
        return self.serialize_payload(SerializeMode.NEVER)

    def always_serialize_payload(self) -> Request:
        return self.serialize_payload(SerializeMode.ALWAYS)

    def smart_serialize_payload(self) -> Request:
        return self.serialize_payload(SerializeMode.SMART)

    def register_payload_serializer(self, mime_type: str, callback: Callback) -> Request:
        """Serialize payloads sent as *mime_type* with *callback*.

        Args:
            mime_type: Alias, full MIME type, or ``"*"`` for every type.
                An exact type wins over ``"*"``.
            callback: Receives the payload, returns the body.
        """
        key = WILDCARD if mime_type == WILDCARD else mime.get_full_mime(mime_type)
        self.payload_serializers[key] = callback
        return self

    def serialize_payload_with(self, callback: Callback) -> Request:
        """Serialize every payload with *callback*."""
        return self.register_payload_serializer(WILDCARD, callback)

    # ------------------------------------------------------------------ #
    # Response parsing
    # ------------------------------------------------------------------ #

    def auto_parse(self, flag: bool = True) -> Request:
        self.parse_automatically = flag
        return self

    def without_auto_parsing(self) -> Request:
        return self.auto_parse(False)

    def with_auto_parsing(self) -> Request:
        return self.auto_parse(True)

    def parse_with(self, callback: Callback) -> Request:
        """Parse response bodies with *callback* instead of a codec."""
        self.parse_callback = callback
        return self

    parse_responses_with = parse_with

    def with_codec(self, codec: Codec) -> Request:
        """Parse the response with *codec*, bypassing the registry.

        The codec belongs to this request alone; it is not registered.
        """
        self.codec_override = codec
        return self

    # ------------------------------------------------------------------ #
    # Callbacks and headers
    # ------------------------------------------------------------------ #

    def when_error(self, callback: Callback) -> Request:
        """Call *callback* with the error message when the transport fails."""
        self.error_callback = callback
        return self

    def before_send(self, callback: Callback) -> Request:
        """Call *callback* with this request right before it is sent."""
        self.send_callback = callback
        return self

    def add_header(self, name: str, value: str) -> Request:
        self.headers[name] = value
        return self

    def add_headers(self, headers: Mapping[str, str]) -> Request:
        for name, value in headers.items():
            self.add_header(name, value)
        return self

    def _has_header(self, name: str) -> bool:
        return any(existing.lower() == name.lower() for existing in self.headers)

    # ------------------------------------------------------------------ #
    # URI
    # ------------------------------------------------------------------ #

    def uri(self, uri: str) -> Request:
        self.url = uri
        return self

    def add_uri_parameter(
        self, name: str, value: Optional[str] = None, with_equal_sign: bool = True
    ) -> Request:
        """Add a query parameter, URL-encoding name and value.

        With ``with_equal_sign=False`` the parameter is written as a bare
        ``name`` instead of ``name=``.
        """
        key = quote_plus(name)
        self._uri_parameters[key] = quote_plus(value) if value else None
        if not with_equal_sign:
            self._uri_parameters_without_equal_sign.add(key)
        return self

    def remove_uri_parameter(self, name: str) -> Request:
        key = quote_plus(name)
        self._removed_uri_parameters.append(key)
        self._uri_parameters.pop(key, None)
        return self

    def process_uri_params(self) -> None:
        """Rewrite :attr:`url` with the added and removed query parameters.

        Parameters already in the URI are kept in order; added ones
        override them or are appended; removed ones are dropped.
        """
        base, _, query = self.url.partition("?")
        in_uri: dict[str, Optional[str]] = {}
        if query:
            for pair in query.split("&"):
                name, sep, value = pair.partition("=")
                if not sep:
                    self._uri_parameters_without_equal_sign.add(name)
                    in_uri[name] = None
                    continue
                in_uri[name] = value

        parameters = {**in_uri, **self._uri_parameters}
        pairs = []
        for name, value in parameters.items():
            if name in self._removed_uri_parameters:
                continue
            equal_sign = "" if name in self._uri_parameters_without_equal_sign else "="
            pairs.append(f"{name}{equal_sign}{value or ''}")

        self.url = f"{base}?{'&'.join(pairs)}" if pairs else base

    # ------------------------------------------------------------------ #
    # Transport options
    # ------------------------------------------------------------------ #

    def timeout(self, seconds: float) -> Request:
        self.timeout_seconds = seconds
        return self

    timeout_in = timeout

    def follow_redirects(self, follow: bool = True, max_redirects: Optional[int] = None) -> Request:
        self.follows_redirects = follow
        if max_redirects is not None:
            self.max_redirects = max_redirects
        return self

    def do_not_follow_redirects(self) -> Request:
        return self.follow_redirects(False)

    def strict_ssl(self, strict: bool = True) -> Request:
        self.verify_ssl = strict
        return self

    def without_strict_ssl(self) -> Request:
        return self.strict_ssl(False)

    def with_strict_ssl(self) -> Request:
        return self.strict_ssl(True)

    def basic_auth(self, username: str, password: str) -> Request:
        self.username = username
        self.password = password
        self.auth_scheme = "basic"
        return self

    authenticate_with = basic_auth
    authenticate_with_basic = basic_auth

    def digest_auth(self, username: str, password: str) -> Request:
        self.username = username
        self.password = password
        self.auth_scheme = "digest"
        return self

    authenticate_with_digest = digest_auth

    def client_side_cert(self, cert: str, key: str, passphrase: Optional[str] = None) -> Request:
        """Present a client certificate (PEM files) during the TLS handshake."""
        self.client_cert = cert
        self.client_key = key
        self.client_passphrase = passphrase
        return self

    authenticate_with_cert = client_side_cert

    def use_proxy(self, proxy_url: str) -> Request:
        self.proxy = proxy_url
        return self

    def with_transport(self, transport: Transport) -> Request:
        self.transport = transport
        return self

    def with_registry(self, registry: MimeRegistry) -> Request:
        """Resolve codecs against *registry* instead of the process default."""
        self.registry = registry
        return self

    def set_debug(self, enabled: bool = True) -> Request:
        """Print the request and the response status to stderr."""
        self.debug = enabled
        return self

    def has_basic_auth(self) -> bool:
        return self.auth_scheme == "basic" and self.password is not None

    def has_digest_auth(self) -> bool:
        return self.auth_scheme == "digest" and self.password is not None

    def has_timeout(self) -> bool:
        return self.timeout_seconds is not None

    def has_client_side_cert(self) -> bool:
        return self.client_cert is not None and self.client_key is not None

    def has_proxy(self) -> bool:
        """A proxy was set here or comes from the environment."""
        if self.proxy:
            return True
        return any(os.environ.get(name) for name in _PROXY_ENV_VARS)

    # ------------------------------------------------------------------ #
    # Sending
    # ------------------------------------------------------------------ #

    def build_user_agent(self) -> str:
        return (
            f"fluentreq/{__version__} (httpx/{httpx.__version__}; "
            f"Python/{platform.python_version()}; {platform.system()})"
        )

    def send(self) -> Response:
        """Send the request and return the parsed response.

        Raises:
            FluentreqError: If no URI was set or a client certificate file
                is missing.
            TransportError: If the transport cannot complete the exchange.
                The ``when_error`` callback (if any) sees the message first.
            MalformedResponse: If the response has no readable status code.
            CodecError: If the response body cannot be parsed.
        """
        if not self.url:
            raise FluentreqError("Attempting to send a request before defining a URI endpoint.")

        self.process_uri_params()
        self.serialized_payload = PayloadSerializer(self.registry).serialize(
            self.payload, self.content_type, self.serialize_mode, self.payload_serializers
        )
        if self.send_callback is not None:
            self.send_callback(self)

        body, upload_content_type = self._encode_body()
        headers = self._build_headers(upload_content_type)

        if self.debug:
            get_output().request(self.method, self.url, headers, body, self.content_type)

        transport = self.transport or HttpxTransport()
        try:
            result = transport.execute(self.method, self.url, headers, body, self._transport_options())
        except TransportError as exc:
            self._error(exc.message)
            raise

        response = Response(result.body, result.header_block, self, result.meta)
        if self.debug:
            get_output().response(response.code, response.headers, response.content_type)
        return response

    send_it = send

    def _encode_body(self) -> tuple[Optional[Union[str, bytes]], Optional[str]]:
        """Return the wire body and, for uploads, the multipart content type."""
        if self.method == HTTPMethod.HEAD.value:
            return None, None

        payload = self.serialized_payload
        if self.is_upload() and (self.files or isinstance(payload, Mapping)):
            return self._encode_multipart(payload if isinstance(payload, Mapping) else {})

        if payload is None or isinstance(payload, (str, bytes)):
            return payload, None
        if isinstance(payload, bytearray):
            return bytes(payload), None
        return Codec().serialize(payload), None

    def _encode_multipart(self, fields: Mapping[str, Any]) -> tuple[bytes, str]:
        files = {}
        for field_name, path in self.files.items():
            file_path = Path(path)
            guessed, _ = mimetypes.guess_type(file_path.name)
            files[field_name] = (
                file_path.name,
                file_path.read_bytes(),
                guessed or "application/octet-stream",
            )
        data = {name: str(value) for name, value in fields.items()}
        multipart = httpx.Request(self.method, self.url, data=data, files=files)
        return multipart.read(), multipart.headers["Content-Type"]

    def _build_headers(self, upload_content_type: Optional[str]) -> dict[str, str]:
        headers: dict[str, str] = {}
        if not self._has_header("User-Agent"):
            headers["User-Agent"] = self.build_user_agent()
        if upload_content_type:
            headers["Content-Type"] = upload_content_type
        elif self.content_type and not self._has_header("Content-Type"):
            headers["Content-Type"] = self.content_type
        if not self._has_header("Accept"):
            accept = DEFAULT_ACCEPT
            if self.expected_type:
                accept += f", {self.expected_type}; q=0.9"
            headers["Accept"] = accept
        headers.update(self.headers)
        return headers

    def _transport_options(self) -> TransportOptions:
        options = TransportOptions(
            timeout=self.timeout_seconds,
            follow_redirects=self.follows_redirects,
            max_redirects=self.max_redirects,
            verify_ssl=self.verify_ssl,
            proxy=self.proxy,
        )
        if self.has_basic_auth():
            options.auth = httpx.BasicAuth(self.username or "", self.password or "")
        elif self.has_digest_auth():
            options.auth = httpx.DigestAuth(self.username or "", self.password or "")

        if self.has_client_side_cert():
            if not Path(self.client_key or "").is_file():
                raise FluentreqError(f"Could not read client key: {self.client_key}")
            if not Path(self.client_cert or "").is_file():
                raise FluentreqError(f"Could not read client certificate: {self.client_cert}")
            options.client_cert = (self.client_cert or "", self.client_key or "", self.client_passphrase)
        return options

    def _error(self, message: str) -> None:
        if self.error_callback is not None:
            self.error_callback(message)
        else:
            logger.error(message)

    def __repr__(self) -> str:
        return f"<Request {self.method} {self.url or '(no uri)'}>"


def _mime_shortcut(setter: str, alias: str) -> Callable[[Request], Request]:
    def shortcut(self: Request) -> Request:
        return getattr(self, setter)(alias)

    shortcut.__name__ = f"{setter}_{alias}"
    shortcut.__qualname__ = f"Request.{setter}_{alias}"
    shortcut.__doc__ = f"Shortcut for ``{setter}({alias!r})``."
    return shortcut


for _alias in mime.ALIASES:
    for _setter in ("sends", "expects"):
        setattr(Request, f"{_setter}_{_alias}", _mime_shortcut(_setter, _alias))
