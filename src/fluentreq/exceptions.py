"""Exception hierarchy for fluentreq.

All exceptions inherit from :class:`FluentreqError` so callers can catch
every library failure with a single ``except`` clause, while still being
able to single out the category they care about.

Subclass hierarchy::

    FluentreqError
    +-- UnsupportedMimeAlias
    +-- CodecError
    |   +-- JsonParseError
    |   +-- XmlParseError
    |   +-- XmlSerializeError
    |   +-- CsvParseError
    |   +-- YamlParseError
    +-- MalformedResponse
    +-- TransportError
    +-- ConfigError

Codec errors are raised by :mod:`fluentreq.codecs` and always surface to
the caller of response resolution; nothing in the library retries with a
different codec after one has failed.
"""

from __future__ import annotations

from typing import Optional


class FluentreqError(Exception):
    """Base exception for all fluentreq errors.

    Args:
        message: Human-readable error description.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedMimeAlias(FluentreqError):
    """Raised when a short MIME alias (e.g. ``"jsn"``) has no known mapping.

    Recoverable: :meth:`Request.directive` falls back to generic header
    handling for names that are not known aliases.
    """

    def __init__(self, alias: str):
        super().__init__(f"Unsupported MIME alias '{alias}'")
        self.alias = alias


class CodecError(FluentreqError):
    """Base class for failures inside a codec's ``parse`` or ``serialize``."""


class JsonParseError(CodecError):
    """Raised when a response body cannot be decoded as JSON."""


class XmlParseError(CodecError):
    """Raised when a response body is not well-formed XML."""


class XmlSerializeError(CodecError):
    """Raised when a payload tree cannot be rendered as XML (e.g. an invalid tag name)."""


class CsvParseError(CodecError):
    """Raised when a response body yields no CSV rows."""


class YamlParseError(CodecError):
    """Raised when a response body cannot be loaded as YAML."""


class MalformedResponse(FluentreqError):
    """Raised when no status code can be extracted from the response header block."""


class TransportError(FluentreqError):
    """Raised on network-level failures reported by the transport.

    Args:
        message: Human-readable error description.
        url: The request URL that failed, when known.
        cause: The underlying transport exception, when there is one.
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.url = url
        self.cause = cause


class ConfigError(FluentreqError):
    """Raised for configuration problems (missing or invalid config files, bad values)."""
