"""MIME type -> codec registry.

:class:`MimeRegistry` is the extension point for content types: users
register a :class:`~fluentreq.codecs.Codec` under a canonical MIME type
and every request resolved against that registry picks it up.

Lookups never fail.  A type with no registered codec (or no type at all)
resolves to the shared passthrough codec, so an unhandled content type
degrades to the raw body instead of an error.

Concurrency:
    Writers serialise on a :class:`threading.Lock` and publish a fresh
    copy of the mapping; readers use whichever snapshot is current without
    taking the lock.  A lookup therefore never observes a half-built
    entry and never waits on a writer.

The module also exposes :data:`default_registry`, the process-wide
instance used when no explicit registry is passed, and the convenience
functions :func:`register`, :func:`get` and :func:`has_registered` bound
to it.  Lookups through those functions (and :func:`get_default_registry`)
run :func:`fluentreq.config.bootstrap` first, so the built-in codecs are
in place without building a request.

Example::

    from fluentreq import registry
    from fluentreq.codecs import JsonCodec

    registry.register("application/json", JsonCodec(decode_as_dict=False))
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from fluentreq import mime
from fluentreq.codecs import Codec, CsvCodec, FormCodec, JsonCodec, XmlCodec

logger = logging.getLogger(__name__)

_PASSTHROUGH = Codec()


class MimeRegistry:
    """Maps canonical MIME type strings to codecs.

    Keys are stored exactly as given; MIME values are compared
    case-sensitively.
    """

    def __init__(self) -> None:
        self._codecs: dict[str, Codec] = {}
        self._lock = threading.Lock()
        self._builtins_installed = False

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def register(self, mime_type: str, codec: Codec) -> None:
        """Register *codec* for *mime_type*, replacing any existing entry."""
        with self._lock:
            codecs = dict(self._codecs)
            codecs[mime_type] = codec
            self._codecs = codecs
        logger.debug("Registered %r for %s", codec, mime_type)

    def register_if_absent(self, mime_type: str, codec: Codec) -> bool:
        """Register *codec* for *mime_type* unless a codec is already there.

        Returns:
            ``True`` if *codec* was registered, ``False`` if an existing
            entry was kept.
        """
        with self._lock:
            if mime_type in self._codecs:
                return False
            codecs = dict(self._codecs)
            codecs[mime_type] = codec
            self._codecs = codecs
        logger.debug("Registered %r for %s", codec, mime_type)
        return True

    def unregister(self, mime_type: str) -> None:
        """Remove the codec for *mime_type*, if any."""
        with self._lock:
            if mime_type not in self._codecs:
                return
            codecs = dict(self._codecs)
            del codecs[mime_type]
            self._codecs = codecs

    def install_builtin_codecs(self) -> None:
        """Register the JSON, XML, form and CSV codecs.

        Idempotent: only the first call does anything.  Entries that exist
        already (for instance codecs set up from user configuration before
        this runs) are left in place.
        """
        builtins = {
            mime.JSON: JsonCodec(),
            mime.XML: XmlCodec(),
            mime.FORM: FormCodec(),
            mime.CSV: CsvCodec(),
        }
        with self._lock:
            if self._builtins_installed:
                return
            codecs = dict(self._codecs)
            for mime_type, codec in builtins.items():
                codecs.setdefault(mime_type, codec)
            self._codecs = codecs
            self._builtins_installed = True
        logger.debug("Installed built-in codecs")

    @property
    def builtins_installed(self) -> bool:
        """Whether :meth:`install_builtin_codecs` has run."""
        return self._builtins_installed

    # ------------------------------------------------------------------ #
    # Lookup
    # ------------------------------------------------------------------ #

    def get(self, mime_type: Optional[str] = None) -> Codec:
        """Return the codec for *mime_type*, or the passthrough codec."""
        if mime_type is not None:
            codec = self._codecs.get(mime_type)
            if codec is not None:
                return codec
        return _PASSTHROUGH

    def has(self, mime_type: str) -> bool:
        """Return ``True`` if a codec is registered for *mime_type*."""
        return mime_type in self._codecs

    has_registered = has

    def registered_types(self) -> list[str]:
        """Return the registered MIME types in registration order."""
        return list(self._codecs)

    def __contains__(self, mime_type: object) -> bool:
        return mime_type in self._codecs

    def __len__(self) -> int:
        return len(self._codecs)


default_registry = MimeRegistry()
"""Process-wide registry used when no explicit registry is given."""


def register(mime_type: str, codec: Codec) -> None:
    """Register *codec* for *mime_type* in :data:`default_registry`."""
    default_registry.register(mime_type, codec)


def get_default_registry() -> MimeRegistry:
    """Return :data:`default_registry` with configured and built-in codecs installed."""
    # fluentreq.config imports this module.
    from fluentreq.config import bootstrap

    bootstrap()
    return default_registry


def get(mime_type: Optional[str] = None) -> Codec:
    """Look up *mime_type* in :data:`default_registry`."""
    return get_default_registry().get(mime_type)


def has_registered(mime_type: str) -> bool:
    """Return ``True`` if :data:`default_registry` has a codec for *mime_type*."""
    return get_default_registry().has(mime_type)
