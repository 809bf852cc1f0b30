"""MIME type constants and short-alias resolution.

Requests declare their content and expected types either as a canonical
MIME string (``"application/json"``) or as a short alias (``"json"``).
This module owns the fixed alias table and the rules for telling the two
apart:

* :func:`get_full_mime` -- resolve an alias (or pass a canonical type through).
* :func:`supports_mime_type` -- is a candidate a known alias?
* :func:`is_full_mime` -- does a candidate already look canonical?

The same table also backs the ``sends_<alias>`` / ``expects_<alias>``
methods generated on :class:`~fluentreq.client.request.Request`.
"""

from __future__ import annotations

from typing import Final

from fluentreq.exceptions import UnsupportedMimeAlias

JSON: Final[str] = "application/json"
XML: Final[str] = "application/xml"
XHTML: Final[str] = "application/html+xml"
FORM: Final[str] = "application/x-www-form-urlencoded"
UPLOAD: Final[str] = "multipart/form-data"
PLAIN: Final[str] = "text/plain"
JS: Final[str] = "text/javascript"
HTML: Final[str] = "text/html"
YAML: Final[str] = "application/x-yaml"
CSV: Final[str] = "text/csv"

ALIASES: Final[dict[str, str]] = {
    "json": JSON,
    "xml": XML,
    "form": FORM,
    "plain": PLAIN,
    "text": PLAIN,
    "upload": UPLOAD,
    "html": HTML,
    "xhtml": XHTML,
    "js": JS,
    "javascript": JS,
    "yaml": YAML,
    "csv": CSV,
}
"""Short alias -> canonical MIME type. Keys are lowercase."""


def is_full_mime(candidate: str) -> bool:
    """Return ``True`` if *candidate* is already a ``type/subtype`` string."""
    return "/" in candidate


def supports_mime_type(candidate: str) -> bool:
    """Return ``True`` if *candidate* is a known short alias.

    Canonical types are not aliases, so ``supports_mime_type("text/csv")``
    is ``False``.

    Args:
        candidate: The alias to check, compared case-insensitively.
    """
    return candidate.lower() in ALIASES


def get_full_mime(alias_or_full: str) -> str:
    """Resolve a short alias to its canonical MIME type.

    Strings that contain ``/`` are treated as already canonical and
    returned unchanged, case included.

    Args:
        alias_or_full: A short alias such as ``"json"`` or a full type such
            as ``"application/vnd.api+json"``.

    Returns:
        The canonical MIME type string.

    Raises:
        UnsupportedMimeAlias: If *alias_or_full* is neither canonical nor a
            known alias.
    """
    if is_full_mime(alias_or_full):
        return alias_or_full
    try:
        return ALIASES[alias_or_full.lower()]
    except KeyError:
        raise UnsupportedMimeAlias(alias_or_full) from None
