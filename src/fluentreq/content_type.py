"""Interpretation of response ``Content-Type`` header values.

:func:`interpret` turns a raw header value such as
``"application/vnd.api+json; charset=UTF-8"`` into an
:class:`InterpretedContentType` carrying everything the response pipeline
needs to pick a codec:

* ``base_type`` -- the media type without parameters;
* ``charset`` -- explicit, or defaulted per RFC 2616 section 3.7.1
  (``iso-8859-1`` for ``text/*``, ``utf-8`` for everything else);
* ``is_vendor_specific`` / ``is_personal_type`` -- ``vnd.`` / ``prs.``
  subtype trees (informational only);
* ``parent_type`` -- the canonical type behind a structured-syntax suffix,
  e.g. ``application/json`` for ``application/vnd.api+json``.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from fluentreq.exceptions import UnsupportedMimeAlias
from fluentreq.mime import get_full_mime

TEXT_DEFAULT_CHARSET = "iso-8859-1"
DEFAULT_CHARSET = "utf-8"


class InterpretedContentType(BaseModel):
    """The parts of a ``Content-Type`` header value that drive codec choice.

    Invariant: ``parent_type == base_type`` unless ``base_type`` carries a
    ``+suffix`` that maps to a known MIME alias.
    """

    model_config = ConfigDict(frozen=True)

    raw_content_type: str = ""
    base_type: str = ""
    charset: str = DEFAULT_CHARSET
    is_vendor_specific: bool = False
    is_personal_type: bool = False
    parent_type: str = ""


def _parse_charset(params: list[str]) -> Optional[str]:
    if not params or "charset=" not in params[0].lower():
        return None
    _, value = params[0].split("=", 1)
    return value.strip()


def _parent_type(base_type: str) -> str:
    if "+" not in base_type:
        return base_type
    _, suffix = base_type.split("+", 1)
    try:
        return get_full_mime(suffix)
    except UnsupportedMimeAlias:
        return base_type


def interpret(raw_content_type: Optional[str]) -> InterpretedContentType:
    """Interpret a raw ``Content-Type`` header value.

    Args:
        raw_content_type: The header value, or ``None`` when the response
            carried no ``Content-Type``.

    Returns:
        The interpreted content type.  A missing or empty header gives an
        empty ``base_type`` and ``parent_type`` with a ``utf-8`` charset.
    """
    raw = raw_content_type or ""
    base_type, *params = raw.split(";")
    base_type = base_type.strip()

    charset = _parse_charset(params)
    if charset is None:
        charset = TEXT_DEFAULT_CHARSET if base_type.startswith("text/") else DEFAULT_CHARSET

    is_vendor = is_personal = False
    if "/" in base_type:
        _, sub_type = base_type.split("/", 1)
        is_vendor = sub_type.startswith("vnd.")
        is_personal = sub_type.startswith("prs.")

    return InterpretedContentType(
        raw_content_type=raw,
        base_type=base_type,
        charset=charset,
        is_vendor_specific=is_vendor,
        is_personal_type=is_personal,
        parent_type=_parent_type(base_type),
    )
