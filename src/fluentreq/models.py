"""Pydantic models for fluentreq configuration.

The models fall into two groups:

**Policy enums** -- :class:`SerializeMode`, the three-way payload
serialization policy used by
:class:`~fluentreq.client.serializer.PayloadSerializer`.

**Configuration models** -- loaded from ``fluentreq.json`` /
``fluentreq.yaml`` by :func:`~fluentreq.config.load_config`:
:class:`RequestDefaults`, :class:`CodecSettings` and the top-level
:class:`ClientConfig`.

All models use Pydantic v2.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class SerializeMode(str, enum.Enum):
    """When to run an outgoing payload through a codec.

    * ``NEVER`` -- send the payload exactly as given.
    * ``ALWAYS`` -- serialize every non-empty payload, scalars included.
    * ``SMART`` -- serialize containers and objects but send scalars
      (``str``, ``bytes``, numbers, booleans) unmodified, on the assumption
      that they are already serialized.  This is the default.
    """

    NEVER = "never"
    ALWAYS = "always"
    SMART = "smart"


# --- Configuration ---


class RequestDefaults(BaseModel):
    """Defaults applied to every new :class:`~fluentreq.client.request.Request`.

    Example::

        RequestDefaults(timeout=10, mime="json", follow_redirects=True)
    """

    timeout: Optional[float] = Field(
        default=None, description="Request timeout in seconds; None leaves it to the transport"
    )
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")
    follow_redirects: bool = Field(default=False, description="Follow 3xx redirects")
    max_redirects: int = Field(default=25, description="Redirect limit when following")
    auto_parse: bool = Field(default=True, description="Parse response bodies by content type")
    serialize_mode: SerializeMode = Field(
        default=SerializeMode.SMART, description="Payload serialization policy"
    )
    mime: Optional[str] = Field(
        default=None, description="Default content and expected type (alias or full MIME)"
    )
    headers: dict[str, str] = Field(default_factory=dict, description="Headers sent with every request")


class CodecSettings(BaseModel):
    """Construction options for the built-in codecs.

    Codecs built from these settings are registered before the library
    defaults, so they take precedence over them.
    """

    json_decode_as_dict: bool = Field(
        default=True, description="Decode JSON objects as dicts (False: attribute access)"
    )
    xml_namespace: str = Field(default="", description="Default XML namespace URI")
    xml_parser_options: dict[str, Any] = Field(
        default_factory=dict, description="Keyword arguments for lxml.etree.XMLParser"
    )
    csv_as_records: bool = Field(
        default=False, description="Parse CSV into dicts keyed by the header row"
    )
    enable_yaml: bool = Field(default=False, description="Register the YAML codec")


class ClientConfig(BaseModel):
    """Top-level library configuration."""

    request: RequestDefaults = Field(default_factory=RequestDefaults)
    codecs: CodecSettings = Field(default_factory=CodecSettings)
