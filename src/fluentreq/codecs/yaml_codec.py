"""Codec for ``application/x-yaml``.

Not installed by default; register it explicitly::

    from fluentreq import mime, registry
    from fluentreq.codecs import YamlCodec

    registry.register(mime.YAML, YamlCodec())
"""

from __future__ import annotations

from typing import Any

import yaml

from fluentreq.codecs.base import Body, Codec, as_text
from fluentreq.exceptions import YamlParseError


class YamlCodec(Codec):
    """Parse and serialize YAML bodies with PyYAML's safe loader and dumper."""

    def parse(self, body: Body) -> Any:
        text = as_text(body)
        if not text:
            return None
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise YamlParseError(f"Unable to parse response as YAML: {exc}") from exc

    def serialize(self, payload: Any) -> str:
        return yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)
