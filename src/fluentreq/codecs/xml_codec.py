"""Codec for ``application/xml`` backed by :mod:`lxml`.

Parsing returns an :class:`lxml.etree._Element` tree.  Serialization walks
a Python value tree and renders it as an XML document:

* scalars become text nodes (booleans as ``TRUE`` / ``FALSE``);
* lists, tuples and mappings become an ``<array>`` element with one child
  per item, numeric keys rendered as ``child-N``;
* records become an element named after their type with one child per
  field.

A *record* is anything that enumerates its own fields explicitly: an
object with an ``xml_fields()`` method returning an ordered mapping of
field name to value, a dataclass instance, or a pydantic model.  Plain
objects are rejected rather than introspected.
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Mapping
from typing import Any, Optional

from lxml import etree

from fluentreq.codecs.base import Body, Codec, strip_bom
from fluentreq.exceptions import XmlParseError, XmlSerializeError

# Decimal and exponent forms only; "nan" and "inf" are names, not numbers.
_NUMERIC = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def _record_fields(value: Any) -> Optional[Mapping[str, Any]]:
    """Return the field mapping of a record, or ``None`` if *value* is not one."""
    xml_fields = getattr(value, "xml_fields", None)
    if callable(xml_fields):
        return xml_fields()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    model_fields = getattr(type(value), "model_fields", None)
    if isinstance(model_fields, Mapping):
        return {name: getattr(value, name) for name in model_fields}
    return None


def _is_numeric_key(key: Any) -> bool:
    if isinstance(key, bool):
        return False
    if isinstance(key, int):
        return True
    return bool(_NUMERIC.match(str(key).strip()))


class XmlCodec(Codec):
    """Parse and serialize XML bodies.

    Args:
        namespace: Default namespace URI.  Used by :meth:`find` and
            :meth:`findall` to qualify unprefixed path segments.
        parser_options: Keyword arguments for :class:`lxml.etree.XMLParser`
            (e.g. ``{"recover": True}`` or ``{"huge_tree": True}``).
            Entity resolution and network access are off unless enabled
            here.
    """

    def __init__(
        self,
        namespace: str = "",
        parser_options: Optional[dict[str, Any]] = None,
    ) -> None:
        self.namespace = namespace
        self.parser_options: dict[str, Any] = {
            "resolve_entities": False,
            "no_network": True,
            **(parser_options or {}),
        }

    # ------------------------------------------------------------------ #
    # Parsing
    # ------------------------------------------------------------------ #

    def parse(self, body: Body) -> Any:
        """Parse *body* into an element tree.

        Returns:
            The root element, or ``None`` for an empty body.

        Raises:
            XmlParseError: If the body is not well-formed XML.
        """
        body = strip_bom(body)
        if not body:
            return None
        options = dict(self.parser_options)
        if isinstance(body, str):
            # lxml refuses str input that carries an encoding declaration, and
            # the declared encoding no longer describes the re-encoded bytes.
            data = body.encode("utf-8")
            options["encoding"] = "utf-8"
        else:
            data = body

        parser = etree.XMLParser(**options)
        try:
            root = etree.fromstring(data, parser)
        except etree.XMLSyntaxError as exc:
            raise XmlParseError(f"Unable to parse response as XML: {exc}") from exc
        if root is None:
            raise XmlParseError("Unable to parse response as XML")
        return root

    def find(self, element: Any, path: str) -> Any:
        """Like ``element.find(path)`` with the default namespace applied."""
        return element.find(self._qualify(path))

    def findall(self, element: Any, path: str) -> list[Any]:
        """Like ``element.findall(path)`` with the default namespace applied."""
        return element.findall(self._qualify(path))

    def _qualify(self, path: str) -> str:
        if not self.namespace:
            return path
        segments = []
        for seg in path.split("/"):
            if seg and seg not in (".", "..", "*") and seg[0] not in "{@" and ":" not in seg:
                seg = f"{{{self.namespace}}}{seg}"
            segments.append(seg)
        return "/".join(segments)

    # ------------------------------------------------------------------ #
    # Serialization
    # ------------------------------------------------------------------ #

    def serialize(self, payload: Any) -> str:
        """Render *payload* as an XML document string.

        A record at the top level becomes the document element; any other
        value is wrapped in a ``<response>`` element.

        Raises:
            XmlSerializeError: If the tree holds a value that is neither a
                scalar, a container nor a record, or a key that is not a
                valid tag name.
        """
        try:
            fields = _record_fields(payload)
            if fields is not None:
                root = etree.Element(type(payload).__name__)
                self._append_fields(root, fields)
            else:
                root = etree.Element("response")
                self._append_value(root, payload)
        except ValueError as exc:
            raise XmlSerializeError(f"Unable to serialize payload as XML: {exc}") from exc

        return etree.tostring(root, xml_declaration=True, encoding="utf-8").decode("utf-8")

    def _append_value(self, node: Any, value: Any) -> None:
        fields = _record_fields(value)
        if fields is not None:
            obj = etree.SubElement(node, type(value).__name__)
            self._append_fields(obj, fields)
        elif isinstance(value, Mapping):
            self._append_items(etree.SubElement(node, "array"), value.items())
        elif isinstance(value, (list, tuple)):
            self._append_items(etree.SubElement(node, "array"), enumerate(value))
        elif isinstance(value, bool):
            node.text = "TRUE" if value else "FALSE"
        elif value is None:
            return
        elif isinstance(value, (str, int, float)):
            node.text = str(value)
        else:
            raise XmlSerializeError(
                f"Cannot serialize {type(value).__name__} as XML: "
                "define xml_fields() to list its fields"
            )

    def _append_items(self, parent: Any, items: Any) -> None:
        for key, item in items:
            tag = f"child-{key}" if _is_numeric_key(key) else str(key)
            self._append_value(etree.SubElement(parent, tag), item)

    def _append_fields(self, parent: Any, fields: Mapping[str, Any]) -> None:
        for name, item in fields.items():
            self._append_value(etree.SubElement(parent, name), item)

    def __repr__(self) -> str:
        return f"XmlCodec(namespace={self.namespace!r})"
