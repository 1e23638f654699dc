"""
XML producer and consumer.

Models encode under their class name with one child element per field
(using the field's wire alias). Sequences carry ``type="list"`` so that a
one-item or empty list decodes back to a list.
"""

from typing import Any, Dict
from xml.etree.ElementTree import Element, ParseError, indent, tostring

from defusedxml.ElementTree import fromstring
from pydantic import BaseModel

from ..constants import MIME_XML
from ..interfaces import Consumer, Producer
from .negotiation import ViewLayer, to_primitive

LIST_TAG = "List"
ITEM_TAG = "Item"
ROOT_TAG = "Response"


def _tag_for(value: Any, default: str) -> str:
    if isinstance(value, BaseModel):
        return type(value).__name__
    return default


def _build(tag: str, value: Any) -> Element:
    element = Element(tag)

    if isinstance(value, BaseModel):
        for name, field in type(value).model_fields.items():
            element.append(_build(field.alias or name, getattr(value, name)))
    elif isinstance(value, dict):
        for key, item in value.items():
            element.append(_build(str(key), item))
    elif isinstance(value, (list, tuple)):
        element.set("type", "list")
        for item in value:
            element.append(_build(_tag_for(item, ITEM_TAG), item))
    elif isinstance(value, bool):
        element.text = "true" if value else "false"
    elif value is not None:
        element.text = str(to_primitive(value))

    return element


def _parse(element: Element) -> Any:
    children = list(element)

    if element.get("type") == "list":
        return [_parse(child) for child in children]
    if not children:
        return element.text or ""

    grouped: Dict[str, list] = {}
    for child in children:
        grouped.setdefault(child.tag, []).append(_parse(child))
    return {tag: values[0] if len(values) == 1 else values for tag, values in grouped.items()}


class XMLProducer(Producer):
    mime_type = MIME_XML

    def encode(self, value: Any) -> bytes:
        if isinstance(value, (list, tuple)):
            root = _build(LIST_TAG, value)
        else:
            root = _build(_tag_for(value, ROOT_TAG), value)
        indent(root, space=" ")
        return tostring(root, encoding="utf-8", xml_declaration=True)


class XMLConsumer(Consumer):
    mime_type = MIME_XML

    def decode(self, body: bytes) -> Any:
        if not body:
            raise ValueError("empty request body")
        try:
            return _parse(fromstring(body))
        except ParseError as e:
            raise ValueError(f"malformed XML: {e}") from e


def new_xml_view() -> ViewLayer:
    """Consume XML and produce XML content."""
    return ViewLayer(XMLProducer(), XMLConsumer())
