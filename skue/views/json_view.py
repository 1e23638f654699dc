"""
JSON producer and consumer.
"""

import json
import re
import uuid
from decimal import Decimal
from typing import Any

from ..constants import MIME_JSON
from ..interfaces import Consumer, Producer
from .negotiation import ViewLayer, to_primitive

# Decimals are written as quoted placeholders and unquoted after encoding,
# since the json module has no hook for emitting raw number text.
_DECIMAL_MARK = uuid.uuid4().hex
_DECIMAL_PLACEHOLDER = re.compile(f'"{_DECIMAL_MARK}([-+0-9.Ee]+){_DECIMAL_MARK}"')


class DecimalEncoder(json.JSONEncoder):
    """Encodes finite Decimals as exact JSON numbers; other unknown values as strings."""

    def default(self, o):
        if isinstance(o, Decimal) and o.is_finite():
            return f"{_DECIMAL_MARK}{o}{_DECIMAL_MARK}"
        return str(o)


def dumps(value: Any) -> str:
    """Pretty-print ``value`` with a one-space indent, keeping field order."""
    encoded = json.dumps(to_primitive(value), indent=1, ensure_ascii=False, cls=DecimalEncoder)
    return _DECIMAL_PLACEHOLDER.sub(r"\1", encoded)


def loads(data: Any) -> Any:
    """Parse JSON keeping numbers exact: ints stay ints, fractions become Decimal."""
    return json.loads(data, parse_float=Decimal)


class JSONProducer(Producer):
    mime_type = MIME_JSON

    def encode(self, value: Any) -> bytes:
        return dumps(value).encode("utf-8")


class JSONConsumer(Consumer):
    mime_type = MIME_JSON

    def decode(self, body: bytes) -> Any:
        if not body:
            raise ValueError("empty request body")
        return loads(body)


def new_json_view() -> ViewLayer:
    """Consume JSON and produce JSON content."""
    return ViewLayer(JSONProducer(), JSONConsumer())
