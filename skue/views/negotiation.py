"""
Content negotiation between HTTP requests and a view layer.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Type, TypeVar

from fastapi import Request, Response
from pydantic import BaseModel

from shared.errors import (
    DecodeError,
    NotAcceptableError,
    UnsupportedMediaTypeError,
)
from shared.logging import get_logger

from ..constants import HEADER_ACCEPT, HEADER_CONTENT_TYPE, MIME_ANY
from ..interfaces import Consumer, Producer

M = TypeVar("M", bound=BaseModel)

logger = get_logger("skue.views")


class ViewLayer:
    """A producer and a consumer encoding and decoding one MIME type."""

    def __init__(self, producer: Producer, consumer: Consumer):
        if producer.mime_type != consumer.mime_type:
            raise ValueError(
                f"Producer ({producer.mime_type}) and consumer ({consumer.mime_type}) disagree on MIME type"
            )
        self.producer = producer
        self.consumer = consumer

    @property
    def mime_type(self) -> str:
        return self.producer.mime_type


def to_primitive(value: Any) -> Any:
    """
    Reduce models and containers to plain values.

    Integral Decimals become ints; fractional ones stay Decimal so encoders
    can write them exactly.
    """
    if isinstance(value, BaseModel):
        return to_primitive(value.model_dump(by_alias=True))
    if isinstance(value, dict):
        return {str(k): to_primitive(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_primitive(v) for v in value]
    if isinstance(value, Decimal):
        if not value.is_finite():
            return float(value)
        if value == value.to_integral_value():
            return int(value)
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _quality(params: List[str]) -> float:
    for param in params:
        name, _, value = param.partition("=")
        if name.strip().lower() == "q":
            try:
                return float(value.strip())
            except ValueError:
                return 0.0
    return 1.0


def accepts(accept: Optional[str], mime_type: str) -> bool:
    """
    True when an Accept header admits ``mime_type``. A missing header admits anything.

    The most specific matching range decides, and a range with ``q=0`` refuses.
    """
    if not accept or not accept.strip():
        return True

    major = mime_type.split("/")[0]
    ranks = {mime_type: 3, f"{major}/*": 2, MIME_ANY: 1}
    best_rank, best_quality = 0, 0.0
    for part in accept.split(","):
        media, *params = part.split(";")
        rank = ranks.get(media.strip().lower(), 0)
        if rank > best_rank:
            best_rank, best_quality = rank, _quality(params)
    return best_quality > 0


async def consume(
    view: ViewLayer,
    request: Request,
    model: Type[M],
    overrides: Optional[Dict[str, Any]] = None,
) -> M:
    """Decode the request body into ``model``, with ``overrides`` replacing decoded fields."""
    content_type = request.headers.get(HEADER_CONTENT_TYPE, "")
    if view.consumer.mime_type not in content_type.lower():
        raise UnsupportedMediaTypeError(content_type)

    body = await request.body()
    try:
        data = view.consumer.decode(body)
        if overrides and isinstance(data, dict):
            data = {**data, **overrides}
        return model.model_validate(data)
    except ValueError as e:
        raise DecodeError(f"Failed reading from request: {e}") from e


def render(producer: Producer, status_code: int, value: Any) -> Response:
    """Encode ``value`` with ``producer`` without looking at the request."""
    try:
        content = producer.encode(value)
    except (TypeError, ValueError) as e:
        logger.error("Failed encoding response", mime_type=producer.mime_type, error=str(e))
        return Response(content=str(e), status_code=500, media_type="text/plain")

    return Response(content=content, status_code=status_code, media_type=producer.mime_type)


def produce(view: ViewLayer, request: Request, status_code: int, value: Any) -> Response:
    """Encode ``value`` for the client, honouring its Accept header."""
    accept = request.headers.get(HEADER_ACCEPT)
    if not accepts(accept, view.producer.mime_type):
        raise NotAcceptableError(view.producer.mime_type, accept)
    return render(view.producer, status_code, value)

