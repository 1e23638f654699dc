"""
View layers for skue.

A view pairs a producer (response encoder) with a consumer (request body
decoder) for one MIME type. JSON and XML views are provided.
"""

from .json_view import JSONConsumer, JSONProducer, new_json_view
from .negotiation import ViewLayer, accepts, consume, produce, render, to_primitive
from .xml_view import XMLConsumer, XMLProducer, new_xml_view

__all__ = [
    "ViewLayer",
    "JSONProducer",
    "JSONConsumer",
    "XMLProducer",
    "XMLConsumer",
    "new_json_view",
    "new_xml_view",
    "accepts",
    "consume",
    "produce",
    "render",
    "to_primitive",
]
