"""
skue: a small REST-over-HTTP CRUD toolkit.

- skue.interfaces: DatabasePersistor, MemoryCacher, Producer and Consumer.
- skue.models: Resource, the base model for persisted entities.
- skue.views: JSON and XML view layers with content negotiation.
- skue.cache: Redis memory cacher and the cache-aside accessor.
- skue.database: MongoDB persistence.
- skue.handlers: create/read/update/delete/list handlers mapping outcomes
  to HTTP status codes.
- skue.routing: registration of a resource's routes on a FastAPI app.
"""

from .interfaces import Consumer, DatabasePersistor, MemoryCacher, Producer
from .models import Resource
from .views import ViewLayer, new_json_view, new_xml_view

__version__ = "1.0.0"

__all__ = [
    "Consumer",
    "DatabasePersistor",
    "MemoryCacher",
    "Producer",
    "Resource",
    "ViewLayer",
    "new_json_view",
    "new_xml_view",
]
