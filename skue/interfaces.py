"""
Capabilities the skue handlers are written against.

A service plugs in concrete implementations: a persistor per resource type
(see ``skue.database``), an optional memory cacher (see ``skue.cache``) and a
view layer pairing a producer with a consumer (see ``skue.views``).
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, List, Optional, TypeVar

from .models import Resource

T = TypeVar("T", bound=Resource)


class MemoryCacher(ABC):
    """
    A memory caching system used to speed up data driven services by keeping
    values in RAM, e.g. Memcached or Redis.

    Values are JSON-compatible; ``get`` returns ``None`` on a miss.
    """

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        ...

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        ...


class DatabasePersistor(ABC, Generic[T]):
    """
    CRUD capability over one resource type.

    ``fetch`` and ``update`` raise ``NotFoundError`` when the id is unknown;
    driver failures surface as ``StoreError``.
    """

    model: type

    @abstractmethod
    async def create(self, resource: T) -> T:
        ...

    @abstractmethod
    async def fetch(self, resource_id: str) -> T:
        ...

    @abstractmethod
    async def update(self, resource: T, resource_id: str) -> T:
        ...

    @abstractmethod
    async def remove(self, resource_id: str) -> None:
        ...

    @abstractmethod
    async def list(self, limit: int, skip: int = 0) -> List[T]:
        ...


class Producer(ABC):
    """Encodes response values in one MIME type."""

    mime_type: str

    @abstractmethod
    def encode(self, value: Any) -> bytes:
        ...


class Consumer(ABC):
    """Decodes request bodies in one MIME type."""

    mime_type: str

    @abstractmethod
    def decode(self, body: bytes) -> Any:
        ...
