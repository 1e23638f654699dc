"""
Cache-aside access to a backing store.

Reads try the cache before the store and populate it on a miss. Writes and
deletes go to the store first and only then touch the cache, so a cache
failure can never hide a store failure. The cache is advisory: its errors
are logged and counted, never raised.
"""

from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from shared.logging import get_logger

from ..interfaces import MemoryCacher
from .redis_cache import DEFAULT_TTL

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector

M = TypeVar("M", bound=BaseModel)


def cache_key(collection: str, resource_id: Any) -> str:
    """Key of a resource in the cache: ``<collection>-<id>``."""
    return f"{collection}-{resource_id}"


class CacheAside:
    """Wraps backing-store calls with an optional memory cacher."""

    def __init__(
        self,
        cacher: Optional[MemoryCacher],
        ttl: int = DEFAULT_TTL,
        *,
        metrics: Optional["MetricsCollector"] = None,
    ):
        self.cacher = cacher
        self.ttl = ttl
        self.metrics = metrics
        self.logger = get_logger("skue.cache.aside")

    @property
    def enabled(self) -> bool:
        return self.cacher is not None

    async def read(self, key: str, fetch: Callable[[], Awaitable[M]], model: Type[M]) -> M:
        """Return the cached value for ``key`` or fetch it from the store and cache it."""
        if self.cacher is not None:
            cached = await self._safe_get(key)
            if cached is not None:
                try:
                    value = model.model_validate(cached)
                    self._record_access(key, hit=True)
                    return value
                except ValidationError as e:
                    self.logger.warning("Discarding unreadable cache entry", key=key, error=str(e))
            self._record_access(key, hit=False)

        value = await fetch()
        await self._safe_set(key, value)
        return value

    async def write(self, key: str, write: Callable[[], Awaitable[M]]) -> M:
        """Run the store write, then refresh the cache with its result."""
        value = await write()
        await self._safe_set(key, value)
        return value

    async def invalidate(self, key: str, delete: Callable[[], Awaitable[Any]]) -> Any:
        """Run the store delete, then drop the cache entry."""
        result = await delete()
        await self._safe_delete(key)
        return result

    async def _safe_get(self, key: str) -> Optional[Any]:
        try:
            return await self.cacher.get(key)
        except Exception as e:
            self._record_error("get", key, e)
            return None

    async def _safe_set(self, key: str, value: Any) -> None:
        if self.cacher is None:
            return
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json", by_alias=True)
        try:
            await self.cacher.set(key, value, self.ttl)
        except Exception as e:
            self._record_error("set", key, e)

    async def _safe_delete(self, key: str) -> None:
        if self.cacher is None:
            return
        try:
            await self.cacher.delete(key)
        except Exception as e:
            self._record_error("delete", key, e)

    def _record_access(self, key: str, hit: bool):
        if self.metrics:
            self.metrics.record_cache_access(key.partition("-")[0], hit)

    def _record_error(self, operation: str, key: str, error: Exception):
        self.logger.warning("Cache operation failed", operation=operation, key=key, error=str(error))
        if self.metrics:
            self.metrics.record_cache_error(operation)
