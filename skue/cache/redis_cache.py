"""
Redis implementation of the MemoryCacher capability.
"""

import json
from decimal import Decimal
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared.errors import CacheError
from shared.logging import get_logger

from ..interfaces import MemoryCacher

DEFAULT_TTL = 120


class RedisCacher(MemoryCacher):
    """
    Memory cacher backed by Redis (http://redis.io/).

    Values are stored as pretty-printed JSON strings and expire after
    ``default_ttl`` seconds unless the caller passes its own ttl. The
    connection pool is created on first use and shared by every call.
    """

    def __init__(self, redis_url: str, password: Optional[str] = None, default_ttl: int = DEFAULT_TTL):
        self.redis_url = redis_url
        self.password = password
        self.default_ttl = default_ttl
        self.logger = get_logger("skue.cache.redis")
        self.redis: Optional[redis.Redis] = None

    async def _get_redis(self) -> redis.Redis:
        """Get Redis connection."""
        if self.redis is None:
            self.redis = redis.from_url(
                self.redis_url,
                password=self.password or None,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                health_check_interval=30
            )
        return self.redis

    async def start(self):
        """Open the pool and check the server answers. The cache is optional, so failures only warn."""
        try:
            client = await self._get_redis()
            await client.ping()
            self.logger.info("Redis cache started", url=self.redis_url)
        except RedisError as e:
            self.logger.warning("Redis cache unavailable, serving from the store only", error=str(e))

    async def stop(self):
        """Stop the Redis cache."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self.logger.info("Redis cache stopped")

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        try:
            payload = json.dumps(value, indent=1, ensure_ascii=False, default=str)
        except (TypeError, ValueError) as e:
            raise CacheError(f"Value for {key} is not JSON serializable: {e}") from e

        try:
            client = await self._get_redis()
            await client.set(key, payload, ex=ttl or self.default_ttl)
        except RedisError as e:
            raise CacheError(f"SET {key} failed: {e}") from e

        self.logger.debug("Cached value", key=key, ttl=ttl or self.default_ttl)

    async def get(self, key: str) -> Optional[Any]:
        try:
            client = await self._get_redis()
            cached = await client.get(key)
        except RedisError as e:
            raise CacheError(f"GET {key} failed: {e}") from e

        if cached is None:
            return None

        try:
            return json.loads(cached, parse_float=Decimal)
        except ValueError as e:
            raise CacheError(f"Cached value for {key} is not valid JSON: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            client = await self._get_redis()
            await client.delete(key)
        except RedisError as e:
            raise CacheError(f"DEL {key} failed: {e}") from e

    async def health_check(self) -> bool:
        """Check Redis health."""
        try:
            client = await self._get_redis()
            await client.ping()
            return True
        except RedisError:
            return False
