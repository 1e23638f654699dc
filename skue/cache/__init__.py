"""
Cache package for skue.

Provides a Redis-backed memory cacher and the cache-aside accessor the
persistors use to shadow reads, writes and deletes.
"""

from .aside import CacheAside, cache_key
from .redis_cache import DEFAULT_TTL, RedisCacher

__all__ = ["CacheAside", "cache_key", "RedisCacher", "DEFAULT_TTL"]
