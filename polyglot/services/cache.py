"""Text cache backends for resolved translations.

Provides a CacheBackend ABC with three implementations:
- RedisCacheBackend: shared across workers, used when REDIS_URL is set
- MemoryCacheBackend: in-process dict with TTL eviction (dev/tests)
- NullCacheBackend: caching disabled via TRANSLATION_CACHE_ENABLED

Cache failures never surface to callers: reads degrade to a miss and
writes/deletes to a no-op, both logged.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod

import redis

logger = logging.getLogger(__name__)

# Namespace prefix for all keys written to a shared Redis
KEY_PREFIX = "polyglot:"


class CacheBackend(ABC):
    """Get/set/delete string values with a TTL. Tracks hit/miss counts."""

    name = "abstract"

    def __init__(self):
        self._hits = 0
        self._misses = 0

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the cached string, or None if absent/expired."""

    @abstractmethod
    def set(self, key: str, value: str, ttl_seconds: int = 0) -> bool:
        """Store ``value``. A ttl of 0 means no expiry."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete ``key``. Returns True if it existed."""

    def _record(self, value):
        if value is None:
            self._misses += 1
        else:
            self._hits += 1
        return value

    def get_stats(self) -> dict:
        return {"backend": self.name, "hits": self._hits, "misses": self._misses}


class RedisCacheBackend(CacheBackend):
    """Redis-backed cache. Keys are namespaced with 'polyglot:'."""

    name = "redis"

    def __init__(self, redis_client):
        super().__init__()
        self.redis = redis_client

    def _prefixed(self, key: str) -> str:
        return f"{KEY_PREFIX}{key}"

    def get(self, key: str) -> str | None:
        try:
            return self._record(self.redis.get(self._prefixed(key)))
        except redis.RedisError as e:
            logger.error(f"Redis get error for {key}: {e}")
            return None

    def set(self, key: str, value: str, ttl_seconds: int = 0) -> bool:
        try:
            if ttl_seconds > 0:
                self.redis.setex(self._prefixed(key), ttl_seconds, value)
            else:
                self.redis.set(self._prefixed(key), value)
            return True
        except redis.RedisError as e:
            logger.error(f"Redis set error for {key}: {e}")
            return False

    def delete(self, key: str) -> bool:
        try:
            return bool(self.redis.delete(self._prefixed(key)))
        except redis.RedisError as e:
            logger.error(f"Redis delete error for {key}: {e}")
            return False


class MemoryCacheBackend(CacheBackend):
    """Thread-safe in-process cache with lazy TTL eviction."""

    name = "memory"

    def __init__(self):
        super().__init__()
        self._lock = threading.Lock()
        self._data: dict[str, tuple[str, float | None]] = {}

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return self._record(None)
            value, expires_at = entry
            if expires_at is not None and expires_at <= time.monotonic():
                del self._data[key]
                return self._record(None)
            return self._record(value)

    def set(self, key: str, value: str, ttl_seconds: int = 0) -> bool:
        expires_at = time.monotonic() + ttl_seconds if ttl_seconds > 0 else None
        with self._lock:
            self._data[key] = (value, expires_at)
        return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def clear(self) -> int:
        with self._lock:
            count = len(self._data)
            self._data.clear()
        return count

    def __len__(self):
        return len(self._data)


class NullCacheBackend(CacheBackend):
    """Cache that never stores anything."""

    name = "null"

    def get(self, key: str) -> str | None:
        return self._record(None)

    def set(self, key: str, value: str, ttl_seconds: int = 0) -> bool:
        return False

    def delete(self, key: str) -> bool:
        return False


def create_cache_backend(redis_url: str = "", enabled: bool = True) -> CacheBackend:
    """Pick a backend: Redis if reachable, memory otherwise, null if disabled."""
    if not enabled:
        logger.info("Translation cache disabled")
        return NullCacheBackend()

    if redis_url:
        try:
            client = redis.from_url(redis_url, socket_connect_timeout=5, decode_responses=True)
            client.ping()
            logger.info("Redis connected successfully")
            return RedisCacheBackend(client)
        except redis.RedisError as e:
            logger.error(f"Redis connection failed ({e}), using memory cache")
    else:
        logger.warning("REDIS_URL not set - translation cache is per-process only")

    return MemoryCacheBackend()
