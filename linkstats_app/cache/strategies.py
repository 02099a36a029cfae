"""
Cache strategies using Strategy Pattern.
Allows switching between different cache backends (Redis, In-Memory, Null).

The cache only holds ``short_code -> original_url`` for the redirect path
(cache-aside). Click counts are never cached: they always live in storage.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict
import logging

logger = logging.getLogger(__name__)


class UrlCacheStrategy(ABC):
    """
    Abstract base class for redirect target caches.

    All methods are async because cache operations involve I/O (network for Redis).
    A failing cache must never fail a request: errors are logged and
    reported as a miss.
    """

    key_prefix = "url:"

    def key_for(self, short_code: str) -> str:
        return f"{self.key_prefix}{short_code}"

    @abstractmethod
    async def get_original_url(self, short_code: str) -> Optional[str]:
        """
        Get the cached redirect target.

        Returns:
            Original URL or None on a miss
        """
        pass

    @abstractmethod
    async def set_original_url(self, short_code: str, original_url: str, ttl: int = 3600) -> bool:
        """
        Cache the redirect target with TTL (Time To Live) in seconds.

        Returns:
            True if successful, False otherwise
        """
        pass

    @abstractmethod
    async def invalidate(self, short_code: str) -> bool:
        """
        Drop the cached redirect target.

        Returns:
            True if an entry was removed
        """
        pass


class RedisUrlCache(UrlCacheStrategy):
    """
    Redis cache implementation.

    Production-ready cache with:
    - Distributed caching (every API instance shares the cache)
    - TTL support via SETEX

    Used in production environments.
    """

    def __init__(self, redis_client):
        """
        Initialize Redis cache.

        Args:
            redis_client: Redis client instance (redis.Redis)
        """
        self.redis = redis_client

    async def get_original_url(self, short_code: str) -> Optional[str]:
        try:
            value = self.redis.get(self.key_for(short_code))
            return value.decode("utf-8") if value else None
        except Exception as e:
            logger.warning("Redis get failed for %s: %s", short_code, e)
            return None

    async def set_original_url(self, short_code: str, original_url: str, ttl: int = 3600) -> bool:
        try:
            return bool(self.redis.setex(self.key_for(short_code), ttl, original_url))
        except Exception as e:
            logger.warning("Redis set failed for %s: %s", short_code, e)
            return False

    async def invalidate(self, short_code: str) -> bool:
        try:
            return bool(self.redis.delete(self.key_for(short_code)))
        except Exception as e:
            logger.warning("Redis delete failed for %s: %s", short_code, e)
            return False


class InMemoryUrlCache(UrlCacheStrategy):
    """
    In-memory cache implementation using Python dict.

    Pros:
    - Very fast (no network overhead)
    - Good for development and testing

    Cons:
    - Not shared between processes
    - No TTL enforcement

    Note: Async for interface consistency, but operations are instant.
    """

    def __init__(self):
        self._cache: Dict[str, str] = {}

    async def get_original_url(self, short_code: str) -> Optional[str]:
        return self._cache.get(self.key_for(short_code))

    async def set_original_url(self, short_code: str, original_url: str, ttl: int = 3600) -> bool:
        # TTL is ignored in this simple implementation
        self._cache[self.key_for(short_code)] = original_url
        return True

    async def invalidate(self, short_code: str) -> bool:
        return self._cache.pop(self.key_for(short_code), None) is not None


class NullUrlCache(UrlCacheStrategy):
    """
    Null Object Pattern - cache that does nothing.

    Every lookup is a miss, so every redirect reads storage.
    """

    async def get_original_url(self, short_code: str) -> Optional[str]:
        return None

    async def set_original_url(self, short_code: str, original_url: str, ttl: int = 3600) -> bool:
        return True

    async def invalidate(self, short_code: str) -> bool:
        return False
