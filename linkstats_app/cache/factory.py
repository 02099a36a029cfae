"""
Builds the cache that sits in front of redirect lookups.

Only ``short_code -> original_url`` pairs are cached. When Redis cannot be
reached at startup the redirect path degrades to a per-process cache
rather than failing every request.
"""

from enum import Enum
from typing import Optional
import logging

import redis

from .strategies import UrlCacheStrategy, RedisUrlCache, InMemoryUrlCache, NullUrlCache
from linkstats_app.config import settings

logger = logging.getLogger(__name__)


class CacheBackend(Enum):
    """Available redirect cache backends"""
    REDIS = "redis"
    MEMORY = "memory"
    NULL = "null"


class CacheFactory:
    """
    Factory for the redirect lookup cache.

    Uses Singleton Pattern: every API worker shares one cache per process.
    """

    _instance: UrlCacheStrategy = None

    @classmethod
    def create(cls, backend: CacheBackend, redis_url: Optional[str] = None) -> UrlCacheStrategy:
        """
        Create or return the redirect cache.

        Args:
            backend: Cache backend from ``settings.cache_backend``
            redis_url: Overrides ``settings.redis_url`` for the Redis backend

        Returns:
            Singleton cache instance
        """
        if cls._instance is not None:
            return cls._instance

        if backend == CacheBackend.REDIS:
            cls._instance = cls._redirect_cache_on_redis(redis_url or settings.redis_url)
        elif backend == CacheBackend.MEMORY:
            cls._instance = InMemoryUrlCache()
            logger.info("Redirect lookups cached in process memory")
        elif backend == CacheBackend.NULL:
            cls._instance = NullUrlCache()
            logger.info("Redirect cache disabled; every redirect reads storage")
        else:
            raise ValueError(f"Unknown cache backend: {backend}")

        return cls._instance

    @staticmethod
    def _redirect_cache_on_redis(redis_url: str) -> UrlCacheStrategy:
        client = redis.from_url(redis_url, socket_connect_timeout=2, socket_timeout=2)
        try:
            client.ping()
        except redis.RedisError as e:
            logger.warning(
                "Redis at %s unreachable (%s); redirect lookups fall back to a per-process cache",
                redis_url, e,
            )
            return InMemoryUrlCache()

        logger.info("Redirect lookups cached in Redis (keys %s<short_code>)", RedisUrlCache.key_prefix)
        return RedisUrlCache(client)

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
