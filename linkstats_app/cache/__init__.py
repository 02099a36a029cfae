"""
Cache module for redirect lookups.
Implements Strategy Pattern for flexible cache backends.
"""

from .strategies import UrlCacheStrategy, RedisUrlCache, InMemoryUrlCache, NullUrlCache
from .factory import CacheFactory, CacheBackend

__all__ = [
    "UrlCacheStrategy",
    "RedisUrlCache",
    "InMemoryUrlCache",
    "NullUrlCache",
    "CacheFactory",
    "CacheBackend",
]
