"""
FastAPI dependencies for dependency injection.

This module provides singleton instances of storage, cache, country lookup
and the click recorder that are injected into services and routes.

Pattern: Dependency Injection
- Loose coupling between components
- Easy to test (override get_storage / get_cache with in-memory versions)
- Flexible (swap implementations via config)
"""

from functools import lru_cache

from fastapi import Depends

from linkstats_app.analytics.countries import CountryLookup
from linkstats_app.cache.factory import CacheFactory, CacheBackend
from linkstats_app.cache.strategies import UrlCacheStrategy
from linkstats_app.services.analytics_service import AnalyticsService
from linkstats_app.services.click_recorder import ClickRecorder
from linkstats_app.services.url_service import URLService
from linkstats_app.storage.factory import StorageFactory, StorageBackend
from linkstats_app.storage.strategies import StorageStrategy
from linkstats_app.config import settings


@lru_cache()
def get_storage() -> StorageStrategy:
    """
    Get storage instance (singleton).

    Factory gets config from settings internally.
    @lru_cache ensures this is called only once.
    """
    backend = StorageBackend(settings.storage_backend)
    return StorageFactory.create(backend)


@lru_cache()
def get_cache() -> UrlCacheStrategy:
    """Get redirect cache instance (singleton)."""
    backend = CacheBackend(settings.cache_backend)
    return CacheFactory.create(backend)


@lru_cache()
def get_country_lookup() -> CountryLookup:
    return CountryLookup()


def get_click_recorder(storage: StorageStrategy = Depends(get_storage)) -> ClickRecorder:
    return ClickRecorder(storage=storage)


def get_url_service(
    storage: StorageStrategy = Depends(get_storage),
    cache: UrlCacheStrategy = Depends(get_cache)
) -> URLService:
    """
    Get URLService with all dependencies injected.

    Controller depends on service; service depends on infrastructure
    (storage, cache).
    """
    return URLService(storage=storage, cache=cache)


def get_analytics_service(
    storage: StorageStrategy = Depends(get_storage),
    countries: CountryLookup = Depends(get_country_lookup)
) -> AnalyticsService:
    return AnalyticsService(storage=storage, countries=countries)
