from typing import List, Optional
import logging

from linkstats_app.cache.strategies import UrlCacheStrategy
from linkstats_app.config import settings
from linkstats_app.errors import NotFoundError, ValidationError
from linkstats_app.schemas.url import UrlRecord
from linkstats_app.services.short_code import CollisionPolicy, ShortCodeAllocator, is_valid_url
from linkstats_app.storage.strategies import StorageStrategy
from linkstats_app.timeutils import utcnow

logger = logging.getLogger(__name__)


class URLService:
    """
    URL Service with dependency injection for storage and cache.

    This follows the Dependency Injection pattern:
    - Storage and cache strategies are injected (not created internally)
    - Easy to test (inject in-memory storage)
    - Flexible (swap implementations without changing code)
    """

    def __init__(
        self,
        storage: StorageStrategy,
        cache: Optional[UrlCacheStrategy] = None,
        allocator: Optional[ShortCodeAllocator] = None
    ):
        """
        Initialize URL service with dependencies.

        Args:
            storage: Storage strategy for link records
            cache: Cache strategy for redirect lookups (optional)
            allocator: Short code allocator (defaults from settings)
        """
        self.storage = storage
        self.cache = cache
        self.allocator = allocator or ShortCodeAllocator(
            length=settings.short_code_length,
            max_attempts=settings.short_code_max_attempts,
            collision_policy=CollisionPolicy(settings.short_code_collision_policy),
        )

    async def create_short_url(self, url: Optional[str], alias: Optional[str] = None) -> UrlRecord:
        """Create a new short URL

        Note: Always creates a new short URL even if the long URL already exists.
        This allows tracking different sources/campaigns for the same destination URL.

        Raises:
            ValidationError: missing/invalid url or invalid alias
            ConflictError: alias already exists
        """
        if not url:
            raise ValidationError("URL is required")
        if not is_valid_url(url):
            raise ValidationError("Invalid URL format")

        short_code = await self.allocator.allocate(self.storage, alias)

        record = UrlRecord(
            short_code=short_code,
            original_url=url,
            click_count=0,
            created_at=utcnow(),
        )
        await self.storage.put_url(record)
        logger.info("Created short code %s", short_code)

        # Cache the mapping for fast redirects
        if self.cache:
            await self.cache.set_original_url(short_code, url, ttl=settings.cache_ttl)

        return record

    async def get_url_stats(self, short_code: str) -> UrlRecord:
        """Get the stored record (including click count) for a short code"""
        record = await self.storage.get_url(short_code)
        if not record:
            raise NotFoundError("Short URL not found")
        return record

    async def list_urls(self, limit: Optional[int] = None) -> List[UrlRecord]:
        """Newest first, capped at ``limit`` (settings.url_list_limit by default)"""
        limit = limit or settings.url_list_limit
        records = await self.storage.list_urls()
        records.sort(key=lambda record: record.created_at, reverse=True)
        return records[:limit]

    async def resolve_for_redirect(self, short_code: str) -> str:
        """
        Look up the redirect target and count the click.

        Flow:
        1. Check cache first
        2. If cache miss, read storage and populate cache
        3. Atomically increment click_count in storage (awaited: it is the
           externally visible click metric)

        Raises:
            NotFoundError: unknown short code
        """
        original_url = None
        if self.cache:
            original_url = await self.cache.get_original_url(short_code)

        if not original_url:
            record = await self.storage.get_url(short_code)
            if not record:
                raise NotFoundError("Short URL not found")
            original_url = record.original_url
            if self.cache:
                await self.cache.set_original_url(short_code, original_url, ttl=settings.cache_ttl)

        if not await self.storage.increment_click_count(short_code):
            # Deleted after it was cached
            if self.cache:
                await self.cache.invalidate(short_code)
            raise NotFoundError("Short URL not found")

        return original_url

    async def delete_url(self, short_code: str) -> None:
        """
        Delete a short URL and invalidate its cache entry.

        Click events are kept (retention is handled outside this service).
        """
        if not await self.storage.delete_url(short_code):
            raise NotFoundError("Short URL not found")

        if self.cache:
            await self.cache.invalidate(short_code)
        logger.info("Deleted short code %s", short_code)
