"""
Analytics reports over stored click events.

Events are range-queried per short code from storage and then aggregated
in process by ``linkstats_app.analytics.aggregation``.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from linkstats_app.analytics.aggregation import (
    aggregate_by_field,
    aggregate_timeline,
    top_cities,
    unique_countries,
)
from linkstats_app.analytics.countries import CountryLookup
from linkstats_app.config import settings
from linkstats_app.errors import NotFoundError
from linkstats_app.schemas.analytics import (
    ClickEvent,
    CountryBucket,
    DeviceBucket,
    Granularity,
    OverviewAnalytics,
    Period,
    ReferrerBucket,
    TopUrl,
    UrlAnalytics,
)
from linkstats_app.schemas.url import UrlRecord
from linkstats_app.storage.strategies import StorageStrategy
from linkstats_app.timeutils import ensure_utc, utcnow

logger = logging.getLogger(__name__)


class AnalyticsService:
    """
    Builds the single-URL and overview analytics reports.

    Args:
        storage: Storage strategy to read link records and click events from
        countries: Country code -> name lookup
        top_n: Size of truncated breakdowns (countries, referrers, cities)
        query_concurrency: Max parallel event queries for the overview
    """

    def __init__(
        self,
        storage: StorageStrategy,
        countries: Optional[CountryLookup] = None,
        top_n: int = None,
        query_concurrency: int = None
    ):
        self.storage = storage
        self.countries = countries or CountryLookup()
        self.top_n = top_n or settings.analytics_top_n
        self.query_concurrency = query_concurrency or settings.analytics_query_concurrency

    def resolve_period(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> Tuple[datetime, datetime]:
        """Default window is the last ``analytics_default_days`` days up to now"""
        now = utcnow()
        end = ensure_utc(end) if end else now
        start = ensure_utc(start) if start else now - timedelta(days=settings.analytics_default_days)
        return start, end

    async def url_report(
        self,
        short_code: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        granularity: Granularity = Granularity.DAY
    ) -> UrlAnalytics:
        """
        Analytics for one short code.

        Raises:
            NotFoundError: unknown short code
        """
        record = await self.storage.get_url(short_code)
        if not record:
            raise NotFoundError("URL not found")

        start, end = self.resolve_period(start, end)
        events = await self.storage.query_events(short_code, start, end)

        return UrlAnalytics(
            short_code=short_code,
            original_url=record.original_url,
            total_clicks=len(events),
            unique_countries=unique_countries(events),
            period=Period(start=start, end=end),
            timeline=aggregate_timeline(events, granularity),
            browsers=aggregate_by_field(events, "browser"),
            devices=self.device_buckets(events),
            countries=self.country_buckets(events)[:self.top_n],
            referrers=self.referrer_buckets(events)[:self.top_n],
            top_cities=top_cities(events, self.top_n),
        )

    async def overview_report(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        granularity: Granularity = Granularity.DAY,
        limit: Optional[int] = None
    ) -> OverviewAnalytics:
        """
        Analytics across every short code.

        Per-URL event queries are independent, so they run concurrently
        (bounded by ``query_concurrency``). The I/O backends run each query
        in a worker thread, so the event loop stays free meanwhile. Events
        are concatenated in the scan order of the URL records.
        """
        limit = limit or settings.analytics_default_limit
        start, end = self.resolve_period(start, end)

        urls = await self.storage.list_urls()
        per_url = await self._query_all(urls, start, end)

        all_events: List[ClickEvent] = []
        top_urls: List[TopUrl] = []
        for record, events in zip(urls, per_url):
            all_events.extend(events)
            if events:
                top_urls.append(TopUrl(
                    short_code=record.short_code,
                    original_url=record.original_url,
                    clicks=len(events),
                ))
        top_urls.sort(key=lambda url: -url.clicks)

        logger.debug("Overview over %d urls, %d events", len(urls), len(all_events))

        return OverviewAnalytics(
            total_clicks=len(all_events),
            total_urls=len(urls),
            period=Period(start=start, end=end),
            timeline=aggregate_timeline(all_events, granularity),
            top_urls=top_urls[:limit],
            browsers=aggregate_by_field(all_events, "browser"),
            devices=self.device_buckets(all_events)[:self.top_n],
            countries=self.country_buckets(all_events)[:self.top_n],
        )

    async def _query_all(
        self,
        urls: Sequence[UrlRecord],
        start: datetime,
        end: datetime
    ) -> List[List[ClickEvent]]:
        semaphore = asyncio.Semaphore(self.query_concurrency)

        async def query(short_code: str) -> List[ClickEvent]:
            async with semaphore:
                return await self.storage.query_events(short_code, start, end)

        return await asyncio.gather(*(query(record.short_code) for record in urls))

    def device_buckets(self, events: Sequence[ClickEvent]) -> List[DeviceBucket]:
        return [
            DeviceBucket(type=bucket.name, clicks=bucket.clicks, percentage=bucket.percentage)
            for bucket in aggregate_by_field(events, "device_type")
        ]

    def country_buckets(self, events: Sequence[ClickEvent]) -> List[CountryBucket]:
        return [
            CountryBucket(
                code=bucket.name,
                name=self.countries.name_for(bucket.name),
                clicks=bucket.clicks,
                percentage=bucket.percentage,
            )
            for bucket in aggregate_by_field(events, "country")
        ]

    def referrer_buckets(self, events: Sequence[ClickEvent]) -> List[ReferrerBucket]:
        return [
            ReferrerBucket(domain=bucket.name, clicks=bucket.clicks, percentage=bucket.percentage)
            for bucket in aggregate_by_field(events, "referrer_domain")
        ]
