"""
Click event recording for the redirect path.

The redirect handler builds the event synchronously (pure header parsing)
and hands ``record`` to FastAPI's background tasks, so the response goes
out before the event is written. A failed write is logged and dropped:
redirect latency never depends on analytics durability.
"""

import logging
from typing import Mapping, Optional
from urllib.parse import unquote

from linkstats_app.analytics.classifier import DIRECT, parse_user_agent, referrer_domain
from linkstats_app.config import settings
from linkstats_app.schemas.analytics import ClickEvent
from linkstats_app.storage.strategies import StorageStrategy
from linkstats_app.timeutils import utcnow

logger = logging.getLogger(__name__)


class ClickRecorder:
    """Classifies redirect requests and persists click events."""

    def __init__(
        self,
        storage: StorageStrategy,
        event_logger: Optional[logging.Logger] = None,
        country_header: str = None,
        region_header: str = None,
        city_header: str = None
    ):
        """
        Args:
            storage: Where click events are appended
            event_logger: Logger for swallowed write failures
            country_header/region_header/city_header: Edge-injected geo headers
        """
        self.storage = storage
        self.logger = event_logger or logger
        self.country_header = country_header or settings.geo_country_header
        self.region_header = region_header or settings.geo_region_header
        self.city_header = city_header or settings.geo_city_header

    def build_event(self, short_code: str, headers: Mapping[str, str]) -> ClickEvent:
        """
        Derive a click event from request headers.

        ``headers`` must be case-insensitive (Starlette's ``Headers`` is).
        """
        user_agent = headers.get("user-agent") or ""
        referrer = headers.get("referer") or DIRECT
        ua = parse_user_agent(user_agent)
        city = headers.get(self.city_header) or ""

        return ClickEvent(
            short_code=short_code,
            timestamp=utcnow(),
            user_agent=user_agent,
            browser=ua.browser,
            browser_version=ua.browser_version,
            os=ua.os,
            device_type=ua.device_type,
            referrer=referrer,
            referrer_domain=referrer_domain(referrer),
            country=headers.get(self.country_header) or "Unknown",
            region=headers.get(self.region_header) or "",
            city=unquote(city) if city else "",
        )

    async def record(self, event: ClickEvent) -> bool:
        """
        Persist one event; never raises.

        Returns:
            True if stored, False if the write failed (already logged)
        """
        try:
            await self.storage.put_event(event)
            return True
        except Exception:
            self.logger.exception("Analytics log failed for %s", event.short_code)
            return False
