"""
Click events and analytics report schemas.
"""

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, Field, field_serializer

from linkstats_app.schemas.url import CamelModel
from linkstats_app.timeutils import to_iso, utcnow


class Granularity(str, Enum):
    """Timeline bucket width"""
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"


class ClickEvent(BaseModel):
    """
    One recorded visit through a short code.

    Built by the click recorder on the redirect path from request headers,
    written once, and only read afterwards by the aggregation engine.
    """

    short_code: str = Field(..., description="The short code that was accessed")
    timestamp: datetime = Field(default_factory=utcnow, description="When the click occurred")

    # Raw request metadata
    user_agent: str = Field("", description="User agent string")
    referrer: str = Field("Direct", description="HTTP referer, or Direct")

    # Derived classification
    browser: str = "Other"
    browser_version: str = ""
    os: str = "Other"
    device_type: str = Field("Desktop", description="Desktop, Mobile or Tablet")
    referrer_domain: str = "Direct"

    # Edge-injected geo hints
    country: str = Field("Unknown", description="Country code (e.g., US, GB)")
    region: str = ""
    city: str = ""

    model_config = {
        "json_schema_extra": {
            "example": {
                "short_code": "abc123",
                "timestamp": "2025-10-29T10:30:00.000Z",
                "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/120.0.0.0 Safari/537.36",
                "referrer": "https://twitter.com/some/post",
                "browser": "Chrome",
                "browser_version": "120",
                "os": "Windows",
                "device_type": "Desktop",
                "referrer_domain": "twitter.com",
                "country": "US",
                "region": "CA",
                "city": "San Francisco",
            }
        }
    }

    @field_serializer("timestamp")
    def serialize_timestamp(self, value: datetime) -> str:
        return to_iso(value)


class AggregatedBucket(BaseModel):
    name: str
    clicks: int
    percentage: float


class DeviceBucket(BaseModel):
    type: str
    clicks: int
    percentage: float


class CountryBucket(BaseModel):
    code: str
    name: str
    clicks: int
    percentage: float


class ReferrerBucket(BaseModel):
    domain: str
    clicks: int
    percentage: float


class CityBucket(BaseModel):
    city: str
    country: str
    clicks: int


class TimelinePoint(BaseModel):
    date: str
    clicks: int


class Period(BaseModel):
    start: datetime = Field(..., alias="from")
    end: datetime = Field(..., alias="to")

    model_config = {"populate_by_name": True}

    @field_serializer("start", "end")
    def serialize_bounds(self, value: datetime) -> str:
        return to_iso(value)


class TopUrl(CamelModel):
    short_code: str
    original_url: str
    clicks: int


class UrlAnalytics(CamelModel):
    short_code: str
    original_url: str
    total_clicks: int
    unique_countries: int
    period: Period
    timeline: List[TimelinePoint]
    browsers: List[AggregatedBucket]
    devices: List[DeviceBucket]
    countries: List[CountryBucket]
    referrers: List[ReferrerBucket]
    top_cities: List[CityBucket]


class OverviewAnalytics(CamelModel):
    total_clicks: int
    total_urls: int
    period: Period
    timeline: List[TimelinePoint]
    top_urls: List[TopUrl]
    browsers: List[AggregatedBucket]
    devices: List[DeviceBucket]
    countries: List[CountryBucket]
