"""
Click event aggregation.

Pure functions over lists of ``ClickEvent``. The caller has already
filtered events to the requested time window; these functions only group,
count and order.
"""

import math
from datetime import timedelta
from typing import Dict, Iterable, List, Sequence, Tuple

from linkstats_app.schemas.analytics import (
    AggregatedBucket,
    CityBucket,
    ClickEvent,
    Granularity,
    TimelinePoint,
)
from linkstats_app.timeutils import ensure_utc

UNKNOWN = "Unknown"


def percentage(clicks: int, total: int) -> float:
    """Share of ``total`` rounded half-up to one decimal place; 0 for an empty total."""
    if total <= 0:
        return 0.0
    return math.floor(clicks / total * 1000 + 0.5) / 10


def count_by(values: Iterable[str]) -> Dict[str, int]:
    """Count occurrences, keeping first-seen order."""
    counts: Dict[str, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    return counts


def aggregate_by_field(events: Sequence[ClickEvent], field: str) -> List[AggregatedBucket]:
    """
    Group events by one attribute and compute clicks and percentages.

    Missing or empty values are grouped under ``Unknown``. The result is
    ordered by clicks, highest first; equal counts keep the order in which
    the value was first seen (``sorted`` is stable).
    """
    total = len(events)
    counts = count_by(getattr(event, field, None) or UNKNOWN for event in events)
    buckets = [
        AggregatedBucket(name=name, clicks=clicks, percentage=percentage(clicks, total))
        for name, clicks in counts.items()
    ]
    return sorted(buckets, key=lambda bucket: -bucket.clicks)


def bucket_key(event: ClickEvent, granularity: Granularity) -> str:
    timestamp = ensure_utc(event.timestamp)
    if granularity == Granularity.HOUR:
        return timestamp.strftime("%Y-%m-%dT%H:00:00.000Z")
    if granularity == Granularity.DAY:
        return timestamp.strftime("%Y-%m-%d")
    # Weeks start on Sunday; Monday is weekday() == 0
    start_of_week = timestamp - timedelta(days=(timestamp.weekday() + 1) % 7)
    return start_of_week.strftime("%Y-%m-%d")


def aggregate_timeline(
    events: Sequence[ClickEvent],
    granularity: Granularity = Granularity.DAY,
) -> List[TimelinePoint]:
    """Clicks per time bucket, ascending by bucket key."""
    granularity = Granularity(granularity)
    counts = count_by(bucket_key(event, granularity) for event in events)
    return [TimelinePoint(date=key, clicks=clicks) for key, clicks in sorted(counts.items())]


def top_cities(events: Sequence[ClickEvent], limit: int = 10) -> List[CityBucket]:
    """Most clicked (city, country) pairs; events without a city are ignored."""
    counts: Dict[Tuple[str, str], int] = count_by(
        (event.city, event.country) for event in events if event.city
    )
    cities = [
        CityBucket(city=city, country=country, clicks=clicks)
        for (city, country), clicks in counts.items()
    ]
    return sorted(cities, key=lambda bucket: -bucket.clicks)[:limit]


def unique_countries(events: Sequence[ClickEvent]) -> int:
    return len({event.country for event in events})
