"""
Tests for the analytics reports and endpoints.
"""
import asyncio
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from linkstats_app.analytics.countries import CountryLookup
from linkstats_app.schemas.analytics import Granularity
from linkstats_app.schemas.url import UrlRecord
from linkstats_app.services.analytics_service import AnalyticsService
from linkstats_app.storage.strategies import InMemoryStorage
from conftest import CHROME_UA, IPHONE_UA, make_event

WINDOW = {"from": "2024-01-01T00:00:00Z", "to": "2024-01-31T23:59:59Z"}


def seed(storage, short_code, original_url, events):
    asyncio.run(storage.put_url(UrlRecord(short_code=short_code, original_url=original_url)))
    for event in events:
        asyncio.run(storage.put_event(event))


class TestUrlAnalyticsEndpoint:
    """Test GET /analytics/{short_code}"""

    def test_report_after_redirects(self, client: TestClient):
        """Redirects produce classified events that show up in the report"""
        code = client.post("/shorten", json={"url": "https://example.com"}).json()["shortCode"]
        client.get(f"/{code}", headers={
            "User-Agent": CHROME_UA,
            "Referer": "https://www.google.com/search?q=x",
            "CloudFront-Viewer-Country": "DE",
            "CloudFront-Viewer-City": "Frankfurt%20am%20Main",
        }, follow_redirects=False)
        client.get(f"/{code}", headers={"User-Agent": IPHONE_UA}, follow_redirects=False)

        response = client.get(f"/analytics/{code}")
        assert response.status_code == 200

        data = response.json()
        assert data["shortCode"] == code
        assert data["originalUrl"] == "https://example.com"
        assert data["totalClicks"] == 2
        assert data["uniqueCountries"] == 2
        assert {b["name"] for b in data["browsers"]} == {"Chrome", "Safari"}
        assert {d["type"] for d in data["devices"]} == {"Desktop", "Mobile"}
        assert {(r["domain"], r["clicks"]) for r in data["referrers"]} == {
            ("www.google.com", 1), ("Direct", 1),
        }
        assert {"code": "DE", "name": "Germany", "clicks": 1, "percentage": 50.0} in data["countries"]
        assert data["topCities"] == [{"city": "Frankfurt am Main", "country": "DE", "clicks": 1}]
        assert sum(p["clicks"] for p in data["timeline"]) == 2
        assert set(data["period"]) == {"from", "to"}

    def test_window_and_granularity(self, client: TestClient, storage):
        seed(storage, "abc123", "https://example.com", [
            make_event(timestamp="2024-01-15T10:05:00Z"),
            make_event(timestamp="2024-01-15T10:45:00Z"),
            make_event(timestamp="2024-02-15T10:00:00Z"),  # outside window
        ])

        response = client.get("/analytics/abc123", params={**WINDOW, "granularity": "hour"})

        data = response.json()
        assert data["totalClicks"] == 2
        assert data["timeline"] == [{"date": "2024-01-15T10:00:00.000Z", "clicks": 2}]
        assert data["period"] == {"from": "2024-01-01T00:00:00.000Z", "to": "2024-01-31T23:59:59.000Z"}

    def test_unknown_short_code(self, client: TestClient):
        response = client.get("/analytics/missing")
        assert response.status_code == 404
        assert response.json()["error"] == "URL not found"

    def test_invalid_granularity(self, client: TestClient, storage):
        seed(storage, "abc123", "https://example.com", [])
        response = client.get("/analytics/abc123", params={"granularity": "month"})
        assert response.status_code == 400

    def test_no_events(self, client: TestClient, storage):
        seed(storage, "abc123", "https://example.com", [])

        data = client.get("/analytics/abc123").json()

        assert data["totalClicks"] == 0
        assert data["uniqueCountries"] == 0
        assert data["timeline"] == []
        assert data["browsers"] == []
        assert data["topCities"] == []


class TestOverviewEndpoint:
    """Test GET /analytics/overview"""

    def test_overview_empty(self, client: TestClient):
        response = client.get("/analytics/overview")
        assert response.status_code == 200

        data = response.json()
        assert data["totalClicks"] == 0
        assert data["totalUrls"] == 0
        assert data["timeline"] == []
        assert data["browsers"] == []
        assert data["topUrls"] == []

    def test_overview_combines_urls(self, client: TestClient, storage):
        seed(storage, "popular", "https://popular.example.com", [
            make_event("popular", browser="Chrome", country="US"),
            make_event("popular", browser="Chrome", country="US"),
            make_event("popular", browser="Firefox", country="FR"),
        ])
        seed(storage, "quiet", "https://quiet.example.com", [
            make_event("quiet", browser="Safari", country="US"),
        ])
        seed(storage, "unused", "https://unused.example.com", [])

        data = client.get("/analytics/overview", params=WINDOW).json()

        assert data["totalClicks"] == 4
        assert data["totalUrls"] == 3
        assert data["topUrls"] == [
            {"shortCode": "popular", "originalUrl": "https://popular.example.com", "clicks": 3},
            {"shortCode": "quiet", "originalUrl": "https://quiet.example.com", "clicks": 1},
        ]
        assert data["browsers"][0] == {"name": "Chrome", "clicks": 2, "percentage": 50.0}
        assert data["countries"][0]["code"] == "US"
        assert data["countries"][0]["name"] == "United States"
        assert data["countries"][0]["clicks"] == 3
        assert data["timeline"] == [{"date": "2024-01-15", "clicks": 4}]

    def test_overview_limit(self, client: TestClient, storage):
        for i in range(3):
            seed(storage, f"code{i}", "https://example.com", [make_event(f"code{i}")])

        data = client.get("/analytics/overview", params={**WINDOW, "limit": 2}).json()

        assert len(data["topUrls"]) == 2
        assert data["totalUrls"] == 3


class TestAnalyticsService:
    """Test the report builder directly"""

    def test_default_window_is_last_seven_days(self):
        service = AnalyticsService(InMemoryStorage())

        start, end = service.resolve_period()

        assert end - start == timedelta(days=7)
        assert end.tzinfo is not None

    def test_recent_events_in_default_window(self):
        storage = InMemoryStorage()
        now = datetime.now(timezone.utc)
        seed(storage, "abc123", "https://example.com", [
            make_event(timestamp=now - timedelta(days=1)),
            make_event(timestamp=now - timedelta(days=30)),
        ])

        report = asyncio.run(AnalyticsService(storage).url_report("abc123"))

        assert report.total_clicks == 1

    def test_country_lookup_fallback(self):
        storage = InMemoryStorage()
        seed(storage, "abc123", "https://example.com", [make_event(country="ZZ")])
        service = AnalyticsService(storage, countries=CountryLookup({"US": "United States"}))

        report = asyncio.run(service.url_report(
            "abc123",
            datetime(2024, 1, 1, tzinfo=timezone.utc),
            datetime(2024, 2, 1, tzinfo=timezone.utc),
            Granularity.WEEK,
        ))

        assert report.countries[0].code == "ZZ"
        assert report.countries[0].name == "ZZ"
        assert report.timeline[0].date == "2024-01-14"

    def test_top_n_truncation(self):
        storage = InMemoryStorage()
        seed(storage, "abc123", "https://example.com", [
            make_event(referrer_domain=f"site{i}.com") for i in range(12)
        ])
        service = AnalyticsService(storage, top_n=10)

        report = asyncio.run(service.url_report(
            "abc123",
            datetime(2024, 1, 1, tzinfo=timezone.utc),
            datetime(2024, 2, 1, tzinfo=timezone.utc),
        ))

        assert len(report.referrers) == 10
        assert report.total_clicks == 12

    def test_overview_queries_overlap_within_bound(self):
        storage = SlowQueryStorage()
        for i in range(6):
            seed(storage, f"code{i}", "https://example.com", [make_event(f"code{i}")])
        service = AnalyticsService(storage, query_concurrency=3)

        report = asyncio.run(service.overview_report(
            datetime(2024, 1, 1, tzinfo=timezone.utc),
            datetime(2024, 2, 1, tzinfo=timezone.utc),
        ))

        assert report.total_clicks == 6
        assert storage.max_in_flight == 3


class SlowQueryStorage(InMemoryStorage):
    """Tracks how many event queries are in flight at once"""

    def __init__(self):
        super().__init__()
        self.in_flight = 0
        self.max_in_flight = 0

    async def query_events(self, short_code, start, end):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0.01)
        self.in_flight -= 1
        return await super().query_events(short_code, start, end)
