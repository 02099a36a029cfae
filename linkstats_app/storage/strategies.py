"""
Storage strategies using Strategy Pattern.

Allows switching between different stores for link records and click events:
- In-memory: Tests and local experiments
- SQLAlchemy: SQLite for development, PostgreSQL in production
- DynamoDB: Managed document store (partition key + sort key range queries)
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional
import asyncio
import threading

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from linkstats_app.errors import StorageError
from linkstats_app.models import URL, Click
from linkstats_app.schemas.analytics import ClickEvent
from linkstats_app.schemas.url import UrlRecord
from linkstats_app.timeutils import ensure_utc, parse_iso, to_iso


class StorageStrategy(ABC):
    """
    Abstract base class for storage strategies.

    This interface is the storage port the services depend on. Link records
    are looked up by short code; click events are appended and read back by
    (short code, timestamp range).

    All methods are async because storage operations involve I/O.
    Backends raise ``StorageError`` when the underlying store fails.
    """

    @abstractmethod
    async def get_url(self, short_code: str) -> Optional[UrlRecord]:
        """Get a link record or None if it does not exist"""
        pass

    @abstractmethod
    async def put_url(self, record: UrlRecord) -> None:
        """Insert or replace a link record"""
        pass

    @abstractmethod
    async def increment_click_count(self, short_code: str) -> bool:
        """
        Atomically add one to ``click_count``.

        Returns:
            True if the record exists and was updated, False otherwise
        """
        pass

    @abstractmethod
    async def delete_url(self, short_code: str) -> bool:
        """
        Delete a link record.

        Returns:
            True if deleted, False if it didn't exist
        """
        pass

    @abstractmethod
    async def list_urls(self) -> List[UrlRecord]:
        """Return every link record (unordered scan)"""
        pass

    @abstractmethod
    async def put_event(self, event: ClickEvent) -> None:
        """Append one click event"""
        pass

    @abstractmethod
    async def query_events(
        self,
        short_code: str,
        start: datetime,
        end: datetime
    ) -> List[ClickEvent]:
        """
        Get click events for one short code with ``start <= timestamp <= end``.

        Returns:
            Events in ascending timestamp order
        """
        pass


class InMemoryStorage(StorageStrategy):
    """
    In-memory storage using Python dicts.

    Pros:
    - Very fast (no I/O)
    - No external services
    - Good for development and testing

    Cons:
    - Lost on restart
    - Not shared between processes

    Note: Async for interface consistency, but operations are instant.
    """

    def __init__(self):
        self._urls: Dict[str, UrlRecord] = {}
        self._events: Dict[str, List[ClickEvent]] = {}
        self._lock = threading.Lock()

    async def get_url(self, short_code: str) -> Optional[UrlRecord]:
        record = self._urls.get(short_code)
        return record.model_copy() if record else None

    async def put_url(self, record: UrlRecord) -> None:
        self._urls[record.short_code] = record.model_copy()

    async def increment_click_count(self, short_code: str) -> bool:
        with self._lock:
            record = self._urls.get(short_code)
            if record is None:
                return False
            record.click_count += 1
            return True

    async def delete_url(self, short_code: str) -> bool:
        return self._urls.pop(short_code, None) is not None

    async def list_urls(self) -> List[UrlRecord]:
        return [record.model_copy() for record in self._urls.values()]

    async def put_event(self, event: ClickEvent) -> None:
        with self._lock:
            self._events.setdefault(event.short_code, []).append(event)

    async def query_events(
        self,
        short_code: str,
        start: datetime,
        end: datetime
    ) -> List[ClickEvent]:
        start, end = ensure_utc(start), ensure_utc(end)
        events = [
            event for event in self._events.get(short_code, [])
            if start <= ensure_utc(event.timestamp) <= end
        ]
        return sorted(events, key=lambda event: ensure_utc(event.timestamp))


class SQLAlchemyStorage(StorageStrategy):
    """
    Relational storage through the SQLAlchemy ORM.

    Pros:
    - Zero configuration with SQLite
    - Same code runs on PostgreSQL in production
    - Real atomic UPDATE for click counters

    Cons:
    - Range queries over a large click log are slower than a columnar store

    Every call opens a short-lived session, so the instance is safe to
    share across requests and background tasks.
    """

    def __init__(self, session_factory: sessionmaker):
        """
        Initialize SQLAlchemy storage.

        Args:
            session_factory: Factory for creating database sessions
        """
        self.session_factory = session_factory

    async def get_url(self, short_code: str) -> Optional[UrlRecord]:
        try:
            with self.session_factory() as db:
                url = db.get(URL, short_code)
                return self._to_record(url) if url else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read url {short_code}: {e}") from e

    async def put_url(self, record: UrlRecord) -> None:
        try:
            with self.session_factory() as db:
                db.merge(URL(
                    short_code=record.short_code,
                    original_url=record.original_url,
                    click_count=record.click_count,
                    created_at=ensure_utc(record.created_at),
                ))
                db.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write url {record.short_code}: {e}") from e

    async def increment_click_count(self, short_code: str) -> bool:
        try:
            with self.session_factory() as db:
                result = db.execute(
                    update(URL)
                    .where(URL.short_code == short_code)
                    .values(click_count=URL.click_count + 1)
                )
                db.commit()
                return result.rowcount > 0
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to increment clicks for {short_code}: {e}") from e

    async def delete_url(self, short_code: str) -> bool:
        try:
            with self.session_factory() as db:
                url = db.get(URL, short_code)
                if not url:
                    return False
                db.delete(url)
                db.commit()
                return True
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete url {short_code}: {e}") from e

    async def list_urls(self) -> List[UrlRecord]:
        try:
            with self.session_factory() as db:
                return [self._to_record(url) for url in db.query(URL).all()]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list urls: {e}") from e

    async def put_event(self, event: ClickEvent) -> None:
        try:
            with self.session_factory() as db:
                db.add(Click(
                    short_code=event.short_code,
                    timestamp=to_iso(event.timestamp),
                    user_agent=event.user_agent,
                    browser=event.browser,
                    browser_version=event.browser_version,
                    os=event.os,
                    device_type=event.device_type,
                    referrer=event.referrer,
                    referrer_domain=event.referrer_domain,
                    country=event.country,
                    region=event.region,
                    city=event.city,
                ))
                db.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to store click for {event.short_code}: {e}") from e

    async def query_events(
        self,
        short_code: str,
        start: datetime,
        end: datetime
    ) -> List[ClickEvent]:
        # Blocking query runs in a worker thread
        return await asyncio.to_thread(self._query_events, short_code, start, end)

    def _query_events(self, short_code: str, start: datetime, end: datetime) -> List[ClickEvent]:
        try:
            with self.session_factory() as db:
                rows = (
                    db.query(Click)
                    .filter(
                        Click.short_code == short_code,
                        Click.timestamp.between(to_iso(start), to_iso(end)),
                    )
                    .order_by(Click.timestamp, Click.id)
                    .all()
                )
                return [self._to_event(row) for row in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to query clicks for {short_code}: {e}") from e

    @staticmethod
    def _to_record(url: URL) -> UrlRecord:
        return UrlRecord(
            short_code=url.short_code,
            original_url=url.original_url,
            click_count=url.click_count or 0,
            created_at=ensure_utc(url.created_at),
        )

    @staticmethod
    def _to_event(row: Click) -> ClickEvent:
        return ClickEvent(
            short_code=row.short_code,
            timestamp=parse_iso(row.timestamp),
            user_agent=row.user_agent or "",
            browser=row.browser or "",
            browser_version=row.browser_version or "",
            os=row.os or "",
            device_type=row.device_type or "",
            referrer=row.referrer or "",
            referrer_domain=row.referrer_domain or "",
            country=row.country or "",
            region=row.region or "",
            city=row.city or "",
        )


class DynamoDBStorage(StorageStrategy):
    """
    DynamoDB implementation (managed document store).

    Table design:
    - urls: partition key ``shortCode``
    - analytics: partition key ``shortCode``, sort key ``timestamp``
      (ISO-8601 string, so BETWEEN on the sort key is a time range)

    Pros:
    - Serverless, scales with traffic
    - Atomic ``ADD`` update expressions for counters

    Cons:
    - Listing all URLs is a full table scan
    """

    def __init__(self, url_table, events_table):
        """
        Initialize DynamoDB storage.

        Args:
            url_table: boto3 Table resource for link records
            events_table: boto3 Table resource for click events
        """
        self.url_table = url_table
        self.events_table = events_table

    async def get_url(self, short_code: str) -> Optional[UrlRecord]:
        from botocore.exceptions import ClientError

        try:
            item = self.url_table.get_item(Key={"shortCode": short_code}).get("Item")
        except ClientError as e:
            raise StorageError(f"DynamoDB get_item failed for {short_code}: {e}") from e
        return self._to_record(item) if item else None

    async def put_url(self, record: UrlRecord) -> None:
        from botocore.exceptions import ClientError

        try:
            self.url_table.put_item(Item={
                "shortCode": record.short_code,
                "originalUrl": record.original_url,
                "clickCount": record.click_count,
                "createdAt": to_iso(record.created_at),
            })
        except ClientError as e:
            raise StorageError(f"DynamoDB put_item failed for {record.short_code}: {e}") from e

    async def increment_click_count(self, short_code: str) -> bool:
        from botocore.exceptions import ClientError

        try:
            self.url_table.update_item(
                Key={"shortCode": short_code},
                UpdateExpression="ADD clickCount :inc",
                ConditionExpression="attribute_exists(shortCode)",
                ExpressionAttributeValues={":inc": 1},
            )
            return True
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                return False
            raise StorageError(f"DynamoDB update_item failed for {short_code}: {e}") from e

    async def delete_url(self, short_code: str) -> bool:
        from botocore.exceptions import ClientError

        try:
            self.url_table.delete_item(
                Key={"shortCode": short_code},
                ConditionExpression="attribute_exists(shortCode)",
            )
            return True
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                return False
            raise StorageError(f"DynamoDB delete_item failed for {short_code}: {e}") from e

    async def list_urls(self) -> List[UrlRecord]:
        from botocore.exceptions import ClientError

        records = []
        kwargs = {}
        try:
            while True:
                page = self.url_table.scan(**kwargs)
                records.extend(self._to_record(item) for item in page.get("Items", []))
                if "LastEvaluatedKey" not in page:
                    return records
                kwargs["ExclusiveStartKey"] = page["LastEvaluatedKey"]
        except ClientError as e:
            raise StorageError(f"DynamoDB scan failed: {e}") from e

    async def put_event(self, event: ClickEvent) -> None:
        from botocore.exceptions import ClientError

        try:
            self.events_table.put_item(Item={
                "shortCode": event.short_code,
                "timestamp": to_iso(event.timestamp),
                "userAgent": event.user_agent,
                "browser": event.browser,
                "browserVersion": event.browser_version,
                "os": event.os,
                "deviceType": event.device_type,
                "referrer": event.referrer,
                "referrerDomain": event.referrer_domain,
                "country": event.country,
                "region": event.region,
                "city": event.city,
            })
        except ClientError as e:
            raise StorageError(f"DynamoDB put_item failed for click on {event.short_code}: {e}") from e

    async def query_events(
        self,
        short_code: str,
        start: datetime,
        end: datetime
    ) -> List[ClickEvent]:
        return await asyncio.to_thread(self._query_events, short_code, start, end)

    def _query_events(self, short_code: str, start: datetime, end: datetime) -> List[ClickEvent]:
        from boto3.dynamodb.conditions import Key
        from botocore.exceptions import ClientError

        events = []
        kwargs = {
            "KeyConditionExpression": (
                Key("shortCode").eq(short_code)
                & Key("timestamp").between(to_iso(start), to_iso(end))
            ),
        }
        try:
            while True:
                page = self.events_table.query(**kwargs)
                events.extend(self._to_event(item) for item in page.get("Items", []))
                if "LastEvaluatedKey" not in page:
                    return events
                kwargs["ExclusiveStartKey"] = page["LastEvaluatedKey"]
        except ClientError as e:
            raise StorageError(f"DynamoDB query failed for {short_code}: {e}") from e

    @staticmethod
    def _to_record(item: dict) -> UrlRecord:
        return UrlRecord(
            short_code=item["shortCode"],
            original_url=item["originalUrl"],
            click_count=int(item.get("clickCount", 0)),
            created_at=parse_iso(item["createdAt"]),
        )

    @staticmethod
    def _to_event(item: dict) -> ClickEvent:
        return ClickEvent(
            short_code=item["shortCode"],
            timestamp=parse_iso(item["timestamp"]),
            user_agent=item.get("userAgent", ""),
            browser=item.get("browser", ""),
            browser_version=item.get("browserVersion", ""),
            os=item.get("os", ""),
            device_type=item.get("deviceType", ""),
            referrer=item.get("referrer", ""),
            referrer_domain=item.get("referrerDomain", ""),
            country=item.get("country", ""),
            region=item.get("region", ""),
            city=item.get("city", ""),
        )
