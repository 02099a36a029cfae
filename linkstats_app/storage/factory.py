"""
Factory for creating storage instances.
Simple, clean factory with singleton caching.
"""

from enum import Enum
import logging

from .strategies import StorageStrategy, InMemoryStorage, SQLAlchemyStorage, DynamoDBStorage
from linkstats_app.config import settings

logger = logging.getLogger(__name__)


class StorageBackend(Enum):
    """Available storage backends"""
    SQLALCHEMY = "sqlalchemy"
    MEMORY = "memory"
    DYNAMODB = "dynamodb"


class StorageFactory:
    """
    Simple factory for creating storage instances.

    Gets configuration from settings (not passed as parameters).
    """

    _instance: StorageStrategy = None  # Single cached instance

    @classmethod
    def create(cls, backend: StorageBackend) -> StorageStrategy:
        """
        Create or return cached storage instance.

        Args:
            backend: Type of storage backend (from enum)

        Returns:
            Singleton storage instance
        """
        # Return cached instance if exists
        if cls._instance is not None:
            return cls._instance

        # Create new instance based on backend type
        if backend == StorageBackend.SQLALCHEMY:
            from linkstats_app.database.connection import SessionLocal, init_db

            init_db()
            cls._instance = SQLAlchemyStorage(SessionLocal)
            logger.info("SQLAlchemy storage initialized (%s)", settings.database_url)

        elif backend == StorageBackend.MEMORY:
            cls._instance = InMemoryStorage()
            logger.info("In-memory storage initialized")

        elif backend == StorageBackend.DYNAMODB:
            import boto3

            dynamodb = boto3.resource(
                "dynamodb",
                region_name=settings.dynamodb_region,
                endpoint_url=settings.dynamodb_endpoint_url,
            )
            cls._instance = DynamoDBStorage(
                url_table=dynamodb.Table(settings.dynamodb_url_table),
                events_table=dynamodb.Table(settings.dynamodb_events_table),
            )
            logger.info(
                "DynamoDB storage initialized (tables %s, %s)",
                settings.dynamodb_url_table,
                settings.dynamodb_events_table,
            )

        else:
            raise ValueError(f"Unknown storage backend: {backend}")

        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
