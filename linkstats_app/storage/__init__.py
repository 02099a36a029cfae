"""
Storage module for link records and click events.

This module implements the Strategy Pattern for pluggable storage backends.
Services only see the ``StorageStrategy`` port.
"""

from .strategies import StorageStrategy, InMemoryStorage, SQLAlchemyStorage, DynamoDBStorage
from .factory import StorageFactory, StorageBackend

__all__ = [
    "StorageStrategy",
    "InMemoryStorage",
    "SQLAlchemyStorage",
    "DynamoDBStorage",
    "StorageFactory",
    "StorageBackend",
]
