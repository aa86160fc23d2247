"""
Persistence Service

Key/value storage of JSON-serializable blobs (achievements, statistics, best
times, practice progress, progression, cached word lists).
"""

import copy
from abc import ABC, abstractmethod
from typing import Any, Dict

from pymongo.errors import PyMongoError
from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

from ..utils.errors import StorageError
from ..utils.game_logger import game_logger


class PersistenceStore(ABC):
    """Abstract key/value store. Implementations raise StorageError on failure."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        ...


class InMemoryStore(PersistenceStore):
    """Process-local store; values are deep-copied in and out."""

    def __init__(self, initial: Dict[str, Any] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


class MongoPersistenceStore(PersistenceStore):
    """
    MongoDB-backed store.

    Each key is one document in the ``blobs`` collection:
    ``{"_id": key, "value": <blob>}``.
    """

    def __init__(self, mongo_uri: str, database: str = "hangman_game", client: MongoClient = None):
        """
        Initialize the store with a MongoDB connection.

        Args:
            mongo_uri: MongoDB connection string
            database: Database name
            client: Pre-built client (used by tests)
        """
        try:
            self.client = client or MongoClient(mongo_uri, server_api=ServerApi('1'))
            self.collection = self.client[database].blobs
            # Test connection
            self.client.admin.command('ping')
        except PyMongoError as e:
            raise StorageError(f"MongoDB connection error: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        try:
            doc = self.collection.find_one({"_id": key})
        except PyMongoError as e:
            raise StorageError(f"Failed to read '{key}': {e}") from e
        return doc["value"] if doc else default

    def set(self, key: str, value: Any) -> None:
        try:
            self.collection.replace_one({"_id": key}, {"_id": key, "value": value}, upsert=True)
        except PyMongoError as e:
            raise StorageError(f"Failed to write '{key}': {e}") from e


class SafeStore(PersistenceStore):
    """
    Wraps a store so that storage failures never reach gameplay.

    Failed reads return the last value written in this process (or the
    default); failed writes are kept in memory and retried on the next write.
    """

    def __init__(self, backend: PersistenceStore):
        self.backend = backend
        self.memory = InMemoryStore()
        self.degraded = False

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self.backend.get(key, default)
        except StorageError as e:
            self._degrade('storage_read_failed', key, e)
            return self.memory.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.memory.set(key, value)
        try:
            self.backend.set(key, value)
            self.degraded = False
        except StorageError as e:
            self._degrade('storage_write_failed', key, e)

    def _degrade(self, event: str, key: str, error: Exception) -> None:
        self.degraded = True
        game_logger.log_warning(event, key=key, error=str(error), fallback='memory')


def create_store(config) -> SafeStore:
    """Build the configured store, falling back to memory if MongoDB is unreachable."""
    backend: PersistenceStore = InMemoryStore()
    if getattr(config, 'MONGO_URI', None):
        try:
            backend = MongoPersistenceStore(config.MONGO_URI, config.MONGO_DATABASE)
        except StorageError as e:
            game_logger.log_warning('storage_unavailable', error=str(e), fallback='memory')
    return SafeStore(backend)
