from unittest.mock import MagicMock

import pytest
from pymongo.errors import PyMongoError

from hangman.config import TestingConfig
from hangman.services.persistence import InMemoryStore, MongoPersistenceStore, SafeStore, create_store
from hangman.utils.errors import StorageError


def mongo_client():
    client = MagicMock()
    collection = client.__getitem__.return_value.blobs
    return client, collection


def test_in_memory_store_copies_values():
    store = InMemoryStore()
    value = {"games_won": 1}
    store.set("statistics", value)
    value["games_won"] = 99

    loaded = store.get("statistics")
    assert loaded == {"games_won": 1}
    loaded["games_won"] = 5
    assert store.get("statistics") == {"games_won": 1}
    assert store.get("missing", "default") == "default"


def test_mongo_store_reads_and_writes_blobs():
    client, collection = mongo_client()
    collection.find_one.return_value = {"_id": "best_times", "value": {"easy-animals": 500}}
    store = MongoPersistenceStore("mongodb://example", client=client)

    assert store.get("best_times") == {"easy-animals": 500}
    store.set("best_times", {"easy-animals": 400})
    collection.replace_one.assert_called_once_with(
        {"_id": "best_times"}, {"_id": "best_times", "value": {"easy-animals": 400}}, upsert=True
    )

    collection.find_one.return_value = None
    assert store.get("achievements", {}) == {}


def test_mongo_errors_become_storage_errors():
    client, collection = mongo_client()
    collection.find_one.side_effect = PyMongoError("down")
    store = MongoPersistenceStore("mongodb://example", client=client)

    with pytest.raises(StorageError):
        store.get("statistics")


def test_unreachable_mongo_raises_storage_error():
    client = MagicMock()
    client.admin.command.side_effect = PyMongoError("no server")
    with pytest.raises(StorageError):
        MongoPersistenceStore("mongodb://example", client=client)


def test_safe_store_degrades_to_memory():
    client, collection = mongo_client()
    collection.replace_one.side_effect = PyMongoError("read only")
    collection.find_one.side_effect = PyMongoError("down")
    store = SafeStore(MongoPersistenceStore("mongodb://example", client=client))

    store.set("statistics", {"games_won": 2})
    assert store.degraded is True
    assert store.get("statistics") == {"games_won": 2}


def test_safe_store_recovers_on_next_write():
    client, collection = mongo_client()
    collection.replace_one.side_effect = [PyMongoError("blip"), None]
    store = SafeStore(MongoPersistenceStore("mongodb://example", client=client))

    store.set("progression", {"consecutive_wins": 1})
    assert store.degraded is True
    store.set("progression", {"consecutive_wins": 2})
    assert store.degraded is False


def test_create_store_without_mongo_uses_memory():
    store = create_store(TestingConfig)
    assert isinstance(store, SafeStore)
    assert isinstance(store.backend, InMemoryStore)
