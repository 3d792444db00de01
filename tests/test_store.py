from unittest.mock import MagicMock
import pytest
from store_client import COLLECTIONS, FirestoreCollection, MemoryCollection, firestore_store, memory_store

def test_memory_collection_copies_documents():
    packages = MemoryCollection("packages")
    doc = {"id": "p1", "timeline": [{"status": "created"}]}
    packages.set("p1", doc)
    doc["timeline"].append({"status": "confirmed"})

    stored = packages.get("p1")
    assert len(stored["timeline"]) == 1
    stored["timeline"].clear()
    assert len(packages.get("p1")["timeline"]) == 1

def test_memory_collection_delete_and_stream():
    users = MemoryCollection("users")
    users.set("a", {"id": "a"})
    users.set("b", {"id": "b"})
    assert users.delete("a") is True
    assert users.delete("a") is False
    assert users.get("a") is None
    assert users.stream() == [{"id": "b"}]

def test_store_exposes_every_collection():
    store = memory_store()
    for name in COLLECTIONS:
        assert getattr(store, name).name == name
    with pytest.raises(AttributeError):
        store.invoices

def _snapshot(data):
    snapshot = MagicMock()
    snapshot.exists = data is not None
    snapshot.to_dict.return_value = data
    return snapshot

def test_firestore_collection_maps_documents():
    ref = MagicMock()
    ref.id = "packages"
    ref.document.return_value.get.return_value = _snapshot({"id": "p1"})
    ref.stream.return_value = [_snapshot({"id": "p1"}), _snapshot({"id": "p2"})]

    packages = FirestoreCollection(ref)
    assert packages.name == "packages"
    assert packages.get("p1") == {"id": "p1"}
    assert packages.stream() == [{"id": "p1"}, {"id": "p2"}]

    packages.set("p1", {"id": "p1", "status": "created"})
    ref.document.return_value.set.assert_called_once_with({"id": "p1", "status": "created"})

    assert packages.delete("p1") is True
    ref.document.return_value.delete.assert_called_once()

def test_firestore_collection_missing_document():
    ref = MagicMock()
    ref.document.return_value.get.return_value = _snapshot(None)
    packages = FirestoreCollection(ref)
    assert packages.get("nope") is None
    assert packages.delete("nope") is False
    ref.document.return_value.delete.assert_not_called()

def test_firestore_store_uses_one_collection_per_name():
    db = MagicMock()
    firestore_store(db)
    assert [call.args[0] for call in db.collection.call_args_list] == list(COLLECTIONS)
