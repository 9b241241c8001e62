"""Tests for the SQLite cache store."""

import pytest

from adapters.sqlite_store import SqliteInventoryStore
from core.domain.errors import StorageError
from core.domain.models import DomainRecord, Provider


def _record(domain="example.com", provider=Provider.OVH, account_id="1"):
    return DomainRecord(account_id=account_id, real_id=account_id, provider=provider, domain=domain)


def test_exists_tracks_the_file(tmp_path):
    path = tmp_path / "cache" / "domain_list.db"
    store = SqliteInventoryStore(path)
    assert not store.exists()
    store.create_schema()
    assert store.exists()
    store.close()


def test_insert_count_and_query(store):
    store.create_schema()
    written = store.insert_many([_record(), _record(provider=Provider.CLOUDFLARE), _record("other.com")])
    assert written == 3
    assert store.count() == 3

    found = store.query_exact("example.com")
    assert [r.provider for r in found] == [Provider.OVH, Provider.CLOUDFLARE]


def test_query_is_exact_and_case_sensitive(store):
    store.create_schema()
    store.insert_many([_record("Example.com")])
    assert store.query_exact("example.com") == []
    assert store.query_exact("Example.com.") == []
    assert len(store.query_exact("Example.com")) == 1


def test_wipe(store):
    store.create_schema()
    store.insert_many([_record()])
    store.wipe()
    assert store.count() == 0


def test_empty_insert_is_a_noop(store):
    store.create_schema()
    assert store.insert_many([]) == 0


def test_count_without_schema_is_a_storage_error(store):
    with pytest.raises(StorageError):
        store.count()


def test_unwritable_path_is_a_storage_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = SqliteInventoryStore(tmp_path / "blocker" / "db.sqlite")
    with pytest.raises(StorageError):
        store.create_schema()


def test_corrupt_file_is_a_storage_error(tmp_path):
    path = tmp_path / "domain_list.db"
    path.write_bytes(b"this is not a sqlite database" * 100)
    store = SqliteInventoryStore(path)
    with pytest.raises(StorageError):
        store.create_schema()
    store.close()


def test_memory_store(tmp_path):
    with SqliteInventoryStore(":memory:") as store:
        assert not store.exists()
        store.create_schema()
        assert store.exists()
        assert store.count() == 0
