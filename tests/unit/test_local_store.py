# =============================================================================
# tests/unit/test_local_store.py
# Unit Tests for LocalStore
# =============================================================================

import pytest

from inventory_core.models import SyncQueueEntry
from inventory_core.offline import LocalStore, SYNC_QUEUE_KEY, USERS_KEY


def _write_raw(store, collection, value):
    with store.transaction() as conn:
        conn.execute(
            "INSERT OR REPLACE INTO collections (key, value) VALUES (?, ?)",
            [collection, value],
        )


class TestLocalStoreCollections:
    """Whole-collection reads and writes"""

    def test_missing_collection_is_empty(self, store):
        assert store.get(USERS_KEY) == []

    def test_put_then_get_preserves_order(self, store):
        records = [{"name": "Ana", "email": "a@x.com"}, {"name": "Ben", "email": "b@x.com"}]
        store.put(USERS_KEY, records)

        assert store.get(USERS_KEY) == records

    def test_put_overwrites_whole_collection(self, store):
        store.put(USERS_KEY, [{"email": "a@x.com"}, {"email": "b@x.com"}])
        store.put(USERS_KEY, [{"email": "c@x.com"}])

        assert store.get(USERS_KEY) == [{"email": "c@x.com"}]

    def test_collections_are_independent(self, store):
        store.put(USERS_KEY, [{"email": "a@x.com"}])
        store.put(SYNC_QUEUE_KEY, [{"action": "register"}])
        store.clear(SYNC_QUEUE_KEY)

        assert store.get(USERS_KEY) == [{"email": "a@x.com"}]
        assert store.get(SYNC_QUEUE_KEY) == []

    def test_data_survives_reopen(self, tmp_path):
        path = tmp_path / "durable.db"
        first = LocalStore(path)
        first.put(USERS_KEY, [{"email": "a@x.com"}])
        first.close()

        second = LocalStore(path)
        assert second.get(USERS_KEY) == [{"email": "a@x.com"}]
        second.close()


class TestLocalStoreRepair:
    """Unparseable state is treated as empty"""

    def test_corrupt_json_reads_as_empty(self, store):
        _write_raw(store, USERS_KEY, "{not json")

        assert store.get(USERS_KEY) == []

    def test_non_list_reads_as_empty(self, store):
        _write_raw(store, USERS_KEY, '{"email": "a@x.com"}')

        assert store.get(USERS_KEY) == []

    def test_non_record_elements_are_skipped(self, store):
        _write_raw(store, USERS_KEY, '[{"email": "a@x.com"}, 3, "x"]')

        assert store.get(USERS_KEY) == [{"email": "a@x.com"}]

    def test_put_after_corruption_recovers(self, store):
        _write_raw(store, USERS_KEY, "garbage")
        store.put(USERS_KEY, [{"email": "a@x.com"}])

        assert store.get(USERS_KEY) == [{"email": "a@x.com"}]


class TestLocalStoreDataFrame:
    """pandas export"""

    def test_empty_collection_gives_empty_frame(self, store):
        assert store.to_dataframe(USERS_KEY).empty

    def test_queue_payload_is_flattened(self, store):
        entry = SyncQueueEntry("resetPassword", {"email": "a@x.com", "newPassword": "pw2"})
        store.put(SYNC_QUEUE_KEY, [entry.to_dict()])

        df = store.to_dataframe(SYNC_QUEUE_KEY)

        assert len(df) == 1
        assert df.loc[0, "action"] == "resetPassword"
        assert df.loc[0, "payload.email"] == "a@x.com"
        assert df.loc[0, "attempts"] == 0
