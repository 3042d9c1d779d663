"""
Tests for MemoryStoreClient.

Run with: pytest src/binmapper/store/memory_test.py -v
"""

import pytest

from binmapper.errors import RecordExistsError, RecordNotFoundError
from binmapper.store import BatchStatus, Key, ScanOptions, WritePolicy

KEY = Key("test", "things", "k1")


class TestPut:
    """Tests for MemoryStoreClient.put()"""

    async def test_put_merges_fields(self, memory_store):
        await memory_store.put(KEY, {"id": "k1", "a": 1, "b": 2})
        await memory_store.put(KEY, {"b": 3})

        assert await memory_store.get(KEY) == {"id": "k1", "a": 1, "b": 3}

    async def test_put_copies_values(self, memory_store):
        tags = ["x"]
        await memory_store.put(KEY, {"tags": tags})
        tags.append("y")

        record = await memory_store.get(KEY)
        record["tags"].append("z")

        assert (await memory_store.get(KEY))["tags"] == ["x"]

    async def test_update_only_missing_raises(self, memory_store):
        with pytest.raises(RecordNotFoundError):
            await memory_store.put(KEY, {"a": 1}, policy=WritePolicy.UPDATE_ONLY)

        assert not await memory_store.exists(KEY)

    async def test_create_only_existing_raises(self, memory_store):
        await memory_store.put(KEY, {"a": 1})

        with pytest.raises(RecordExistsError):
            await memory_store.put(KEY, {"a": 2}, policy=WritePolicy.CREATE_ONLY)

        assert (await memory_store.get(KEY))["a"] == 1


class TestRemove:
    """Tests for MemoryStoreClient.remove() and batch_remove()"""

    async def test_remove(self, memory_store):
        await memory_store.put(KEY, {"a": 1})

        await memory_store.remove(KEY)

        assert await memory_store.get(KEY) is None

    async def test_batch_remove_ignores_missing(self, memory_store):
        other = Key("test", "things", "k2")
        await memory_store.put(KEY, {"a": 1})

        await memory_store.batch_remove([KEY, other])

        assert len(memory_store) == 0


class TestBatchRead:
    """Tests for MemoryStoreClient.batch_read()"""

    async def test_batch_read_statuses_in_order(self, memory_store):
        missing = Key("test", "things", "nope")
        await memory_store.put(KEY, {"a": 1})

        results = await memory_store.batch_read([missing, KEY])

        assert [r.key for r in results] == [missing, KEY]
        assert [r.status for r in results] == [BatchStatus.NOT_FOUND, BatchStatus.OK]
        assert results[1].record == {"a": 1}


class TestScan:
    """Tests for MemoryStoreClient.scan()"""

    @pytest.fixture
    async def seeded(self, memory_store):
        for i in range(5):
            await memory_store.put(
                Key("test", "things", i + 1), {"id": i + 1, "even": i % 2 == 0, "n": i}
            )
        await memory_store.put(Key("test", "other", 1), {"id": 1})
        return memory_store

    async def collect(self, store, options=None):
        return [r async for r in store.scan("test", "things", options)]

    async def test_scan_set(self, seeded):
        records = await self.collect(seeded)

        assert sorted(r["id"] for r in records) == [1, 2, 3, 4, 5]

    async def test_scan_filters(self, seeded):
        records = await self.collect(seeded, ScanOptions(filters={"even": True}))

        assert sorted(r["id"] for r in records) == [1, 3, 5]

    async def test_scan_projection_keeps_id(self, seeded):
        records = await self.collect(seeded, ScanOptions(bins=["n"]))

        assert all(set(r) == {"id", "n"} for r in records)

    @pytest.mark.parametrize("max_records", [0, 1, 3, 10])
    async def test_scan_max_records(self, seeded, max_records):
        records = await self.collect(seeded, ScanOptions(max_records=max_records))

        assert len(records) == min(max_records, 5)

    def test_scan_negative_max_records_raises(self):
        with pytest.raises(ValueError):
            ScanOptions(max_records=-1)
