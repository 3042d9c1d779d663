"""In-process StoreClient backed by a dict. Useful for tests and local development."""

import asyncio
import copy
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Sequence

from binmapper.errors import RecordExistsError, RecordNotFoundError
from binmapper.store.client import (
    BatchResult,
    BatchStatus,
    Key,
    Record,
    RecordMeta,
    ScanOptions,
    WritePolicy,
)


class MemoryStoreClient:
    """
    Dict-backed store implementing the StoreClient protocol.

    Values are deep-copied on the way in and out so callers never share
    state with the store. Record ttl is accepted and ignored.
    """

    def __init__(self):
        self._records: Dict[Key, Record] = {}

    async def get(self, key: Key) -> Optional[Record]:
        await asyncio.sleep(0)
        record = self._records.get(key)
        return copy.deepcopy(record) if record is not None else None

    async def put(
        self,
        key: Key,
        record: Mapping[str, Any],
        meta: Optional[RecordMeta] = None,
        policy: WritePolicy = WritePolicy.UPSERT,
    ) -> None:
        await asyncio.sleep(0)
        existing = self._records.get(key)
        if policy is WritePolicy.UPDATE_ONLY and existing is None:
            raise RecordNotFoundError(key)
        if policy is WritePolicy.CREATE_ONLY and existing is not None:
            raise RecordExistsError(key)

        merged = dict(existing or {})
        merged.update(copy.deepcopy(dict(record)))
        self._records[key] = merged

    async def remove(self, key: Key) -> None:
        await asyncio.sleep(0)
        self._records.pop(key, None)

    async def exists(self, key: Key) -> bool:
        await asyncio.sleep(0)
        return key in self._records

    async def batch_read(self, keys: Sequence[Key]) -> List[BatchResult]:
        results = []
        for key in keys:
            record = await self.get(key)
            if record is None:
                results.append(BatchResult(key, BatchStatus.NOT_FOUND))
            else:
                results.append(BatchResult(key, BatchStatus.OK, record))
        return results

    async def batch_remove(self, keys: Sequence[Key]) -> None:
        for key in keys:
            await self.remove(key)

    async def scan(
        self,
        namespace: str,
        set_name: str,
        options: Optional[ScanOptions] = None,
    ) -> AsyncIterator[Record]:
        options = options or ScanOptions()
        # Snapshot so writes during iteration don't break the scan
        keys = [k for k in self._records if k.namespace == namespace and k.set_name == set_name]

        yielded = 0
        for key in keys:
            if options.limit_reached(yielded):
                return
            await asyncio.sleep(0)
            record = self._records.get(key)
            if record is None or not options.matches(record):
                continue
            yield options.project(copy.deepcopy(record))
            yielded += 1

    async def close(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
