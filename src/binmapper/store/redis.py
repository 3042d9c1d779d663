"""
Redis-backed StoreClient.

Each record is a Redis hash named "{namespace}:{set}:{id}", with namespace and
set percent-encoded so neither can contain ":" or glob characters. Field
values are JSON-encoded so nested structures round-trip; writes use HSET and
therefore merge into the existing hash.
"""

import json
import logging
from contextlib import aclosing
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Sequence
from urllib.parse import quote

from redis.asyncio import Redis

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

logger = logging.getLogger(__name__)


def set_prefix(namespace: str, set_name: str) -> str:
    """Key-name prefix shared by every record in one (namespace, set)."""
    return f"{quote(namespace, safe='')}:{quote(set_name, safe='')}:"


def _text(value) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value


def encode_record(record: Mapping[str, Any]) -> Dict[str, str]:
    """Encode each field value as JSON."""
    return {name: json.dumps(value) for name, value in record.items()}


def decode_record(raw: Mapping) -> Record:
    """Decode a raw HGETALL reply (bytes or str) back into a record."""
    return {_text(name): json.loads(_text(value)) for name, value in raw.items()}


class RedisStoreClient:
    """StoreClient implementation on top of redis.asyncio."""

    def __init__(self, redis: Redis):
        self.redis = redis

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisStoreClient":
        return cls(Redis.from_url(url, **kwargs))

    @staticmethod
    def key_name(key: Key) -> str:
        """
        Redis key for a record.

        The id is written with str(), so Key(ns, set, 5) and Key(ns, set, "5")
        address the same hash.
        """
        return set_prefix(key.namespace, key.set_name) + str(key.id)

    async def get(self, key: Key) -> Optional[Record]:
        raw = await self.redis.hgetall(self.key_name(key))
        if not raw:
            return None
        return decode_record(raw)

    async def put(
        self,
        key: Key,
        record: Mapping[str, Any],
        meta: Optional[RecordMeta] = None,
        policy: WritePolicy = WritePolicy.UPSERT,
    ) -> None:
        name = self.key_name(key)
        encoded = encode_record(record)
        ttl = meta.ttl if meta else None
        logger.debug("put %s (%d fields, policy=%s)", name, len(encoded), policy.value)

        async with self.redis.pipeline(transaction=True) as pipe:
            if policy is not WritePolicy.UPSERT:
                # WATCH makes the existence check and the write atomic
                await pipe.watch(name)
                found = await pipe.exists(name)
                if policy is WritePolicy.UPDATE_ONLY and not found:
                    raise RecordNotFoundError(key)
                if policy is WritePolicy.CREATE_ONLY and found:
                    raise RecordExistsError(key)
                pipe.multi()

            pipe.hset(name, mapping=encoded)
            if ttl:
                pipe.expire(name, ttl)
            await pipe.execute()

    async def remove(self, key: Key) -> None:
        await self.redis.delete(self.key_name(key))

    async def exists(self, key: Key) -> bool:
        return await self.redis.exists(self.key_name(key)) > 0

    async def batch_read(self, keys: Sequence[Key]) -> List[BatchResult]:
        if not keys:
            return []

        async with self.redis.pipeline(transaction=False) as pipe:
            for key in keys:
                pipe.hgetall(self.key_name(key))
            replies = await pipe.execute(raise_on_error=False)

        results = []
        for key, reply in zip(keys, replies):
            if isinstance(reply, Exception):
                logger.debug("batch read failed for %s: %s", key, reply)
                results.append(BatchResult(key, BatchStatus.ERROR, error=reply))
            elif not reply:
                results.append(BatchResult(key, BatchStatus.NOT_FOUND))
            else:
                results.append(BatchResult(key, BatchStatus.OK, decode_record(reply)))
        return results

    async def batch_remove(self, keys: Sequence[Key]) -> None:
        if not keys:
            return
        await self.redis.delete(*(self.key_name(key) for key in keys))

    async def scan(
        self,
        namespace: str,
        set_name: str,
        options: Optional[ScanOptions] = None,
    ) -> AsyncIterator[Record]:
        options = options or ScanOptions()
        pattern = set_prefix(namespace, set_name) + "*"
        logger.debug("scan %s", pattern)

        # SCAN may return a key more than once
        seen = set()
        yielded = 0
        async with aclosing(self.redis.scan_iter(match=pattern)) as names:
            async for name in names:
                if options.limit_reached(yielded):
                    return
                if name in seen:
                    continue
                seen.add(name)
                raw = await self.redis.hgetall(name)
                # Key may have expired or been removed since SCAN returned it
                if not raw:
                    continue
                record = decode_record(raw)
                if not options.matches(record):
                    continue
                yield options.project(record)
                yielded += 1

    async def close(self) -> None:
        await self.redis.aclose()
