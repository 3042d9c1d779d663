"""
Store

This module provides the store client contract and its Redis and in-memory
implementations.
"""

from typing import Optional

from binmapper.config import config
from binmapper.store.client import (
    BatchResult,
    BatchStatus,
    Key,
    Record,
    RecordMeta,
    ScanOptions,
    StoreClient,
    WritePolicy,
)
from binmapper.store.memory import MemoryStoreClient
from binmapper.store.redis import RedisStoreClient


def connect(url: Optional[str] = None) -> RedisStoreClient:
    """Create a Redis store client for the given URL, or the configured one."""
    return RedisStoreClient.from_url(url or config.store_url)


__all__ = [
    "BatchResult",
    "BatchStatus",
    "Key",
    "MemoryStoreClient",
    "Record",
    "RecordMeta",
    "RedisStoreClient",
    "ScanOptions",
    "StoreClient",
    "WritePolicy",
    "connect",
]
