"""
Store client contract.

Defines the key, record and policy types exchanged with a key-value store,
and the async StoreClient protocol every backend implements. Records are
addressed by (namespace, set, id); writes merge fields into any existing
record rather than replacing it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Protocol, Sequence, Union

Record = Dict[str, Any]


@dataclass(frozen=True)
class Key:
    """Address of exactly one record."""

    namespace: str
    set_name: str
    id: Union[str, int]

    def __str__(self) -> str:
        return f"{self.namespace}:{self.set_name}:{self.id}"


@dataclass(frozen=True)
class RecordMeta:
    """Optional write metadata. ttl is in seconds; None keeps the store default."""

    ttl: Optional[int] = None


class WritePolicy(Enum):
    UPSERT = "upsert"
    UPDATE_ONLY = "update_only"
    CREATE_ONLY = "create_only"


class BatchStatus(Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass
class BatchResult:
    """Per-key outcome of a batch read."""

    key: Key
    status: BatchStatus
    record: Optional[Record] = None
    error: Optional[Exception] = None


@dataclass
class ScanOptions:
    """
    Options for a full-set scan.

    Attributes:
        bins: Stored field names to return (None returns all fields)
        filters: Stored field name -> value equality matches
        max_records: Stop after this many matching records
    """

    bins: Optional[Sequence[str]] = None
    filters: Optional[Mapping[str, Any]] = None
    max_records: Optional[int] = None

    def __post_init__(self):
        if self.max_records is not None and self.max_records < 0:
            raise ValueError(f"max_records must be >= 0, got {self.max_records}")

    def limit_reached(self, count: int) -> bool:
        return self.max_records is not None and count >= self.max_records

    def matches(self, record: Mapping[str, Any]) -> bool:
        if not self.filters:
            return True
        return all(
            name in record and record[name] == value for name, value in self.filters.items()
        )

    def project(self, record: Record) -> Record:
        if self.bins is None:
            return record
        wanted = set(self.bins) | {"id"}
        return {name: value for name, value in record.items() if name in wanted}


class StoreClient(Protocol):
    """
    Asynchronous interface to a key-value store.

    Missing keys are reported as None / False / NOT_FOUND, never raised.
    Any other failure is raised to the caller unchanged.
    """

    async def get(self, key: Key) -> Optional[Record]:
        """Return the record at key, or None if it does not exist."""
        ...

    async def put(
        self,
        key: Key,
        record: Mapping[str, Any],
        meta: Optional[RecordMeta] = None,
        policy: WritePolicy = WritePolicy.UPSERT,
    ) -> None:
        """
        Merge record's fields into the record at key.

        Raises:
            RecordNotFoundError: UPDATE_ONLY and the key does not exist
            RecordExistsError: CREATE_ONLY and the key already exists
        """
        ...

    async def remove(self, key: Key) -> None:
        """Remove the record at key."""
        ...

    async def exists(self, key: Key) -> bool:
        """Check whether a record exists at key."""
        ...

    async def batch_read(self, keys: Sequence[Key]) -> List[BatchResult]:
        """Read many keys; one result per key, in the same order."""
        ...

    async def batch_remove(self, keys: Sequence[Key]) -> None:
        """Remove many keys. Missing keys are ignored."""
        ...

    def scan(
        self,
        namespace: str,
        set_name: str,
        options: Optional[ScanOptions] = None,
    ) -> AsyncIterator[Record]:
        """
        Stream every record in a set.

        Iteration ends when the scan completes; a failure during the scan is
        raised from the iterator.
        """
        ...

    async def close(self) -> None:
        """Release the client's resources."""
        ...
