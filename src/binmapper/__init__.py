"""Map typed entities to records in a (namespace, set, id) key-value store."""

from binmapper.entity import BaseEntity, Bin, Constant, Producer, field, registry
from binmapper.errors import (
    BinConfigurationError,
    BinMapperError,
    MissingIdError,
    MissingRequiredFieldError,
    RecordExistsError,
    RecordNotFoundError,
    StoreError,
)
from binmapper.repository import BaseRepository
from binmapper.store import (
    Key,
    MemoryStoreClient,
    RecordMeta,
    RedisStoreClient,
    ScanOptions,
    StoreClient,
    WritePolicy,
    connect,
)

__version__ = "0.1.0"

__all__ = [
    "BaseEntity",
    "BaseRepository",
    "Bin",
    "BinConfigurationError",
    "BinMapperError",
    "Constant",
    "Key",
    "MemoryStoreClient",
    "MissingIdError",
    "MissingRequiredFieldError",
    "Producer",
    "RecordExistsError",
    "RecordMeta",
    "RecordNotFoundError",
    "RedisStoreClient",
    "ScanOptions",
    "StoreClient",
    "StoreError",
    "WritePolicy",
    "connect",
    "field",
    "registry",
]
