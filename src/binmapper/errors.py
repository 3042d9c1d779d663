"""
Exception types raised by binmapper.

Not-found conditions are not exceptions: repositories translate them into
None (get), omission (get_many) or a no-op (delete). Transport failures from
the underlying client (e.g. redis.RedisError) are propagated unchanged.
"""


class BinMapperError(Exception):
    """Base class for all binmapper errors."""


class MissingIdError(BinMapperError, ValueError):
    """Raised when a record has no usable "id" field."""

    def __init__(self, record=None):
        self.record = record
        super().__init__('Missing "id" field in record')


class MissingRequiredFieldError(BinMapperError, ValueError):
    """Raised when a required bin has no value and no default."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing required field: {field}")


class BinConfigurationError(BinMapperError, TypeError):
    """Raised when an entity's bin declarations are inconsistent."""


class StoreError(BinMapperError):
    """Base class for write-policy failures reported by a store client."""


class RecordNotFoundError(StoreError):
    """Raised by an update-only write when the key does not exist."""

    def __init__(self, key):
        self.key = key
        super().__init__(f"Record not found: {key}")


class RecordExistsError(StoreError):
    """Raised by a create-only write when the key already exists."""

    def __init__(self, key):
        self.key = key
        super().__init__(f"Record already exists: {key}")
