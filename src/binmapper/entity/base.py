from typing import Any, Dict, List, Mapping, Union

from binmapper.entity.registry import registry
from binmapper.errors import MissingIdError, MissingRequiredFieldError

EntityId = Union[str, int]


class BaseEntity:
    """
    Base class for entities stored as one record in a key-value set.

    Subclasses declare their mapped attributes with binmapper.field(); the
    id is always stored under the reserved "id" field.
    """

    def __init__(self, id: EntityId):
        self.id = id

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_record(self) -> Dict[str, Any]:
        """
        Convert this entity to a flat record.

        Unset attributes fall back to their default; required attributes
        still unset after that raise MissingRequiredFieldError.

        Returns:
            Dict with "id" plus one entry per declared bin
        """
        record: Dict[str, Any] = {"id": self.id}

        for descriptor in registry.lookup(type(self)):
            value = getattr(self, descriptor.source_name, None)

            if value is None and descriptor.default is not None:
                value = descriptor.resolve_default()

            if descriptor.required and value is None:
                raise MissingRequiredFieldError(descriptor.source_name)

            record[descriptor.stored_name] = value

        return record

    @classmethod
    def from_record(cls, record: Mapping[str, Any]):
        """
        Build an entity from a stored record.

        Only fields present in the record are assigned; defaults and required
        checks are not applied here.

        Raises:
            MissingIdError: if the record has no id, or a falsy one ("" or 0)
        """
        # Falsy ids ("" and 0) are treated as missing.
        id = record.get("id")
        if not id:
            raise MissingIdError(record)

        instance = cls(id)
        for descriptor in registry.lookup(cls):
            if descriptor.stored_name in record:
                setattr(instance, descriptor.source_name, record[descriptor.stored_name])

        return instance

    # =========================================================================
    # Attribute helpers
    # =========================================================================

    def apply(self, data: Mapping[str, Any]) -> List[str]:
        """
        Assign known attributes from a mapping keyed by attribute name.

        Keys that are not declared bins are ignored.

        Returns:
            Names of the attributes that were assigned
        """
        applied = []
        for descriptor in registry.lookup(type(self)):
            if descriptor.source_name in data:
                setattr(self, descriptor.source_name, data[descriptor.source_name])
                applied.append(descriptor.source_name)
        return applied

    def apply_defaults(self) -> None:
        """Fill every unset attribute that has a default."""
        for descriptor in registry.lookup(type(self)):
            if getattr(self, descriptor.source_name, None) is None and descriptor.default is not None:
                setattr(self, descriptor.source_name, descriptor.resolve_default())

    def values(self) -> Dict[str, Any]:
        """Current attribute values keyed by attribute name, without defaults."""
        return {
            descriptor.source_name: getattr(self, descriptor.source_name, None)
            for descriptor in registry.lookup(type(self))
        }

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.id == other.id and self.values() == other.values()

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={value!r}" for name, value in self.values().items())
        if fields:
            return f"{type(self).__name__}(id={self.id!r}, {fields})"
        return f"{type(self).__name__}(id={self.id!r})"
