"""
Bin declarations and the per-type registry that records them.

Entities declare their mapped attributes in the class body:

    class User(BaseEntity):
        name = field("nm", required=True)
        age = field(default=0)

Each Bin registers itself with the registry when the class is created, so
serialization never has to inspect instances to discover their fields.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from binmapper.errors import BinConfigurationError

_MISSING = object()


# =============================================================================
# Defaults
# =============================================================================


@dataclass(frozen=True)
class Constant:
    """A default that is always the same value."""

    value: Any

    def resolve(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Producer:
    """A default computed by calling a zero-argument function."""

    factory: Callable[[], Any]

    def resolve(self) -> Any:
        return self.factory()


Default = Union[Constant, Producer]


# =============================================================================
# Bin descriptor
# =============================================================================


class Bin:
    """
    Mapping rule for one entity attribute.

    Acts as a data descriptor on the owning class: instance values live in
    the instance __dict__ and read back as None until assigned.
    """

    def __init__(
        self,
        stored_name: Optional[str] = None,
        required: bool = False,
        default: Optional[Default] = None,
        source_name: Optional[str] = None,
    ):
        self.stored_name = stored_name
        self.required = required
        self.default = default
        self.source_name = source_name
        if source_name is not None and stored_name is None:
            self.stored_name = source_name

    def __set_name__(self, owner, name: str) -> None:
        self.source_name = name
        if self.stored_name is None:
            self.stored_name = name
        registry.register(owner, self)

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return instance.__dict__.get(self.source_name)

    def __set__(self, instance, value) -> None:
        instance.__dict__[self.source_name] = value

    def resolve_default(self) -> Any:
        """Return the default value, or None when no default is configured."""
        if self.default is None:
            return None
        return self.default.resolve()

    def __repr__(self) -> str:
        return (
            f"Bin(source_name={self.source_name!r}, stored_name={self.stored_name!r}, "
            f"required={self.required!r}, default={self.default!r})"
        )


def field(
    name: Optional[str] = None,
    *,
    required: bool = False,
    default: Any = _MISSING,
    default_factory: Optional[Callable[[], Any]] = None,
) -> Bin:
    """
    Declare a mapped attribute.

    Args:
        name: Field name in the stored record (defaults to the attribute name)
        required: Fail serialization when the attribute has no value
        default: Constant used when the attribute is unset
        default_factory: Zero-argument callable used when the attribute is unset

    Returns:
        A Bin to assign in an entity class body
    """
    if default is not _MISSING and default_factory is not None:
        raise BinConfigurationError("cannot specify both default and default_factory")

    if default_factory is not None:
        resolved = Producer(default_factory)
    elif default is not _MISSING:
        resolved = Constant(default)
    else:
        resolved = None

    return Bin(stored_name=name, required=required, default=resolved)


# =============================================================================
# Registry
# =============================================================================


class BinRegistry:
    """Process-wide catalog of Bin descriptors, keyed by entity type."""

    def __init__(self):
        self._registry: Dict[type, Dict[str, Bin]] = {}

    def register(self, entity_type: type, descriptor: Bin) -> None:
        """
        Register a descriptor for an entity type.

        Registering the same source_name again replaces the earlier entry
        in place. A stored_name shared by two source names is rejected,
        including names inherited from base classes.
        """
        if not descriptor.source_name:
            raise BinConfigurationError("Bin has no source_name")
        if descriptor.stored_name == "id":
            raise BinConfigurationError(
                f"{entity_type.__name__}.{descriptor.source_name}: 'id' is a reserved field name"
            )

        for existing in self.lookup(entity_type):
            if (
                existing.stored_name == descriptor.stored_name
                and existing.source_name != descriptor.source_name
            ):
                raise BinConfigurationError(
                    f"{entity_type.__name__}: stored name {descriptor.stored_name!r} is used by "
                    f"both {existing.source_name!r} and {descriptor.source_name!r}"
                )
        self._registry.setdefault(entity_type, {})[descriptor.source_name] = descriptor

    def lookup(self, entity_type: type) -> List[Bin]:
        """
        Get the descriptors for an entity type, inherited ones first.

        Returns an empty list for types with no registrations.
        """
        merged: Dict[str, Bin] = {}
        for klass in reversed(entity_type.__mro__):
            merged.update(self._registry.get(klass, {}))
        return list(merged.values())

    def get(self, entity_type: type, source_name: str) -> Optional[Bin]:
        """Get a single descriptor by attribute name, or None."""
        for descriptor in self.lookup(entity_type):
            if descriptor.source_name == source_name:
                return descriptor
        return None


registry = BinRegistry()
