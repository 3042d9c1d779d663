"""
Entity

This module provides the entity base class and the bin declarations used to
map entity attributes to stored record fields.
"""

from binmapper.entity.base import BaseEntity, EntityId
from binmapper.entity.registry import Bin, BinRegistry, Constant, Producer, field, registry

__all__ = [
    "BaseEntity",
    "Bin",
    "BinRegistry",
    "Constant",
    "EntityId",
    "Producer",
    "field",
    "registry",
]
