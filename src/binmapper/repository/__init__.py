"""
Repository

This module provides the generic repository that maps entities to records
in a store client.
"""

from binmapper.repository.base import BaseRepository

__all__ = ["BaseRepository"]
