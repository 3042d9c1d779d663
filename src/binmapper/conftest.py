# src/binmapper/conftest.py
"""
Pytest configuration and shared fixtures.

Tests are co-located with implementation files using the *_test.py suffix.
This file provides fixtures available to all tests in the package.
"""

import os

# Set environment BEFORE importing any app modules
os.environ["BINMAPPER_ENV"] = "test"

import itertools

import fakeredis
import pytest

from binmapper.entity import BaseEntity, field
from binmapper.repository import BaseRepository
from binmapper.store import MemoryStoreClient, RedisStoreClient

# =============================================================================
# Entity Types
# =============================================================================

_sequence = itertools.count(1)


class User(BaseEntity):
    name = field("nm", required=True)
    age = field(default=0)


class Session(BaseEntity):
    user_id = field("uid", required=True)
    token = field(default_factory=lambda: f"tok-{next(_sequence)}")
    tags = field(default_factory=list)


class UserRepository(BaseRepository[User]):
    entity_type = User


@pytest.fixture
def user_type():
    """The User entity: name stored as "nm" (required), age defaulting to 0."""
    return User


@pytest.fixture
def session_type():
    """The Session entity: token and tags are produced by default factories."""
    return Session


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def memory_store():
    """Provide an empty in-memory store."""
    return MemoryStoreClient()


@pytest.fixture
async def redis_store():
    """
    Provide a RedisStoreClient backed by fakeredis.

    Each test gets its own fake server, so no data leaks between tests.
    """
    client = RedisStoreClient(fakeredis.FakeAsyncRedis())
    yield client
    await client.close()


# =============================================================================
# Repository Fixtures
# =============================================================================


@pytest.fixture
def user_repo(memory_store):
    """Provide a UserRepository over the in-memory store."""
    return UserRepository(memory_store, "test", "users")


@pytest.fixture
def session_repo(memory_store):
    """Provide a Session repository configured through the constructor."""
    return BaseRepository(memory_store, "test", "sessions", entity_type=Session)


# =============================================================================
# Seed Data Fixtures
# =============================================================================


@pytest.fixture
async def sample_users(user_repo) -> list:
    """Create three stored users."""
    users = []
    for id, name, age in [("u1", "Alice", 30), ("u2", "Bob", 25), ("u3", "Carol", 41)]:
        user = User(id)
        user.name = name
        user.age = age
        await user_repo.save(user)
        users.append(user)
    return users
