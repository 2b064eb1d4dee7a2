"""Pytest configuration and fixtures for unit tests."""

import pytest

from tests.unit.mocks import InMemoryDBClient


@pytest.fixture
def in_memory_db():
    """Provides a fresh InMemoryDBClient for each test."""
    return InMemoryDBClient()


@pytest.fixture
def patched_db(monkeypatch, in_memory_db):
    """Patches yearpeer.core.db_client functions to use InMemoryDBClient.

    The write lock stays real so check-then-write blocks run as in production.
    """

    # Patch all db_client functions
    monkeypatch.setattr("yearpeer.core.db_client.create_record", in_memory_db.create_record)
    monkeypatch.setattr("yearpeer.core.db_client.get_record", in_memory_db.get_record)
    monkeypatch.setattr("yearpeer.core.db_client.update_record", in_memory_db.update_record)
    monkeypatch.setattr("yearpeer.core.db_client.delete_record", in_memory_db.delete_record)
    monkeypatch.setattr("yearpeer.core.db_client.get_full_list", in_memory_db.get_full_list)
    monkeypatch.setattr("yearpeer.core.db_client.get_first_record", in_memory_db.get_first_record)
    monkeypatch.setattr("yearpeer.core.db_client.count_records", in_memory_db.count_records)

    return in_memory_db


@pytest.fixture
async def alice(patched_db):
    """A signed-up user."""
    return await patched_db.create_record(
        collection="users",
        data={"email": "alice@example.com", "first_name": "Alice", "last_name": "Smith"},
    )


@pytest.fixture
async def bob(patched_db):
    """A second user whose data must stay invisible to alice."""
    return await patched_db.create_record(
        collection="users",
        data={"email": "bob@example.com", "first_name": "Bob", "last_name": "Jones"},
    )
