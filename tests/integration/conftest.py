"""Pytest configuration and fixtures for integration tests."""

from collections.abc import AsyncIterator

import pytest

from yearpeer.core import db_client
from yearpeer.core.config import settings
from yearpeer.domain.create_models import ExternalIdentity
from yearpeer.domain.user import User
from yearpeer.services import user_service


@pytest.fixture
async def sqlite_db(tmp_path, monkeypatch) -> AsyncIterator[str]:
    """Point the real db_client at a fresh SQLite file and create the schema."""
    db_path = str(tmp_path / "yearpeer_test.db")
    monkeypatch.setattr(settings, "sqlite_db_path", db_path)

    await db_client.init_db()
    yield db_path
    await db_client.close_connection()


@pytest.fixture
async def member(sqlite_db) -> User:
    """A user stored through the sign-in flow."""
    return await user_service.sign_in_external_user(
        identity=ExternalIdentity(subject="google-42", email="member@example.com", given_name="Mia")
    )
