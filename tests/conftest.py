"""Pytest configuration and shared fixtures."""

from collections.abc import Callable

import logfire
import pytest
from fastapi.testclient import TestClient

from yearpeer.core.config import PlannerLimits, settings
from yearpeer.interface.session import create_session_token
from yearpeer.main import app


@pytest.fixture(scope="session", autouse=True)
def _configure_test_logfire() -> None:
    """Keep spans local during tests."""
    logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def limits() -> PlannerLimits:
    """Default planner limits (5 tasks per day, 50 goals per year)."""
    return PlannerLimits()


@pytest.fixture
def test_client(monkeypatch, limits: PlannerLimits) -> TestClient:
    """Provide FastAPI test client.

    The lifespan is not run, so the DB must be patched and the limits it
    would install are set here.
    """
    monkeypatch.setattr(app.state, "limits", limits, raising=False)
    return TestClient(app)


@pytest.fixture
def login(test_client: TestClient) -> Callable[[str], TestClient]:
    """Attach a signed session cookie for a user to the test client.

    Usage:
        client = login(user["id"])
    """

    def _login(user_id: str) -> TestClient:
        test_client.cookies.set(settings.session_cookie_name, create_session_token(user_id))
        return test_client

    return _login
