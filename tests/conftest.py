"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator, Generator
from datetime import UTC, datetime
from typing import Any

import bcrypt
import logfire
import pytest
from fastapi.testclient import TestClient

from src.core import db_client
from src.core.config import settings
from src.main import app
from src.services import user_service


# Keep spans local during tests
logfire.configure(send_to_logfire=False, console=False)

_real_gensalt = bcrypt.gensalt


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch: pytest.MonkeyPatch) -> None:
    """Use the cheapest bcrypt cost so signup-heavy tests stay fast."""
    monkeypatch.setattr(bcrypt, "gensalt", lambda: _real_gensalt(rounds=4))


@pytest.fixture
def db_path(tmp_path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Point the application at a throwaway SQLite file."""
    path = str(tmp_path / "homestreak-test.db")
    monkeypatch.setattr(settings, "sqlite_db_path", path)
    monkeypatch.setattr(settings, "timezone", "UTC")
    return path


@pytest.fixture
async def db(db_path: str) -> AsyncGenerator[str]:
    """Initialized schema on a fresh database, closed after the test."""
    await db_client.init_db()
    yield db_path
    await db_client.close_connection()


@pytest.fixture
async def household(db: str) -> dict[str, Any]:
    """Three members of one team: alice founded it, bob and carol joined by invite code."""
    alice = await user_service.signup(
        name="Alice",
        email="alice@example.com",
        password="alice-pass",
        team_option="create",
        team_name_or_code="The Flat",
    )
    code = alice["team"]["invite_code"]
    bob = await user_service.signup(
        name="Bob", email="bob@example.com", password="bob-pass", team_option="join", team_name_or_code=code
    )
    carol = await user_service.signup(
        name="Carol", email="carol@example.com", password="carol-pass", team_option="join", team_name_or_code=code
    )
    return {
        "team": alice["team"],
        "alice": alice["user"],
        "bob": bob["user"],
        "carol": carol["user"],
    }


@pytest.fixture
async def outsider(db: str) -> dict[str, Any]:
    """A member of a different team."""
    result = await user_service.signup(
        name="Olive",
        email="olive@example.com",
        password="olive-pass",
        team_option="create",
        team_name_or_code="Next Door",
    )
    return result["user"]


@pytest.fixture
def api_client(db_path: str, monkeypatch: pytest.MonkeyPatch) -> Generator[TestClient]:
    """FastAPI test client with the lifespan run against a fresh database and no scheduler."""
    monkeypatch.setattr(settings, "enable_scheduler", False)
    with TestClient(app) as client:
        yield client


def at(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> datetime:
    """Aware UTC datetime helper for readable fixed-time tests."""
    return datetime(year, month, day, hour, minute, tzinfo=UTC)
