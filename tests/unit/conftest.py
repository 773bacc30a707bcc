"""Builders for pure engine and schedule tests."""

from datetime import UTC, datetime
from typing import Any

import pytest

from src.domain.chore import Chore, ChoreFrequency
from src.domain.user import UserStats


def build_chore(**overrides: Any) -> Chore:
    """A daily chore owned by user "1" unless overridden."""
    data: dict[str, Any] = {
        "id": "100",
        "title": "Wash Dishes",
        "frequency": ChoreFrequency.DAILY,
        "owner_id": "1",
        "team_id": "10",
        "points": 10,
        "created": datetime(2024, 1, 1, 9, 0, tzinfo=UTC),
    }
    data.update(overrides)
    return Chore.model_validate(data)


@pytest.fixture
def chore_builder():
    return build_chore


@pytest.fixture
def fresh_stats() -> UserStats:
    return UserStats()
