"""Unit tests for completion history and personal stats."""

import pytest

import src.modules.tasks.service as chore_service
from src.services import stats_service
from tests.conftest import at


@pytest.mark.unit
class TestCompletionHistory:
    """Tests for completion_history function."""

    async def test_counts_per_day_for_owned_and_assigned_chores(self, household):
        alice, bob = household["alice"]["id"], household["bob"]["id"]
        dishes = await chore_service.create_chore(owner_id=alice, title="Dishes", frequency="daily")
        laundry = await chore_service.create_chore(owner_id=bob, title="Laundry", frequency="daily", assigned_to=alice)
        bins = await chore_service.create_chore(owner_id=bob, title="Bins", frequency="daily")

        await chore_service.toggle_chore(chore_id=dishes["id"], actor_id=alice, now=at(2024, 1, 1, 9))
        await chore_service.toggle_chore(chore_id=laundry["id"], actor_id=alice, now=at(2024, 1, 1, 10))
        await chore_service.list_chores(user_id=alice, now=at(2024, 1, 3, 8))
        await chore_service.toggle_chore(chore_id=dishes["id"], actor_id=alice, now=at(2024, 1, 3, 9))
        await chore_service.toggle_chore(chore_id=bins["id"], actor_id=bob, now=at(2024, 1, 2, 9))

        history = await stats_service.completion_history(user_id=alice)

        assert history == [{"date": "2024-01-01", "count": 2}, {"date": "2024-01-03", "count": 1}]

    async def test_empty_history(self, household):
        assert await stats_service.completion_history(user_id=household["carol"]["id"]) == []


@pytest.mark.unit
class TestGetMyStats:
    async def test_new_member(self, household):
        result = await stats_service.get_my_stats(user_id=household["alice"]["id"])

        assert result["stats"]["total_points"] == 0
        assert result["level_name"] == "Rookie"
        assert result["level_progress"]["next_threshold"] == 100
        assert result["level_progress"]["progress"] == 0.0

    async def test_after_completion(self, household):
        alice = household["alice"]["id"]
        chore = await chore_service.create_chore(owner_id=alice, title="Oven", frequency="monthly", day_of_month=1)
        await chore_service.toggle_chore(chore_id=chore["id"], actor_id=alice, now=at(2024, 1, 1))

        result = await stats_service.get_my_stats(user_id=alice)

        assert result["stats"]["total_points"] == 50
        assert result["stats"]["total_completed"] == 1
        assert result["level_progress"]["progress"] == 50.0
