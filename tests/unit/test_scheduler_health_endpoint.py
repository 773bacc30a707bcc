"""Tests for the health check endpoints."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient


def _status(consecutive_failures: int = 0) -> dict:
    return {
        "job_name": "weekly_points_rollover",
        "last_success": "2024-01-01T00:00:00+00:00",
        "last_failure": "2024-01-08T00:00:00+00:00" if consecutive_failures else None,
        "last_error": "Test error" if consecutive_failures else None,
        "consecutive_failures": consecutive_failures,
        "success_count": 4,
        "failure_count": consecutive_failures,
        "currently_running": False,
        "current_run_started": None,
    }


@pytest.mark.unit
def test_health_endpoint_returns_healthy(api_client: TestClient) -> None:
    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.unit
def test_scheduler_health_all_jobs_healthy(api_client: TestClient) -> None:
    """Both rollover jobs are reported; the scheduler is off in tests."""
    with patch("src.core.scheduler.job_tracker") as mock_tracker:
        mock_tracker.get_job_status = AsyncMock(return_value=_status())
        mock_tracker.get_dead_letter_queue = lambda: []

        response = api_client.get("/health/scheduler")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["scheduler_running"] is False
    assert set(data["jobs"]) == {"weekly_points_rollover", "monthly_points_rollover"}
    assert data["jobs"]["weekly_points_rollover"]["next_run"] is None
    assert data["dead_letter_queue_size"] == 0


@pytest.mark.unit
def test_scheduler_health_degraded_with_failures(api_client: TestClient) -> None:
    with patch("src.core.scheduler.job_tracker") as mock_tracker:
        mock_tracker.get_job_status = AsyncMock(return_value=_status(consecutive_failures=1))
        mock_tracker.get_dead_letter_queue = lambda: []

        response = api_client.get("/health/scheduler")

    assert response.status_code == 503
    assert response.json()["status"] == "degraded"


@pytest.mark.unit
def test_scheduler_health_critical_with_dead_letters(api_client: TestClient) -> None:
    dead = [{"job_name": "monthly_points_rollover", "error": "locked", "context": "Failed 3 consecutive times"}]

    with patch("src.core.scheduler.job_tracker") as mock_tracker:
        mock_tracker.get_job_status = AsyncMock(return_value=_status(consecutive_failures=3))
        mock_tracker.get_dead_letter_queue = lambda: dead

        response = api_client.get("/health/scheduler")

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "critical"
    assert data["dead_letter_queue_size"] == 1
    assert data["dead_letter_queue"] == dead
