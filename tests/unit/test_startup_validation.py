"""Tests for startup validation."""

import pytest

from src.core.config import DEFAULT_SECRET_KEY, Settings
from src.main import validate_startup_configuration


def test_production_rejects_default_secret() -> None:
    settings = Settings(environment="production", secret_key=DEFAULT_SECRET_KEY)

    with pytest.raises(ValueError, match="SECRET_KEY"):
        settings.require_credential("secret_key", "Session signing")


def test_production_rejects_empty_secret() -> None:
    settings = Settings(environment="production", secret_key="")

    with pytest.raises(ValueError, match="Session signing credential not configured"):
        settings.require_credential("secret_key", "Session signing")


def test_validation_skipped_outside_production(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("src.main.settings.environment", "development")
    monkeypatch.setattr("src.main.settings.secret_key", DEFAULT_SECRET_KEY)

    validate_startup_configuration()


def test_validation_exits_in_production_without_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    """Production refuses to start with the insecure default secret."""
    monkeypatch.setattr("src.main.settings.environment", "production")
    monkeypatch.setattr("src.main.settings.secret_key", DEFAULT_SECRET_KEY)

    with pytest.raises(SystemExit) as exc_info:
        validate_startup_configuration()

    assert exc_info.value.code == 1


def test_validation_passes_in_production_with_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("src.main.settings.environment", "production")
    monkeypatch.setattr("src.main.settings.secret_key", "a-long-random-production-secret")

    validate_startup_configuration()
