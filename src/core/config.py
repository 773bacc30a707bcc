"""Configuration management for homestreak."""

from zoneinfo import ZoneInfo

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SECRET_KEY = "dev-insecure-secret-key"  # noqa: S105


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database Configuration
    sqlite_db_path: str = Field(default="data/homestreak.db", description="Path to the SQLite database file")

    # Session Configuration
    secret_key: str = Field(default=DEFAULT_SECRET_KEY, description="Secret used to sign session tokens")
    session_max_age_days: int = Field(default=7, description="Lifetime of a session token in days")

    # Runtime Environment
    environment: str = Field(default="development", description="Deployment environment (development/production)")
    timezone: str = Field(
        default="UTC", description="IANA timezone used for calendar days, streaks and scheduled jobs"
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")

    # Chore Completion
    toggle_max_attempts: int = Field(
        default=3, description="Conditional-write attempts for a completion toggle before reporting a conflict"
    )

    # Scheduler
    enable_scheduler: bool = Field(default=True, description="Run the in-process scheduler for points rollover")

    @property
    def is_production(self) -> bool:
        """Whether the service runs in production (secure cookies, strict credentials)."""
        return self.environment.lower() == "production"

    @property
    def tzinfo(self) -> ZoneInfo:
        """Household timezone as a tzinfo object."""
        return ZoneInfo(self.timezone)

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None, empty or left at its insecure default
        """
        value = getattr(self, field_name)
        if not value or (field_name == "secret_key" and value == DEFAULT_SECRET_KEY):
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value


# Application Constants
class Constants:
    """Application-wide constants."""

    # HTTP Status Codes
    HTTP_BAD_REQUEST: int = 400
    HTTP_UNAUTHORIZED: int = 401
    HTTP_FORBIDDEN: int = 403
    HTTP_NOT_FOUND: int = 404
    HTTP_CONFLICT: int = 409
    HTTP_SERVER_ERROR: int = 500

    # Session Cookie
    SESSION_COOKIE_NAME: str = "token"
    SESSION_SALT: str = "homestreak-session"

    # Teams
    INVITE_CODE_LENGTH: int = 6

    # Scheduler Configuration
    WEEKLY_ROLLOVER_CRON: str = "0 0 * * mon"  # Monday midnight
    MONTHLY_ROLLOVER_CRON: str = "0 0 1 * *"  # 1st of the month, midnight

    # Pagination Defaults
    DEFAULT_PER_PAGE_LIMIT: int = 500  # Default pagination limit for list queries

    # Job Tracker Configuration
    TRACKER_DEAD_LETTER_QUEUE_MAXLEN: int = 100  # Max items in dead letter queue
    TRACKER_DEAD_LETTER_THRESHOLD: int = 3  # Consecutive failures before dead-lettering


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
