from src.services import (
    session_service,
    stats_service,
    user_service,
)


__all__ = [
    "session_service",
    "stats_service",
    "user_service",
]
