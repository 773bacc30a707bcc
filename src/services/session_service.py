"""Signed session tokens for authenticated members."""

import logging
from typing import Any

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from src.core.config import constants, settings


logger = logging.getLogger(__name__)

serializer = URLSafeTimedSerializer(str(settings.secret_key), salt=constants.SESSION_SALT)


def session_max_age_seconds() -> int:
    return settings.session_max_age_days * 24 * 60 * 60


def create_session_token(*, user_id: str, email: str) -> str:
    """Sign a session payload for the user."""
    return serializer.dumps({"user_id": user_id, "email": email})


def verify_session_token(token: str | None) -> dict[str, Any] | None:
    """Return the session payload, or None if the token is missing, tampered with or expired."""
    if not token:
        return None

    try:
        payload = serializer.loads(token, max_age=session_max_age_seconds())
    except SignatureExpired:
        logger.info("session_expired")
        return None
    except BadSignature:
        logger.warning("session_invalid_signature")
        return None

    if not isinstance(payload, dict) or "user_id" not in payload:
        logger.warning("session_malformed_payload")
        return None
    return payload
