"""Request authentication shared by all API routers."""

import logging
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, Response, status

from src.core.config import constants, settings
from src.core.db_client import RecordNotFoundError
from src.services import user_service
from src.services.session_service import session_max_age_seconds, verify_session_token


logger = logging.getLogger(__name__)


def _token_from_request(request: Request) -> str | None:
    token = request.cookies.get(constants.SESSION_COOKIE_NAME)
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


async def require_user(request: Request) -> dict[str, Any]:
    """Resolve the session cookie or bearer token to the current public user, or fail with 401."""
    payload = verify_session_token(_token_from_request(request))
    if payload is None:
        logger.info("auth_missing_or_invalid_session", extra={"path": request.url.path})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    try:
        return await user_service.get_user(user_id=str(payload["user_id"]))
    except RecordNotFoundError as err:
        logger.warning("auth_session_for_missing_user", extra={"user_id": payload["user_id"]})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated") from err


CurrentUser = Annotated[dict[str, Any], Depends(require_user)]


def set_session_cookie(response: Response, token: str) -> None:
    """Attach the session token as an http-only cookie."""
    response.set_cookie(
        key=constants.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=session_max_age_seconds(),
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=constants.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
