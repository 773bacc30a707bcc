"""Signup, login, logout and the current member's profile."""

import logging
from typing import Any

from fastapi import APIRouter, Response

from src.domain.create_models import LoginRequest, SignupRequest
from src.interface.dependencies import CurrentUser, clear_session_cookie, set_session_cookie
from src.services import user_service
from src.services.session_service import create_session_token


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup")
async def signup(payload: SignupRequest, response: Response) -> dict[str, Any]:
    """Create an account and start a session."""
    result = await user_service.signup(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        team_option=payload.team_option,
        team_name_or_code=payload.team_name_or_code,
    )
    token = create_session_token(user_id=result["user"]["id"], email=result["user"]["email"])
    set_session_cookie(response, token)
    return {"success": True, **result, "token": token}


@router.post("/login")
async def login(payload: LoginRequest, response: Response) -> dict[str, Any]:
    """Verify credentials and start a session."""
    user = await user_service.login(email=payload.email, password=payload.password)
    profile = await user_service.get_profile(user_id=user["id"])
    token = create_session_token(user_id=user["id"], email=user["email"])
    set_session_cookie(response, token)
    return {"success": True, **profile, "token": token}


@router.post("/logout")
async def logout(response: Response) -> dict[str, Any]:
    clear_session_cookie(response)
    logger.info("logout_success")
    return {"success": True}


@router.get("/me")
async def me(user: CurrentUser) -> dict[str, Any]:
    """The current member with their team and teammates."""
    return await user_service.get_profile(user_id=user["id"])
