"""User service for signup, login, team membership and leaderboards."""

import logging
import secrets
import string
from typing import Any, Literal

import bcrypt

from src.core import clock, db_client
from src.core.config import constants
from src.core.db_client import sanitize_param
from src.core.logging import span
from src.domain.user import Team, User, UserStats
from src.modules.tasks.gamification import level_name


logger = logging.getLogger(__name__)

LeaderboardPeriod = Literal["all", "weekly", "monthly"]

_POINTS_FIELD: dict[str, str] = {
    "all": "total_points",
    "weekly": "weekly_points",
    "monthly": "monthly_points",
}

_INVITE_ALPHABET = string.ascii_uppercase + string.digits
_MAX_INVITE_CODE_ATTEMPTS = 10


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against its stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        logger.warning("password_hash_malformed")
        return False


def public_user(record: dict[str, Any]) -> dict[str, Any]:
    """Strip secrets from a user record and normalize its stats."""
    user = User.model_validate({**record, "stats": record.get("stats") or {}})
    return user.model_dump(mode="json")


def _public_team(record: dict[str, Any]) -> dict[str, Any]:
    return Team.model_validate(record).model_dump(mode="json")


async def _generate_invite_code() -> str:
    for _ in range(_MAX_INVITE_CODE_ATTEMPTS):
        code = "".join(secrets.choice(_INVITE_ALPHABET) for _ in range(constants.INVITE_CODE_LENGTH))
        existing = await db_client.get_first_record(collection="teams", filter_query=f'invite_code = "{code}"')
        if existing is None:
            return code
    msg = "Could not generate a unique invite code"
    raise RuntimeError(msg)


async def _find_user_by_email(email: str) -> dict[str, Any] | None:
    return await db_client.get_first_record(
        collection="users",
        filter_query=f'email = "{sanitize_param(email)}"',
    )


def _normalize_email(email: str) -> str:
    email = (email or "").strip().lower()
    if "@" not in email or '"' in email:
        msg = "Please enter a valid email address"
        raise ValueError(msg)
    return email


async def signup(
    *,
    name: str,
    email: str,
    password: str,
    team_option: str,
    team_name_or_code: str,
) -> dict[str, Any]:
    """Create an account, founding a new team or joining one by invite code.

    Returns:
        Dict with the public user, team and team member list

    Raises:
        ValueError: If a field is missing, the email is taken or the invite code is unknown
    """
    with span("user_service.signup"):
        name = (name or "").strip()
        team_name_or_code = (team_name_or_code or "").strip()
        if not name or not email or not password or not team_option or not team_name_or_code:
            msg = "All fields are required"
            raise ValueError(msg)
        if team_option not in ("create", "join"):
            msg = "Team option must be 'create' or 'join'"
            raise ValueError(msg)

        email = _normalize_email(email)
        if await _find_user_by_email(email):
            msg = "An account with this email already exists"
            raise ValueError(msg)

        if team_option == "create":
            team = await db_client.create_record(
                collection="teams",
                data={
                    "name": team_name_or_code,
                    "invite_code": await _generate_invite_code(),
                    "created": clock.utc_timestamp(clock.now()),
                },
            )
        else:
            code = team_name_or_code.upper()
            team = await db_client.get_first_record(
                collection="teams",
                filter_query=f'invite_code = "{sanitize_param(code)}"',
            )
            if team is None:
                msg = f'Invalid invite code. No team found with code "{code}"'
                raise ValueError(msg)

        user = await db_client.create_record(
            collection="users",
            data={
                "name": name,
                "email": email,
                "password_hash": hash_password(password),
                "team_id": team["id"],
                "stats": UserStats().model_dump(mode="json"),
                "created": clock.utc_timestamp(clock.now()),
            },
        )

        if team_option == "create":
            team = await db_client.update_record(
                collection="teams",
                record_id=team["id"],
                data={"created_by": user["id"]},
            )

        logger.info(
            "User signed up",
            extra={"user_id": user["id"], "team_id": team["id"], "team_option": team_option},
        )
        return {
            "user": public_user(user),
            "team": _public_team(team),
            "team_members": await list_team_members(team_id=team["id"]),
        }


async def login(*, email: str, password: str) -> dict[str, Any]:
    """Verify credentials and return the public user.

    Raises:
        ValueError: If the email is unknown or the password is wrong
    """
    with span("user_service.login"):
        if not email or not password:
            msg = "Email and password are required"
            raise ValueError(msg)

        record = await _find_user_by_email(email.strip().lower())
        if record is None or not verify_password(password, record["password_hash"]):
            logger.info("login_failed")
            msg = "Invalid email or password"
            raise ValueError(msg)

        logger.info("User logged in", extra={"user_id": record["id"]})
        return public_user(record)


async def get_user(*, user_id: str) -> dict[str, Any]:
    """Fetch a public user record by ID."""
    record = await db_client.get_record(collection="users", record_id=user_id)
    return public_user(record)


async def list_team_members(*, team_id: str) -> list[dict[str, Any]]:
    """All members of a team in signup order."""
    records = await db_client.list_records(
        collection="users",
        filter_query=f'team_id = "{sanitize_param(team_id)}"',
        sort="+id",
        per_page=constants.DEFAULT_PER_PAGE_LIMIT,
    )
    return [public_user(record) for record in records]


async def get_profile(*, user_id: str) -> dict[str, Any]:
    """The user, their team and its members."""
    with span("user_service.get_profile"):
        user = await get_user(user_id=user_id)
        team = None
        members: list[dict[str, Any]] = []
        if user["team_id"]:
            team = _public_team(await db_client.get_record(collection="teams", record_id=user["team_id"]))
            members = await list_team_members(team_id=user["team_id"])
        return {"user": user, "team": team, "team_members": members}


async def get_leaderboard(*, team_id: str, period: LeaderboardPeriod = "all") -> list[dict[str, Any]]:
    """Rank team members by the points accumulated over ``period``.

    Ties keep signup order; ranks start at 1.

    Raises:
        ValueError: If the period is not one of all, weekly or monthly
    """
    with span("user_service.get_leaderboard"):
        field = _POINTS_FIELD.get(period)
        if field is None:
            msg = f"Unknown leaderboard period: {period}"
            raise ValueError(msg)

        members = await list_team_members(team_id=team_id)
        ranked = sorted(members, key=lambda member: member["stats"][field], reverse=True)

        return [
            {
                "rank": rank,
                "user_id": member["id"],
                "name": member["name"],
                "points": member["stats"][field],
                "level": member["stats"]["level"],
                "level_name": level_name(member["stats"]["level"]),
                "current_streak": member["stats"]["current_streak"],
                "badge_count": len(member["stats"]["badges"]),
            }
            for rank, member in enumerate(ranked, start=1)
        ]


async def reset_period_points(*, period: Literal["weekly", "monthly"]) -> int:
    """Zero every user's weekly or monthly accumulator.

    Each user is written with a version-checked update; a user whose stats
    changed mid-rollover is re-read and retried.

    Returns:
        Number of users reset
    """
    with span("user_service.reset_period_points"):
        if period not in ("weekly", "monthly"):
            msg = f"Unknown rollover period: {period}"
            raise ValueError(msg)
        field = _POINTS_FIELD[period]

        page = 1
        reset_count = 0
        while True:
            records = await db_client.list_records(
                collection="users",
                page=page,
                per_page=constants.DEFAULT_PER_PAGE_LIMIT,
            )
            for record in records:
                if await _reset_user_field(record=record, field=field):
                    reset_count += 1
            if len(records) < constants.DEFAULT_PER_PAGE_LIMIT:
                break
            page += 1

        logger.info("Reset period points", extra={"period": period, "users_reset": reset_count})
        return reset_count


async def _reset_user_field(*, record: dict[str, Any], field: str, max_attempts: int = 5) -> bool:
    for _ in range(max_attempts):
        stats = UserStats.model_validate(record.get("stats") or {})
        if getattr(stats, field) == 0:
            return False
        written = await db_client.compare_and_update(
            collection="users",
            record_id=record["id"],
            expected_version=record["version"],
            data={"stats": stats.model_copy(update={field: 0}).model_dump(mode="json")},
        )
        if written is not None:
            return True
        record = await db_client.get_record(collection="users", record_id=record["id"])

    msg = f"Could not reset {field} for user {record['id']}"
    raise db_client.DatabaseError(msg)
