"""Unit tests for user_service module."""

import string

import pytest

from src.core import db_client
from src.services import user_service


@pytest.mark.unit
class TestSignup:
    """Tests for signup function."""

    async def test_create_team(self, db):
        """Founding a team makes the user its creator and issues an invite code."""
        result = await user_service.signup(
            name=" Alice ",
            email="Alice@Example.com",
            password="alice-pass",
            team_option="create",
            team_name_or_code="The Flat",
        )

        user, team = result["user"], result["team"]
        assert user["name"] == "Alice"
        assert user["email"] == "alice@example.com"
        assert user["team_id"] == team["id"]
        assert user["stats"]["total_points"] == 0
        assert user["stats"]["badges"] == []
        assert "password_hash" not in user
        assert team["name"] == "The Flat"
        assert team["created_by"] == user["id"]
        assert len(team["invite_code"]) == 6
        assert set(team["invite_code"]) <= set(string.ascii_uppercase + string.digits)
        assert [member["id"] for member in result["team_members"]] == [user["id"]]

    async def test_join_with_invite_code(self, db):
        """Invite codes are matched case-insensitively."""
        founder = await user_service.signup(
            name="Alice", email="alice@example.com", password="pw", team_option="create", team_name_or_code="Flat"
        )

        joined = await user_service.signup(
            name="Bob",
            email="bob@example.com",
            password="pw",
            team_option="join",
            team_name_or_code=founder["team"]["invite_code"].lower(),
        )

        assert joined["user"]["team_id"] == founder["team"]["id"]
        assert [member["name"] for member in joined["team_members"]] == ["Alice", "Bob"]

    async def test_unknown_invite_code(self, db):
        with pytest.raises(ValueError, match='Invalid invite code. No team found with code "ZZZ999"'):
            await user_service.signup(
                name="Bob", email="bob@example.com", password="pw", team_option="join", team_name_or_code="zzz999"
            )

    async def test_unknown_code_creates_no_user(self, db):
        with pytest.raises(ValueError):
            await user_service.signup(
                name="Bob", email="bob@example.com", password="pw", team_option="join", team_name_or_code="NOPE00"
            )

        assert await db_client.count_records(collection="users") == 0

    async def test_duplicate_email(self, household):
        with pytest.raises(ValueError, match="already exists"):
            await user_service.signup(
                name="Alice Again",
                email="ALICE@example.com",
                password="pw",
                team_option="create",
                team_name_or_code="Another",
            )

    @pytest.mark.parametrize("missing", ["name", "email", "password", "team_name_or_code"])
    async def test_all_fields_required(self, db, missing):
        fields = {
            "name": "Alice",
            "email": "alice@example.com",
            "password": "pw",
            "team_option": "create",
            "team_name_or_code": "Flat",
        }
        fields[missing] = ""

        with pytest.raises(ValueError, match="All fields are required"):
            await user_service.signup(**fields)

    async def test_bad_team_option(self, db):
        with pytest.raises(ValueError, match="Team option"):
            await user_service.signup(
                name="Alice", email="alice@example.com", password="pw", team_option="steal", team_name_or_code="x"
            )

    async def test_password_is_hashed(self, household):
        record = await db_client.get_record(collection="users", record_id=household["alice"]["id"])

        assert record["password_hash"] != "alice-pass"
        assert user_service.verify_password("alice-pass", record["password_hash"])


@pytest.mark.unit
class TestLogin:
    """Tests for login function."""

    async def test_login_success(self, household):
        user = await user_service.login(email=" ALICE@example.com", password="alice-pass")

        assert user["id"] == household["alice"]["id"]

    async def test_wrong_password(self, household):
        with pytest.raises(ValueError, match="Invalid email or password"):
            await user_service.login(email="alice@example.com", password="nope")

    async def test_unknown_email(self, household):
        with pytest.raises(ValueError, match="Invalid email or password"):
            await user_service.login(email="nobody@example.com", password="alice-pass")

    async def test_missing_fields(self, db):
        with pytest.raises(ValueError, match="required"):
            await user_service.login(email="", password="")


@pytest.mark.unit
class TestPasswords:
    def test_verify_rejects_malformed_hash(self):
        assert user_service.verify_password("pw", "not-a-bcrypt-hash") is False

    def test_hash_round_trip(self):
        hashed = user_service.hash_password("s3cret")

        assert user_service.verify_password("s3cret", hashed)
        assert not user_service.verify_password("other", hashed)


@pytest.mark.unit
class TestProfileAndLeaderboard:
    """Tests for get_profile and get_leaderboard."""

    async def test_profile_includes_team_and_members(self, household):
        profile = await user_service.get_profile(user_id=household["bob"]["id"])

        assert profile["user"]["name"] == "Bob"
        assert profile["team"]["id"] == household["team"]["id"]
        assert [member["name"] for member in profile["team_members"]] == ["Alice", "Bob", "Carol"]

    async def test_get_user_missing(self, db):
        with pytest.raises(db_client.RecordNotFoundError):
            await user_service.get_user(user_id="42")

    async def _set_stats(self, user_id: str, **stats):
        record = await db_client.get_record(collection="users", record_id=user_id)
        await db_client.update_record(
            collection="users", record_id=user_id, data={"stats": {**record["stats"], **stats}}
        )

    async def test_leaderboard_ranks_by_period(self, household):
        """Weekly and all-time boards can rank members differently."""
        await self._set_stats(household["alice"]["id"], total_points=300, weekly_points=10, level=2)
        await self._set_stats(household["bob"]["id"], total_points=120, weekly_points=60, level=1)
        await self._set_stats(household["carol"]["id"], total_points=50, weekly_points=20)

        overall = await user_service.get_leaderboard(team_id=household["team"]["id"])
        weekly = await user_service.get_leaderboard(team_id=household["team"]["id"], period="weekly")

        assert [(entry["rank"], entry["name"], entry["points"]) for entry in overall] == [
            (1, "Alice", 300),
            (2, "Bob", 120),
            (3, "Carol", 50),
        ]
        assert [entry["name"] for entry in weekly] == ["Bob", "Carol", "Alice"]
        assert overall[0]["level_name"] == "Contributor"
        assert overall[0]["badge_count"] == 0

    async def test_leaderboard_ties_keep_signup_order(self, household):
        board = await user_service.get_leaderboard(team_id=household["team"]["id"], period="monthly")

        assert [entry["name"] for entry in board] == ["Alice", "Bob", "Carol"]
        assert [entry["rank"] for entry in board] == [1, 2, 3]

    async def test_leaderboard_excludes_other_teams(self, household, outsider):
        board = await user_service.get_leaderboard(team_id=household["team"]["id"])

        assert outsider["id"] not in {entry["user_id"] for entry in board}

    async def test_unknown_period(self, household):
        with pytest.raises(ValueError, match="Unknown leaderboard period"):
            await user_service.get_leaderboard(team_id=household["team"]["id"], period="daily")


@pytest.mark.unit
class TestResetPeriodPoints:
    """Tests for reset_period_points function."""

    async def _stats(self, user_id: str) -> dict:
        return (await db_client.get_record(collection="users", record_id=user_id))["stats"]

    async def test_weekly_reset_leaves_other_counters(self, household):
        alice = household["alice"]["id"]
        record = await db_client.get_record(collection="users", record_id=alice)
        await db_client.update_record(
            collection="users",
            record_id=alice,
            data={"stats": {**record["stats"], "total_points": 80, "weekly_points": 30, "monthly_points": 55}},
        )

        reset = await user_service.reset_period_points(period="weekly")

        stats = await self._stats(alice)
        assert reset == 1
        assert stats["weekly_points"] == 0
        assert stats["monthly_points"] == 55
        assert stats["total_points"] == 80

    async def test_monthly_reset(self, household):
        for member in ("alice", "bob"):
            user_id = household[member]["id"]
            record = await db_client.get_record(collection="users", record_id=user_id)
            await db_client.update_record(
                collection="users", record_id=user_id, data={"stats": {**record["stats"], "monthly_points": 25}}
            )

        assert await user_service.reset_period_points(period="monthly") == 2
        assert (await self._stats(household["bob"]["id"]))["monthly_points"] == 0

    async def test_unknown_period(self, db):
        with pytest.raises(ValueError):
            await user_service.reset_period_points(period="yearly")
