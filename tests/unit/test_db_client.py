"""Unit tests for the SQLite document store."""

import pytest

from src.core import db_client


@pytest.mark.unit
class TestParseFilter:
    def test_empty(self):
        assert db_client.parse_filter("") == ("", [])

    def test_and_conditions_with_typed_values(self):
        clause, params = db_client.parse_filter('team_id = "3" && name != "Milk" && is_purchased = "false"')

        assert clause == "team_id = ? AND name != ? AND is_purchased = ?"
        assert params == [3, "Milk", False]

    def test_or_group(self):
        clause, params = db_client.parse_filter('(owner_id = "1" || assigned_to = "1") && team_id = "2"')

        assert clause == "(owner_id = ? OR assigned_to = ?) AND team_id = ?"
        assert params == [1, 1, 2]

    def test_like_escapes_wildcards(self):
        clause, params = db_client.parse_filter('name ~ "50%_off"')

        assert clause == "name LIKE ? ESCAPE '\\'"
        assert params == ["%50\\%\\_off%"]

    def test_range_on_timestamps(self):
        clause, params = db_client.parse_filter(
            'completed_at >= "2024-01-01T00:00:00.000000+00:00" && completed_at < "2024-01-02T00:00:00.000000+00:00"'
        )

        assert clause == "completed_at >= ? AND completed_at < ?"
        assert params[0] == "2024-01-01T00:00:00.000000+00:00"

    def test_invalid_syntax(self):
        with pytest.raises(ValueError, match="Invalid filter syntax"):
            db_client.parse_filter("team_id == 3")


@pytest.mark.unit
class TestParseSort:
    @pytest.mark.parametrize(
        ("sort", "expected"),
        [
            ("-created,-id", "created DESC, id DESC"),
            ("+is_purchased, -created", "is_purchased ASC, created DESC"),
            ("position asc", "position ASC"),
            ("name", "name ASC"),
            ("drop table;", "id ASC"),
            ("", "id ASC"),
        ],
    )
    def test_sort_terms(self, sort, expected):
        assert db_client.parse_sort(sort) == expected


@pytest.mark.unit
class TestRecords:
    async def _team(self) -> dict:
        return await db_client.create_record(collection="teams", data={"name": "Flat", "invite_code": "ABC123"})

    async def test_create_get_update_delete(self, db):
        team = await self._team()

        assert team["id"] == "1"
        assert team["name"] == "Flat"

        updated = await db_client.update_record(collection="teams", record_id=team["id"], data={"name": "Loft"})
        assert updated["name"] == "Loft"

        await db_client.delete_record(collection="teams", record_id=team["id"])
        with pytest.raises(db_client.RecordNotFoundError):
            await db_client.get_record(collection="teams", record_id=team["id"])

    async def test_json_and_bool_columns_decode(self, db):
        team = await self._team()
        user = await db_client.create_record(
            collection="users",
            data={"name": "A", "email": "a@example.com", "password_hash": "x", "team_id": team["id"], "stats": {"level": 2}},
        )
        item = await db_client.create_record(
            collection="grocery_items",
            data={"name": "Milk", "added_by": user["id"], "team_id": team["id"], "is_purchased": True},
        )

        assert user["stats"] == {"level": 2}
        assert user["team_id"] == team["id"]
        assert item["is_purchased"] is True
        assert item["added_by"] == user["id"]

    @pytest.mark.parametrize("record_id", ["999", "not-an-id"])
    async def test_missing_records(self, db, record_id):
        with pytest.raises(db_client.RecordNotFoundError):
            await db_client.get_record(collection="teams", record_id=record_id)
        with pytest.raises(db_client.RecordNotFoundError):
            await db_client.update_record(collection="teams", record_id=record_id, data={"name": "x"})
        with pytest.raises(db_client.RecordNotFoundError):
            await db_client.delete_record(collection="teams", record_id=record_id)

    async def test_invalid_collection_name(self, db):
        with pytest.raises(db_client.DatabaseError):
            await db_client.get_record(collection="teams; DROP", record_id="1")

    async def test_list_count_and_first(self, db):
        for code in ("AAA111", "BBB222", "CCC333"):
            await db_client.create_record(collection="teams", data={"name": code[:3], "invite_code": code})

        page = await db_client.list_records(collection="teams", sort="-id", per_page=2)
        second_page = await db_client.list_records(collection="teams", sort="-id", per_page=2, page=2)

        assert [team["invite_code"] for team in page] == ["CCC333", "BBB222"]
        assert [team["invite_code"] for team in second_page] == ["AAA111"]
        assert await db_client.count_records(collection="teams") == 3
        assert await db_client.count_records(collection="teams", filter_query='name = "BBB"') == 1
        assert (await db_client.get_first_record(collection="teams", filter_query='invite_code = "BBB222"'))["name"] == "BBB"
        assert await db_client.get_first_record(collection="teams", filter_query='invite_code = "ZZZ999"') is None


@pytest.mark.unit
class TestCompareAndUpdate:
    async def _user(self) -> dict:
        team = await db_client.create_record(collection="teams", data={"name": "Flat", "invite_code": "ABC123"})
        return await db_client.create_record(
            collection="users",
            data={"name": "A", "email": "a@example.com", "password_hash": "x", "team_id": team["id"]},
        )

    async def test_matching_version_writes_and_bumps(self, db):
        user = await self._user()

        written = await db_client.compare_and_update(
            collection="users", record_id=user["id"], expected_version=0, data={"name": "B"}
        )

        assert written["name"] == "B"
        assert written["version"] == 1

    async def test_stale_version_returns_none(self, db):
        """The second writer holding the old version loses and changes nothing."""
        user = await self._user()
        await db_client.compare_and_update(collection="users", record_id=user["id"], expected_version=0, data={"name": "B"})

        lost = await db_client.compare_and_update(
            collection="users", record_id=user["id"], expected_version=0, data={"name": "C"}
        )

        assert lost is None
        assert (await db_client.get_record(collection="users", record_id=user["id"]))["name"] == "B"

    async def test_missing_record_raises(self, db):
        with pytest.raises(db_client.RecordNotFoundError):
            await db_client.compare_and_update(collection="users", record_id="77", expected_version=0, data={"name": "x"})

    async def test_empty_payload_rejected(self, db):
        with pytest.raises(ValueError, match="Empty update payload"):
            await db_client.compare_and_update(collection="users", record_id="1", expected_version=0, data={})
