"""Grocery service: the team's shared shopping list."""

import logging
from typing import Any

from src.core import clock, db_client
from src.core.config import constants
from src.core.db_client import sanitize_param
from src.core.logging import span
from src.domain.grocery import GroceryItem


logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("name", "quantity", "category")


async def _get_actor(actor_id: str) -> dict[str, Any]:
    return await db_client.get_record(collection="users", record_id=actor_id)


async def _get_team_item(*, item_id: str, actor: dict[str, Any]) -> dict[str, Any]:
    item = await db_client.get_record(collection="grocery_items", record_id=item_id)
    if item["team_id"] != actor.get("team_id"):
        msg = "This item belongs to another team"
        raise PermissionError(msg)
    return item


def _with_names(item: dict[str, Any], names: dict[str, str]) -> dict[str, Any]:
    formatted = dict(item)
    formatted["added_by"] = {"id": item["added_by"], "name": names.get(item["added_by"])}
    formatted["purchased_by"] = (
        {"id": item["purchased_by"], "name": names.get(item["purchased_by"])} if item.get("purchased_by") else None
    )
    return formatted


async def _member_names(team_id: str) -> dict[str, str]:
    members = await db_client.list_records(
        collection="users",
        filter_query=f'team_id = "{sanitize_param(team_id)}"',
        per_page=constants.DEFAULT_PER_PAGE_LIMIT,
    )
    return {member["id"]: member["name"] for member in members}


async def list_items(*, user_id: str) -> list[dict[str, Any]]:
    """Team items, unpurchased first and newest first within each group, with member names."""
    with span("grocery_service.list_items"):
        actor = await _get_actor(user_id)
        team_id = actor["team_id"]
        items = await db_client.list_records(
            collection="grocery_items",
            filter_query=f'team_id = "{sanitize_param(team_id)}"',
            sort="+is_purchased,-created,-id",
            per_page=constants.DEFAULT_PER_PAGE_LIMIT,
        )
        names = await _member_names(team_id)
        return [_with_names(item, names) for item in items]


async def add_item(
    *,
    user_id: str,
    name: str,
    quantity: str | None = None,
    category: str | None = None,
) -> dict[str, Any]:
    """Add an item to the team list.

    Raises:
        ValueError: If the name is empty after trimming
    """
    with span("grocery_service.add_item"):
        name = (name or "").strip()
        if not name:
            msg = "Item name is required"
            raise ValueError(msg)

        actor = await _get_actor(user_id)
        now = clock.now()
        item = await db_client.create_record(
            collection="grocery_items",
            data={
                "name": name,
                "quantity": (quantity or "").strip() or None,
                "category": (category or "").strip() or None,
                "added_by": user_id,
                "team_id": actor["team_id"],
                "created": clock.utc_timestamp(now),
                "updated": clock.utc_timestamp(now),
            },
        )
        logger.info("Added grocery item", extra={"item_id": item["id"], "team_id": actor["team_id"]})
        return _with_names(item, {user_id: actor["name"]})


async def toggle_purchased(*, item_id: str, user_id: str) -> dict[str, Any]:
    """Flip an item's purchased flag, recording or clearing the purchaser."""
    with span("grocery_service.toggle_purchased"):
        actor = await _get_actor(user_id)
        item = await _get_team_item(item_id=item_id, actor=actor)
        purchased = not GroceryItem.model_validate(item).is_purchased
        updated = await db_client.update_record(
            collection="grocery_items",
            record_id=item_id,
            data={"is_purchased": purchased, "purchased_by": user_id if purchased else None},
        )
        logger.info("Toggled grocery item", extra={"item_id": item_id, "is_purchased": purchased})
        return _with_names(updated, await _member_names(actor["team_id"]))


async def update_item(*, item_id: str, user_id: str, updates: dict[str, Any]) -> dict[str, Any]:
    """Edit an item's name, quantity or category.

    Raises:
        ValueError: If the name is blanked or a non-editable field is given
    """
    with span("grocery_service.update_item"):
        unknown = set(updates) - set(_EDITABLE_FIELDS)
        if unknown:
            msg = f"Fields cannot be edited: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        actor = await _get_actor(user_id)
        item = await _get_team_item(item_id=item_id, actor=actor)

        data = dict(updates)
        if "name" in data:
            data["name"] = (data["name"] or "").strip()
            if not data["name"]:
                msg = "Item name is required"
                raise ValueError(msg)
        if not data:
            return _with_names(item, await _member_names(actor["team_id"]))

        updated = await db_client.update_record(collection="grocery_items", record_id=item_id, data=data)
        return _with_names(updated, await _member_names(actor["team_id"]))


async def delete_item(*, item_id: str, user_id: str) -> None:
    """Remove an item from the team list."""
    with span("grocery_service.delete_item"):
        actor = await _get_actor(user_id)
        await _get_team_item(item_id=item_id, actor=actor)
        await db_client.delete_record(collection="grocery_items", record_id=item_id)
        logger.info("Deleted grocery item", extra={"item_id": item_id, "user_id": user_id})
