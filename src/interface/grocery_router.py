"""Grocery list endpoints."""

from typing import Any

from fastapi import APIRouter, status

from src.domain.create_models import GroceryItemCreate
from src.domain.update_models import GroceryItemUpdate
from src.interface.dependencies import CurrentUser
from src.modules.grocery import service as grocery_service


router = APIRouter(prefix="/api/grocery", tags=["grocery"])


@router.get("")
async def list_items(user: CurrentUser) -> dict[str, Any]:
    return {"items": await grocery_service.list_items(user_id=user["id"])}


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_item(payload: GroceryItemCreate, user: CurrentUser) -> dict[str, Any]:
    item = await grocery_service.add_item(user_id=user["id"], **payload.model_dump())
    return {"item": item}


@router.patch("/{item_id}")
async def update_item(item_id: str, payload: GroceryItemUpdate, user: CurrentUser) -> dict[str, Any]:
    item = await grocery_service.update_item(
        item_id=item_id,
        user_id=user["id"],
        updates=payload.model_dump(exclude_unset=True),
    )
    return {"item": item}


@router.post("/{item_id}/toggle")
async def toggle_item(item_id: str, user: CurrentUser) -> dict[str, Any]:
    return {"item": await grocery_service.toggle_purchased(item_id=item_id, user_id=user["id"])}


@router.delete("/{item_id}")
async def delete_item(item_id: str, user: CurrentUser) -> dict[str, Any]:
    await grocery_service.delete_item(item_id=item_id, user_id=user["id"])
    return {"success": True}
