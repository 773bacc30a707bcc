"""Chore endpoints."""

from typing import Any

from fastapi import APIRouter, status

from src.domain.create_models import ChoreCreate
from src.domain.update_models import ChoreUpdate, PositionUpdate
from src.interface.dependencies import CurrentUser
from src.modules.tasks import service as chore_service


router = APIRouter(prefix="/api/chores", tags=["chores"])


@router.get("")
async def list_chores(user: CurrentUser, all: bool = False) -> dict[str, Any]:  # noqa: A002
    """Chores due today, or every team chore with ``?all=true``."""
    chores = await chore_service.list_chores(user_id=user["id"], include_all=all)
    return {"chores": chores}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_chore(payload: ChoreCreate, user: CurrentUser) -> dict[str, Any]:
    chore = await chore_service.create_chore(owner_id=user["id"], **payload.model_dump())
    return {"success": True, "chore": chore}


@router.get("/{chore_id}")
async def get_chore(chore_id: str, user: CurrentUser) -> dict[str, Any]:
    return {"chore": await chore_service.get_chore(chore_id=chore_id, actor_id=user["id"])}


@router.patch("/{chore_id}")
async def update_chore(chore_id: str, payload: ChoreUpdate, user: CurrentUser) -> dict[str, Any]:
    chore = await chore_service.update_chore(
        chore_id=chore_id,
        actor_id=user["id"],
        updates=payload.model_dump(exclude_unset=True),
    )
    return {"success": True, "chore": chore}


@router.delete("/{chore_id}")
async def delete_chore(chore_id: str, user: CurrentUser) -> dict[str, Any]:
    await chore_service.delete_chore(chore_id=chore_id, actor_id=user["id"])
    return {"success": True}


@router.post("/{chore_id}/toggle")
async def toggle_chore(chore_id: str, user: CurrentUser) -> dict[str, Any]:
    """Complete or un-complete a chore, returning points, new badges and updated stats."""
    result = await chore_service.toggle_chore(chore_id=chore_id, actor_id=user["id"])
    return {"success": True, **result}


@router.patch("/{chore_id}/position")
async def reorder_chore(chore_id: str, payload: PositionUpdate, user: CurrentUser) -> dict[str, Any]:
    chore = await chore_service.reorder_chore(chore_id=chore_id, actor_id=user["id"], position=payload.position)
    return {"success": True, "chore": chore}
