"""Grocery list domain models."""

from datetime import datetime

from pydantic import BaseModel, Field


class GroceryItem(BaseModel):
    """Shopping list item shared by a team."""

    id: str = Field(..., description="Unique item ID")
    name: str = Field(..., description="Item name (e.g., 'Milk')")
    quantity: str | None = Field(default=None, description="Free-text quantity (e.g., '2 litres')")
    category: str | None = Field(default=None, description="Optional aisle or category")
    is_purchased: bool = Field(default=False, description="Whether the item has been bought")
    added_by: str = Field(..., description="User ID who added the item")
    purchased_by: str | None = Field(default=None, description="User ID who bought the item")
    team_id: str = Field(..., description="Owning team")
    created: datetime | None = None
    updated: datetime | None = None
