"""Pydantic schemas for grocery item input and regeneration previews."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from groceryplanner.enums import IngredientCategory, MeasurementUnit, SourceType


class GroceryItemCreate(BaseModel):
    """A manual item typed in by the user."""

    name: str = Field(min_length=1, max_length=255)
    quantity: float | None = Field(None, ge=0)
    unit: MeasurementUnit | None = None
    category: IngredientCategory = IngredientCategory.OTHER
    notes: str | None = Field(None, max_length=500)


class GroceryItemUpdate(GroceryItemCreate):
    """Replacement values for an existing item."""


class GroceryItemRead(BaseModel):
    """Grocery item as shown to the user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    quantity: float | None
    unit: MeasurementUnit | None
    category: IngredientCategory
    source_type: SourceType
    purchased: bool
    notes: str | None
    sort_order: int
    display_quantity: str
    is_edited: bool


class GroceryListRead(BaseModel):
    """Grocery list with its visible items."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    meal_plan_id: int | None
    generated_at: datetime | None
    regenerated_at: datetime | None
    completion_percentage: float
    active_items: list[GroceryItemRead] = Field(default_factory=list)


class RegenerationPreview(BaseModel):
    """What regenerating a list would change, without changing it."""

    added: int = Field(0, description="New ingredients that would be added")
    updated: int = Field(0, description="Unedited generated items that would be refreshed")
    removed: int = Field(0, description="Unedited generated items no longer in the plan")
    preserved_manual: int = Field(0, description="Manual items left untouched")
    preserved_edited: int = Field(0, description="Edited generated items left untouched")
