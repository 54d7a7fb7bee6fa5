"""SQLAlchemy database models."""

from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from groceryplanner.database import Base
from groceryplanner.enums import IngredientCategory, MealType, MeasurementUnit, SourceType
from groceryplanner.normalize.units import format_quantity


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _value_enum(enum_cls: type) -> Enum:
    """Store an enum by its value rather than its member name."""
    return Enum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        length=32,
    )


# Quantities are stored to three decimal places and read back as floats
_Quantity = Numeric(10, 3, asdecimal=False)


class Ingredient(Base):
    """Foodstuff referenced by recipes."""

    __tablename__ = "ingredients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    category: Mapped[IngredientCategory] = mapped_column(
        _value_enum(IngredientCategory), default=IngredientCategory.OTHER, nullable=False
    )

    recipe_ingredients: Mapped[list["RecipeIngredient"]] = relationship(
        "RecipeIngredient", back_populates="ingredient"
    )


class Recipe(Base):
    """Recipe with a list of ingredient quantities."""

    __tablename__ = "recipes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    servings: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    recipe_ingredients: Mapped[list["RecipeIngredient"]] = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.sort_order",
    )


class RecipeIngredient(Base):
    """Quantity of an ingredient used by a recipe."""

    __tablename__ = "recipe_ingredients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipe_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    ingredient_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("ingredients.id"), nullable=False
    )
    quantity: Mapped[float | None] = mapped_column(_Quantity, nullable=True)
    unit: Mapped[MeasurementUnit | None] = mapped_column(
        _value_enum(MeasurementUnit), nullable=True
    )
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    notes: Mapped[str | None] = mapped_column(String(255), nullable=True)

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="recipe_ingredients")
    ingredient: Mapped["Ingredient"] = relationship(
        "Ingredient", back_populates="recipe_ingredients", lazy="joined"
    )

    __table_args__ = (
        UniqueConstraint("recipe_id", "ingredient_id", name="uq_recipe_ingredient"),
        Index("idx_recipe_ingredients_recipe_sort", "recipe_id", "sort_order"),
    )


class MealPlan(Base):
    """A user's plan of recipes assigned to dates and meals."""

    __tablename__ = "meal_plans"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    meal_assignments: Mapped[list["MealAssignment"]] = relationship(
        "MealAssignment",
        back_populates="meal_plan",
        cascade="all, delete-orphan",
        order_by=lambda: [MealAssignment.date, MealAssignment.id],
    )
    grocery_lists: Mapped[list["GroceryList"]] = relationship(
        "GroceryList", back_populates="meal_plan"
    )


class MealAssignment(Base):
    """A recipe scheduled into a meal plan slot."""

    __tablename__ = "meal_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    meal_plan_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("meal_plans.id", ondelete="CASCADE"), nullable=False
    )
    recipe_id: Mapped[int] = mapped_column(Integer, ForeignKey("recipes.id"), nullable=False)
    date: Mapped[date] = mapped_column(Date, default=date.today, nullable=False)
    meal_type: Mapped[MealType] = mapped_column(
        _value_enum(MealType), default=MealType.DINNER, nullable=False
    )
    serving_multiplier: Mapped[float | None] = mapped_column(
        Numeric(5, 2, asdecimal=False), nullable=True
    )  # None means the configured default multiplier
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    meal_plan: Mapped["MealPlan"] = relationship("MealPlan", back_populates="meal_assignments")
    recipe: Mapped["Recipe"] = relationship("Recipe")

    __table_args__ = (Index("idx_meal_assignments_plan_date", "meal_plan_id", "date"),)


class GroceryList(Base):
    """Grocery list, either generated from a meal plan or standalone."""

    __tablename__ = "grocery_lists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    meal_plan_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("meal_plans.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    generated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    regenerated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    meal_plan: Mapped["MealPlan | None"] = relationship(
        "MealPlan", back_populates="grocery_lists"
    )
    items: Mapped[list["GroceryItem"]] = relationship(
        "GroceryItem",
        back_populates="grocery_list",
        cascade="all, delete-orphan",
        order_by="GroceryItem.sort_order",
    )

    @property
    def is_standalone(self) -> bool:
        return self.meal_plan_id is None

    @property
    def is_meal_plan_linked(self) -> bool:
        return self.meal_plan_id is not None

    @property
    def active_items(self) -> list["GroceryItem"]:
        """Items not soft-deleted, in display order (category, sort order, name)."""
        return sorted(
            (item for item in self.items if item.deleted_at is None),
            key=lambda item: (item.category.value, item.sort_order, item.name),
        )

    @property
    def total_items(self) -> int:
        return len(self.active_items)

    @property
    def completed_items(self) -> int:
        return sum(1 for item in self.active_items if item.purchased)

    @property
    def completion_percentage(self) -> float:
        """Share of purchased items, 0-100."""
        total = self.total_items
        if total == 0:
            return 0.0
        return round(self.completed_items / total * 100, 2)

    def __repr__(self) -> str:
        return f"<GroceryList(id={self.id}, name={self.name!r}, meal_plan_id={self.meal_plan_id})>"


class GroceryItem(Base):
    """
    Line on a grocery list.

    Generated items carry ``original_values`` once a user edits them and
    ``deleted_at`` once a user removes them; regeneration honours both.
    Items replaced by regeneration are soft-deleted too but also get
    ``superseded_at``, so a later regeneration does not mistake them for
    user deletions.
    """

    __tablename__ = "grocery_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    grocery_list_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("grocery_lists.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[float | None] = mapped_column(_Quantity, nullable=True)
    unit: Mapped[MeasurementUnit | None] = mapped_column(
        _value_enum(MeasurementUnit), nullable=True
    )
    category: Mapped[IngredientCategory] = mapped_column(
        _value_enum(IngredientCategory), default=IngredientCategory.OTHER, nullable=False
    )
    source_type: Mapped[SourceType] = mapped_column(
        _value_enum(SourceType), default=SourceType.MANUAL, nullable=False
    )
    original_values: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    purchased: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    purchased_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    # Set alongside deleted_at when regeneration replaces the item
    superseded_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    grocery_list: Mapped["GroceryList"] = relationship("GroceryList", back_populates="items")

    __table_args__ = (
        Index("idx_grocery_items_list_category_sort", "grocery_list_id", "category", "sort_order"),
        Index("idx_grocery_items_deleted_at", "deleted_at"),
    )

    @property
    def is_generated(self) -> bool:
        return self.source_type == SourceType.GENERATED

    @property
    def is_manual(self) -> bool:
        return self.source_type == SourceType.MANUAL

    @property
    def is_edited(self) -> bool:
        return self.original_values is not None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_user_deleted(self) -> bool:
        """Soft-deleted by the user rather than replaced by regeneration."""
        return self.deleted_at is not None and self.superseded_at is None

    @property
    def display_quantity(self) -> str:
        """Quantity with unit, using common fractions where close enough."""
        return format_quantity(self.quantity, self.unit)

    def __repr__(self) -> str:
        return (
            f"<GroceryItem(id={self.id}, name={self.name!r}, "
            f"source={self.source_type.value}, sort_order={self.sort_order})>"
        )
