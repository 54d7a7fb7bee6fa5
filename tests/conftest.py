"""Pytest configuration and shared fixtures."""

from datetime import date, timedelta

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session

from groceryplanner.database import Base
from groceryplanner.enums import IngredientCategory, MeasurementUnit
from groceryplanner.models import (
    Ingredient,
    MealAssignment,
    MealPlan,
    Recipe,
    RecipeIngredient,
)
from groceryplanner.normalize.aggregation import IngredientLine

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow running")


# =============================================================================
# Ingredient Line Fixtures
# =============================================================================


def line(
    name: str,
    quantity: float | None,
    unit: MeasurementUnit | None,
    category: IngredientCategory = IngredientCategory.OTHER,
) -> IngredientLine:
    """Shorthand for building an ingredient line."""
    return IngredientLine(name=name, quantity=quantity, unit=unit, category=category)


@pytest.fixture
def sample_lines():
    """Ingredient lines as they come out of two recipes."""
    return [
        line("Milk", 1.0, MeasurementUnit.CUP, IngredientCategory.DAIRY),
        line("Flour", 2.0, MeasurementUnit.CUP, IngredientCategory.PANTRY),
        line("milk", 1.0, MeasurementUnit.PINT, IngredientCategory.DAIRY),
        line("Garlic", 3.0, MeasurementUnit.CLOVE, IngredientCategory.PRODUCE),
        line("Salt", None, MeasurementUnit.TO_TASTE, IngredientCategory.PANTRY),
    ]


# =============================================================================
# SQLite Test Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def test_db_engine():
    """Create an in-memory SQLite engine with all tables."""
    engine = create_engine("sqlite://", echo=False)

    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_session(test_db_engine):
    """Create a test database session."""
    with Session(test_db_engine) as session:
        yield session


@pytest.fixture
def make_recipe(test_session):
    """
    Factory for recipes.

    Each ingredient is a (name, quantity, unit, category) tuple; ingredients
    are shared between recipes by name.
    """

    def _make(
        name: str,
        ingredients: list[tuple[str, float | None, MeasurementUnit | None, IngredientCategory]],
        user_id: int = 1,
    ) -> Recipe:
        recipe = Recipe(user_id=user_id, name=name, servings=4)
        test_session.add(recipe)
        for position, (ing_name, quantity, unit, category) in enumerate(ingredients):
            ingredient = test_session.scalars(
                select(Ingredient).where(Ingredient.name == ing_name)
            ).first()
            if ingredient is None:
                ingredient = Ingredient(name=ing_name, category=category)
                test_session.add(ingredient)

            recipe.recipe_ingredients.append(
                RecipeIngredient(
                    ingredient=ingredient,
                    quantity=quantity,
                    unit=unit,
                    sort_order=position,
                )
            )

        test_session.flush()
        return recipe

    return _make


@pytest.fixture
def make_meal_plan(test_session):
    """Factory for meal plans from (recipe, serving_multiplier) pairs."""

    def _make(
        assignments: list[tuple[Recipe, float | None]],
        name: str = "Week 1",
        user_id: int = 1,
    ) -> MealPlan:
        start = date(2026, 3, 2)
        meal_plan = MealPlan(
            user_id=user_id,
            name=name,
            start_date=start,
            end_date=start + timedelta(days=6),
        )
        for offset, (recipe, multiplier) in enumerate(assignments):
            meal_plan.meal_assignments.append(
                MealAssignment(
                    recipe=recipe,
                    date=start + timedelta(days=offset),
                    serving_multiplier=multiplier,
                )
            )

        test_session.add(meal_plan)
        test_session.flush()
        return meal_plan

    return _make


@pytest.fixture
def pancakes(make_recipe):
    """Recipe with 2 cups of flour and 1 cup of milk."""
    return make_recipe(
        "Pancakes",
        [
            ("Flour", 2.0, MeasurementUnit.CUP, IngredientCategory.PANTRY),
            ("Milk", 1.0, MeasurementUnit.CUP, IngredientCategory.DAIRY),
        ],
    )
