#!/usr/bin/env python
"""
Demo data seeding script for local development.

This script will:

1. Create the database tables if they don't exist
2. Create a handful of demo recipes and a week-long meal plan
3. Generate the plan's grocery list (or regenerate it on later runs)
4. Log the resulting list grouped by category

Run with: python scripts/seed_demo_data.py

Environment Variables:
    SEED_USER_ID: Owner of the demo records (default: 1)
    SEED_PLAN_NAME: Name of the demo meal plan (default: Demo Week)
    DATABASE_URL: SQLAlchemy connection string
"""

import os
import sys
from datetime import date, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from groceryplanner.config import settings
from groceryplanner.database import Base, SessionLocal, engine
from groceryplanner.enums import IngredientCategory, MealType, MeasurementUnit
from groceryplanner.logging_config import configure_logging, get_logger
from groceryplanner.models import Ingredient, MealAssignment, MealPlan, Recipe, RecipeIngredient
from groceryplanner.plan.grocery_list import GroceryListGenerator
from groceryplanner.schemas import GroceryListRead

# Configure logging
configure_logging(log_level=settings.log_level)
logger = get_logger(__name__)

SEED_USER_ID = int(os.getenv("SEED_USER_ID", "1"))
SEED_PLAN_NAME = os.getenv("SEED_PLAN_NAME", "Demo Week")

U = MeasurementUnit
C = IngredientCategory

DEMO_RECIPES = {
    "Pancakes": [
        ("Flour", 2.0, U.CUP, C.PANTRY),
        ("Milk", 1.0, U.CUP, C.DAIRY),
        ("Eggs", 2.0, U.WHOLE, C.DAIRY),
        ("Butter", 2.0, U.TBSP, C.DAIRY),
        ("Salt", None, U.PINCH, C.PANTRY),
    ],
    "Macaroni and Cheese": [
        ("Macaroni", 8.0, U.OZ, C.PANTRY),
        ("Cheddar", 0.5, U.LB, C.DAIRY),
        ("Milk", 1.0, U.PINT, C.DAIRY),
        ("Butter", 3.0, U.TBSP, C.DAIRY),
    ],
    "Chili": [
        ("Ground Beef", 1.0, U.LB, C.MEAT),
        ("Kidney Beans", 2.0, U.CAN, C.PANTRY),
        ("Onion", 1.0, U.WHOLE, C.PRODUCE),
        ("Garlic", 3.0, U.CLOVE, C.PRODUCE),
        ("Chili Powder", 2.0, U.TBSP, C.PANTRY),
    ],
}

# (recipe, meal type, serving multiplier) per day
DEMO_WEEK = [
    ("Pancakes", MealType.BREAKFAST, None),
    ("Chili", MealType.DINNER, 1.5),
    ("Macaroni and Cheese", MealType.DINNER, None),
    ("Pancakes", MealType.BREAKFAST, 2.0),
    ("Chili", MealType.LUNCH, 0.5),
]


def init_database() -> None:
    """Initialize database tables."""
    logger.info("Initializing database tables...")
    Base.metadata.create_all(engine)
    logger.info("Database tables initialized")


def get_or_create_ingredient(
    session: Session, name: str, category: IngredientCategory
) -> Ingredient:
    ingredient = session.scalars(select(Ingredient).where(Ingredient.name == name)).first()
    if ingredient is None:
        ingredient = Ingredient(name=name, category=category)
        session.add(ingredient)
        session.flush()
    return ingredient


def create_recipes(session: Session) -> dict[str, Recipe]:
    """Create the demo recipes, reusing ones from earlier runs."""
    recipes = {}
    for name, ingredients in DEMO_RECIPES.items():
        recipe = session.scalars(
            select(Recipe).where(Recipe.user_id == SEED_USER_ID, Recipe.name == name)
        ).first()
        if recipe is None:
            recipe = Recipe(user_id=SEED_USER_ID, name=name, servings=4)
            session.add(recipe)
            for position, (ing_name, quantity, unit, category) in enumerate(ingredients):
                recipe.recipe_ingredients.append(
                    RecipeIngredient(
                        ingredient=get_or_create_ingredient(session, ing_name, category),
                        quantity=quantity,
                        unit=unit,
                        sort_order=position,
                    )
                )
            logger.info(f"Created recipe {name!r} with {len(ingredients)} ingredients")
        recipes[name] = recipe
    session.flush()
    return recipes


def create_meal_plan(session: Session, recipes: dict[str, Recipe]) -> MealPlan:
    """Create the demo meal plan unless it already exists."""
    meal_plan = session.scalars(
        select(MealPlan).where(MealPlan.user_id == SEED_USER_ID, MealPlan.name == SEED_PLAN_NAME)
    ).first()
    if meal_plan is not None:
        logger.info(f"Meal plan {SEED_PLAN_NAME!r} already exists")
        return meal_plan

    start = date.today()
    meal_plan = MealPlan(
        user_id=SEED_USER_ID,
        name=SEED_PLAN_NAME,
        start_date=start,
        end_date=start + timedelta(days=6),
    )
    for offset, (recipe_name, meal_type, multiplier) in enumerate(DEMO_WEEK):
        meal_plan.meal_assignments.append(
            MealAssignment(
                recipe=recipes[recipe_name],
                date=start + timedelta(days=offset),
                meal_type=meal_type,
                serving_multiplier=multiplier,
            )
        )
    session.add(meal_plan)
    session.flush()
    logger.info(f"Created meal plan {SEED_PLAN_NAME!r} with {len(DEMO_WEEK)} meals")
    return meal_plan


def log_grocery_list(summary: GroceryListRead) -> None:
    logger.info("=" * 60)
    logger.info(f"{summary.name} ({summary.completion_percentage}% purchased)")
    current_category = None
    for item in summary.active_items:
        if item.category != current_category:
            current_category = item.category
            logger.info(f"[{current_category.value.title()}]")
        logger.info(f"  {item.name}: {item.display_quantity or '-'}")
    logger.info("=" * 60)


def seed_demo_data() -> GroceryListRead:
    """
    Main seeding function.

    Returns:
        The generated grocery list.
    """
    init_database()

    with SessionLocal() as session:
        with session.begin():
            recipes = create_recipes(session)
            meal_plan = create_meal_plan(session, recipes)
            grocery_list = GroceryListGenerator(session).generate_or_regenerate(meal_plan)
            summary = GroceryListRead.model_validate(grocery_list)

    return summary


def main():
    """Entry point for the seed script."""
    logger.info(f"Seeding demo data for user {SEED_USER_ID}")

    try:
        log_grocery_list(seed_demo_data())
    except KeyboardInterrupt:
        logger.info("Seeding interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception(f"Seeding failed with error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
