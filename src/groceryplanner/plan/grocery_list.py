"""Grocery list generation and regeneration from meal plans."""

from collections import Counter
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from groceryplanner.config import Settings, get_settings
from groceryplanner.enums import IngredientCategory, SourceType
from groceryplanner.exceptions import InvalidStateError
from groceryplanner.logging_config import LoggingContext, get_logger
from groceryplanner.models import (
    GroceryItem,
    GroceryList,
    MealAssignment,
    MealPlan,
    Recipe,
    RecipeIngredient,
    utcnow,
)
from groceryplanner.normalize.aggregation import IngredientAggregator, IngredientLine
from groceryplanner.normalize.scaling import ServingSizeScaler
from groceryplanner.schemas import RegenerationPreview

logger = get_logger(__name__)


class GroceryListGenerator:
    """
    Builds grocery lists from meal plans.

    The pipeline is collect -> scale -> aggregate -> organize, each stage a
    function from one sequence of ``IngredientLine`` to another.

    ``regenerate`` reconciles a previously generated list with the plan's
    current recipes:
    - manual items are never touched
    - generated items the user edited are kept as edited
    - generated items the user deleted stay deleted
    - every other generated item is replaced with a fresh one; the old row is
      soft-deleted and stamped with ``superseded_at``

    The generator only flushes. Callers own the transaction and must run each
    call inside one so a failed call leaves nothing behind.
    """

    def __init__(
        self,
        session: Session,
        scaler: ServingSizeScaler | None = None,
        aggregator: IngredientAggregator | None = None,
        settings: Settings | None = None,
    ):
        self.session = session
        self.scaler = scaler or ServingSizeScaler()
        self.aggregator = aggregator or IngredientAggregator()
        self.settings = settings or get_settings()

    # =========================================================================
    # Entry points
    # =========================================================================

    def generate(self, meal_plan: MealPlan) -> GroceryList:
        """Create a new grocery list from a meal plan."""
        with LoggingContext(meal_plan_id=meal_plan.id):
            grocery_list = GroceryList(
                user_id=meal_plan.user_id,
                meal_plan=meal_plan,
                name=f"Grocery List for {meal_plan.name}",
                generated_at=utcnow(),
            )
            self.session.add(grocery_list)
            self.session.flush()

            lines = self.aggregate_ingredients(self.collect_ingredients(meal_plan))

            sort_order = 0
            for category_lines in self.organize_by_category(lines).values():
                for line in category_lines:
                    grocery_list.items.append(self._generated_item(line, sort_order))
                    sort_order += 1

            self.session.flush()
            logger.info(f"Generated grocery list {grocery_list.id} with {sort_order} items")

            return grocery_list

    def regenerate(self, grocery_list: GroceryList) -> GroceryList:
        """
        Refresh a meal-plan-linked list against the plan's current recipes.

        Raises:
            InvalidStateError: If the list is standalone.
        """
        if grocery_list.meal_plan_id is None:
            raise InvalidStateError("Cannot regenerate a standalone grocery list")

        with LoggingContext(
            meal_plan_id=grocery_list.meal_plan_id, grocery_list_id=grocery_list.id
        ):
            grocery_list = self._lock(grocery_list)
            existing = list(grocery_list.items)

            fresh = self.aggregate_ingredients(self.collect_ingredients(grocery_list.meal_plan))
            replaced, additions = self._reconcile(existing, fresh)

            now = utcnow()
            for item in replaced:
                item.deleted_at = now
                item.superseded_at = now

            sort_order = max((item.sort_order for item in existing), default=0)
            for line in additions:
                sort_order += 1
                grocery_list.items.append(self._generated_item(line, sort_order))

            grocery_list.regenerated_at = now
            self.session.flush()

            logger.info(
                f"Regenerated grocery list {grocery_list.id}: {len(replaced)} replaced, "
                f"{len(additions)} added, {len(fresh) - len(additions)} skipped"
            )

            return grocery_list

    def generate_or_regenerate(self, meal_plan: MealPlan) -> GroceryList:
        """Regenerate the plan's existing grocery list, or generate one if it has none."""
        existing = self.session.scalars(
            select(GroceryList)
            .where(GroceryList.meal_plan_id == meal_plan.id)
            .order_by(GroceryList.id)
            .limit(1)
        ).first()

        if existing is not None:
            return self.regenerate(existing)
        return self.generate(meal_plan)

    def preview_regeneration(self, grocery_list: GroceryList) -> RegenerationPreview:
        """
        Count what ``regenerate`` would change, without writing anything.

        Raises:
            InvalidStateError: If the list is standalone.
        """
        if grocery_list.meal_plan_id is None:
            raise InvalidStateError("Cannot preview regeneration of a standalone grocery list")

        items = list(grocery_list.items)
        fresh = self.aggregate_ingredients(self.collect_ingredients(grocery_list.meal_plan))
        replaced, additions = self._reconcile(items, fresh)

        # A replaced row is "updated" when a fresh row of the same name takes its place
        replaced_counts = Counter(item.name.lower() for item in replaced)
        added_counts = Counter(line.normalized_name for line in additions)

        live = [item for item in items if not item.is_deleted]
        return RegenerationPreview(
            added=sum((added_counts - replaced_counts).values()),
            updated=sum((added_counts & replaced_counts).values()),
            removed=sum((replaced_counts - added_counts).values()),
            preserved_manual=sum(1 for item in live if item.is_manual),
            preserved_edited=sum(1 for item in live if item.is_generated and item.is_edited),
        )

    # =========================================================================
    # Pipeline stages
    # =========================================================================

    def collect_ingredients(self, meal_plan: MealPlan) -> tuple[IngredientLine, ...]:
        """Build scaled ingredient lines for every recipe assigned in the plan."""
        assignments = self.session.scalars(
            select(MealAssignment)
            .where(MealAssignment.meal_plan_id == meal_plan.id)
            .options(
                selectinload(MealAssignment.recipe)
                .selectinload(Recipe.recipe_ingredients)
                .selectinload(RecipeIngredient.ingredient)
            )
            .order_by(MealAssignment.date, MealAssignment.id)
        ).all()

        lines: list[IngredientLine] = []
        for assignment in assignments:
            multiplier = assignment.serving_multiplier
            if multiplier is None:
                multiplier = self.settings.default_serving_multiplier

            recipe_lines = [
                IngredientLine(
                    name=recipe_ingredient.ingredient.name,
                    quantity=recipe_ingredient.quantity,
                    unit=recipe_ingredient.unit,
                    category=recipe_ingredient.ingredient.category,
                )
                for recipe_ingredient in assignment.recipe.recipe_ingredients
            ]
            lines.extend(self.process_ingredients(recipe_lines, multiplier))

        logger.debug(f"Collected {len(lines)} ingredient lines from {len(assignments)} meals")
        return tuple(lines)

    def process_ingredients(
        self, lines: Iterable[IngredientLine], multiplier: float
    ) -> tuple[IngredientLine, ...]:
        """Scale lines by a serving multiplier."""
        return self.scaler.scale_ingredients(lines, multiplier)

    def aggregate_ingredients(self, lines: Iterable[IngredientLine]) -> tuple[IngredientLine, ...]:
        """Merge duplicate ingredients."""
        return self.aggregator.aggregate(lines)

    def organize_by_category(
        self, lines: Iterable[IngredientLine]
    ) -> dict[IngredientCategory, list[IngredientLine]]:
        """Group lines by category, categories in order of first appearance."""
        organized: dict[IngredientCategory, list[IngredientLine]] = {}
        for line in lines:
            organized.setdefault(line.category, []).append(line)
        return organized

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _reconcile(
        existing: list[GroceryItem], fresh: Iterable[IngredientLine]
    ) -> tuple[list[GroceryItem], list[IngredientLine]]:
        """
        Split a regeneration into the items it replaces and the lines it adds.

        Every live, unedited generated item is replaced. A fresh line is added
        unless its name belongs to a manual item, an edited generated item or
        a generated item the user deleted.
        """
        kept_names = _names(
            item
            for item in existing
            if item.is_manual or item.is_edited or item.is_user_deleted
        )
        replaced = [
            item
            for item in existing
            if item.is_generated and not item.is_edited and not item.is_deleted
        ]
        additions = [line for line in fresh if line.normalized_name not in kept_names]
        return replaced, additions

    def _lock(self, grocery_list: GroceryList) -> GroceryList:
        """Reload the list and all of its items under a row lock."""
        return self.session.scalars(
            select(GroceryList)
            .where(GroceryList.id == grocery_list.id)
            .options(selectinload(GroceryList.items))
            .with_for_update()
            .execution_options(populate_existing=True)
        ).one()

    @staticmethod
    def _generated_item(line: IngredientLine, sort_order: int) -> GroceryItem:
        return GroceryItem(
            name=line.name,
            quantity=line.quantity,
            unit=line.unit,
            category=line.category,
            source_type=SourceType.GENERATED,
            sort_order=sort_order,
        )


def _names(items: Iterable[GroceryItem]) -> set[str]:
    return {item.name.lower() for item in items}

