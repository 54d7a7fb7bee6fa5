"""Tests for user edits to grocery items."""

import pytest
from pydantic import ValidationError
from sqlalchemy import select

from groceryplanner.enums import IngredientCategory, MeasurementUnit, SourceType
from groceryplanner.models import GroceryItem, GroceryList
from groceryplanner.plan.grocery_items import GroceryItemService
from groceryplanner.plan.grocery_list import GroceryListGenerator
from groceryplanner.schemas import GroceryItemCreate, GroceryItemUpdate


@pytest.fixture
def service(test_session):
    return GroceryItemService(test_session)


@pytest.fixture
def generated_list(test_session, pancakes, make_meal_plan):
    """Grocery list generated from one pancake meal."""
    return GroceryListGenerator(test_session).generate(make_meal_plan([(pancakes, 1.0)]))


@pytest.fixture
def standalone_list(test_session):
    grocery_list = GroceryList(user_id=1, name="Camping Trip")
    test_session.add(grocery_list)
    test_session.flush()
    return grocery_list


def item_named(grocery_list, name):
    return next(item for item in grocery_list.items if item.name == name)


class TestItemSchemas:
    """Tests for item input validation."""

    def test_defaults(self):
        """Test a minimal manual item."""
        data = GroceryItemCreate(name="Coffee")

        assert data.quantity is None
        assert data.unit is None
        assert data.category == IngredientCategory.OTHER

    def test_parses_enum_values(self):
        """Test that unit and category strings become enum members."""
        data = GroceryItemCreate(name="Rice", quantity=2, unit="lb", category="pantry")

        assert data.unit is MeasurementUnit.LB
        assert data.category is IngredientCategory.PANTRY

    @pytest.mark.parametrize(
        "fields",
        [
            {"name": ""},
            {"name": "x" * 256},
            {"name": "Rice", "quantity": -1},
            {"name": "Rice", "unit": "handful"},
            {"name": "Rice", "category": "candy"},
            {"name": "Rice", "notes": "n" * 501},
        ],
    )
    def test_rejects_invalid_input(self, fields):
        """Test validation failures."""
        with pytest.raises(ValidationError):
            GroceryItemCreate(**fields)


class TestAddManualItem:
    """Tests for GroceryItemService.add_manual_item."""

    def test_appends_after_existing_items(self, service, generated_list):
        """Test that manual items sort after everything else."""
        item = service.add_manual_item(
            generated_list, GroceryItemCreate(name="Maple Syrup", quantity=1, unit="bottle")
        )

        assert item.id is not None
        assert item.source_type == SourceType.MANUAL
        assert item.sort_order == 2
        assert item.unit == MeasurementUnit.BOTTLE
        assert item in generated_list.active_items

    def test_standalone_list(self, service, standalone_list):
        """Test adding to an empty standalone list."""
        item = service.add_manual_item(standalone_list, GroceryItemCreate(name="Charcoal"))

        assert item.sort_order == 1
        assert item.category == IngredientCategory.OTHER
        assert standalone_list.is_standalone


class TestUpdateItem:
    """Tests for GroceryItemService.update_item."""

    def test_first_edit_snapshots_generated_item(self, service, generated_list):
        """Test that editing a generated item records its original values."""
        milk = item_named(generated_list, "Milk")

        service.update_item(
            milk,
            GroceryItemUpdate(
                name="Oat Milk", quantity=2, unit="cup", category="dairy", notes="barista"
            ),
        )

        assert milk.name == "Oat Milk"
        assert milk.quantity == 2
        assert milk.notes == "barista"
        assert milk.is_edited
        assert milk.original_values == {
            "name": "Milk",
            "quantity": 1.0,
            "unit": "cup",
            "category": "dairy",
            "notes": None,
        }

    def test_later_edits_keep_first_snapshot(self, service, generated_list):
        """Test that the snapshot always reflects the generated values."""
        flour = item_named(generated_list, "Flour")

        service.update_item(flour, GroceryItemUpdate(name="Flour", quantity=3, unit="cup"))
        service.update_item(flour, GroceryItemUpdate(name="Flour", quantity=4, unit="cup"))

        assert flour.quantity == 4
        assert flour.original_values["quantity"] == 2.0

    def test_manual_items_are_not_snapshotted(self, service, standalone_list):
        """Test that manual items never get original values."""
        item = service.add_manual_item(standalone_list, GroceryItemCreate(name="Ice"))

        service.update_item(item, GroceryItemUpdate(name="Ice", quantity=2, unit="bag"))

        assert item.original_values is None
        assert not item.is_edited


class TestDeleteItem:
    """Tests for GroceryItemService.delete_item."""

    def test_generated_items_are_soft_deleted(self, test_session, service, generated_list):
        """Test that deleting a generated item keeps the row."""
        milk = item_named(generated_list, "Milk")

        service.delete_item(milk)

        assert milk.is_user_deleted
        assert milk not in generated_list.active_items
        assert test_session.get(GroceryItem, milk.id) is milk

    def test_manual_items_are_hard_deleted(self, test_session, service, generated_list):
        """Test that deleting a manual item removes the row."""
        item = service.add_manual_item(generated_list, GroceryItemCreate(name="Butter"))
        item_id = item.id

        service.delete_item(item)

        query = select(GroceryItem).where(GroceryItem.id == item_id)
        assert test_session.scalars(query).first() is None
        assert {i.name for i in generated_list.items} == {"Flour", "Milk"}


class TestTogglePurchased:
    """Tests for purchase tracking and list completion."""

    def test_toggle(self, service, generated_list):
        """Test marking and unmarking an item."""
        flour = item_named(generated_list, "Flour")

        service.toggle_purchased(flour)
        assert flour.purchased
        assert flour.purchased_at is not None
        assert generated_list.completed_items == 1
        assert generated_list.completion_percentage == 50.0

        service.toggle_purchased(flour)
        assert not flour.purchased
        assert flour.purchased_at is None
        assert generated_list.completion_percentage == 0.0

    def test_deleted_items_do_not_count(self, service, generated_list):
        """Test that completion only considers visible items."""
        service.toggle_purchased(item_named(generated_list, "Flour"))
        service.delete_item(item_named(generated_list, "Milk"))

        assert generated_list.total_items == 1
        assert generated_list.completion_percentage == 100.0


class TestDeleteList:
    """Tests for GroceryItemService.delete_list."""

    def test_cascades_to_items(self, test_session, service, generated_list):
        """Test that deleting a list removes its items."""
        list_id = generated_list.id

        service.delete_list(generated_list)

        assert test_session.get(GroceryList, list_id) is None
        remaining = test_session.scalars(
            select(GroceryItem).where(GroceryItem.grocery_list_id == list_id)
        ).all()
        assert remaining == []
