"""User edits to grocery list items."""

from sqlalchemy.orm import Session

from groceryplanner.enums import SourceType
from groceryplanner.logging_config import get_logger
from groceryplanner.models import GroceryItem, GroceryList, utcnow
from groceryplanner.schemas import GroceryItemCreate, GroceryItemUpdate

logger = get_logger(__name__)


class GroceryItemService:
    """
    Applies user changes to grocery items.

    These mutations leave the markers regeneration relies on: edited
    generated items get ``original_values``, deleted generated items get
    ``deleted_at``. Like the generator, the service only flushes.
    """

    def __init__(self, session: Session):
        self.session = session

    def add_manual_item(self, grocery_list: GroceryList, data: GroceryItemCreate) -> GroceryItem:
        """Append a manual item after every existing item."""
        sort_order = max((item.sort_order for item in grocery_list.items), default=0) + 1
        item = GroceryItem(
            name=data.name,
            quantity=data.quantity,
            unit=data.unit,
            category=data.category,
            notes=data.notes,
            source_type=SourceType.MANUAL,
            sort_order=sort_order,
        )
        grocery_list.items.append(item)
        self.session.flush()

        logger.info(f"Added manual item {item.name!r} to grocery list {grocery_list.id}")
        return item

    def update_item(self, item: GroceryItem, data: GroceryItemUpdate) -> GroceryItem:
        """
        Replace an item's values.

        The first edit of a generated item snapshots its values into
        ``original_values``; later edits keep that first snapshot.
        """
        if item.is_generated and item.original_values is None:
            item.original_values = {
                "name": item.name,
                "quantity": item.quantity,
                "unit": item.unit.value if item.unit is not None else None,
                "category": item.category.value if item.category is not None else None,
                "notes": item.notes,
            }

        item.name = data.name
        item.quantity = data.quantity
        item.unit = data.unit
        item.category = data.category
        item.notes = data.notes
        self.session.flush()
        return item

    def delete_item(self, item: GroceryItem) -> None:
        """Hard-delete manual items; soft-delete generated ones so regeneration skips them."""
        if item.is_manual:
            item.grocery_list.items.remove(item)
            self.session.delete(item)
        else:
            item.deleted_at = utcnow()
        self.session.flush()

    def toggle_purchased(self, item: GroceryItem) -> GroceryItem:
        item.purchased = not item.purchased
        item.purchased_at = utcnow() if item.purchased else None
        self.session.flush()
        return item

    def delete_list(self, grocery_list: GroceryList) -> None:
        """Delete a grocery list together with all of its items."""
        self.session.delete(grocery_list)
        self.session.flush()
