"""Grocery list generation and item management."""

from groceryplanner.plan.grocery_items import GroceryItemService
from groceryplanner.plan.grocery_list import GroceryListGenerator

__all__ = [
    "GroceryItemService",
    "GroceryListGenerator",
]
