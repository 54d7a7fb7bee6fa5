"""Unit conversion, serving scaling and ingredient aggregation."""

from groceryplanner.normalize.aggregation import IngredientAggregator, IngredientLine
from groceryplanner.normalize.scaling import ServingSizeScaler
from groceryplanner.normalize.units import (
    UnitClass,
    UnitConverter,
    can_convert,
    compatibility_key,
    format_quantity,
    unit_class,
)

__all__ = [
    "IngredientAggregator",
    "IngredientLine",
    "ServingSizeScaler",
    "UnitClass",
    "UnitConverter",
    "can_convert",
    "compatibility_key",
    "format_quantity",
    "unit_class",
]
