"""Serving size scaling for ingredient quantities."""

from collections.abc import Iterable
from dataclasses import replace

from groceryplanner.normalize.aggregation import IngredientLine


class ServingSizeScaler:
    """Scales ingredient quantities by a serving multiplier."""

    def scale(self, quantity: float, multiplier: float) -> float:
        """Scale a quantity by a multiplier (e.g. 1.5 for one and a half servings)."""
        return quantity * multiplier

    def scale_ingredients(
        self,
        lines: Iterable[IngredientLine],
        multiplier: float,
    ) -> tuple[IngredientLine, ...]:
        """Return new lines with every known quantity scaled by ``multiplier``."""
        return tuple(
            line
            if line.quantity is None
            else replace(line, quantity=self.scale(line.quantity, multiplier))
            for line in lines
        )
