"""Ingredient aggregation across recipes."""

from collections.abc import Iterable
from dataclasses import dataclass

from groceryplanner.enums import IngredientCategory, MeasurementUnit
from groceryplanner.exceptions import IncompatibleUnitsError
from groceryplanner.logging_config import get_logger
from groceryplanner.normalize.units import UnitConverter, compatibility_key

logger = get_logger(__name__)


@dataclass(frozen=True)
class IngredientLine:
    """A single ingredient requirement flowing through the pipeline."""

    name: str
    quantity: float | None
    unit: MeasurementUnit | None
    category: IngredientCategory = IngredientCategory.OTHER

    @property
    def normalized_name(self) -> str:
        """Lowercase name used as the ingredient's identity."""
        return self.name.lower()


class IngredientAggregator:
    """
    Merges ingredient lines that refer to the same foodstuff.

    Lines are matched by case-insensitive name, then summed only within a
    unit compatibility class (see ``compatibility_key``). The first line of
    each group decides the output name, unit and category.
    """

    def __init__(self, unit_converter: UnitConverter | None = None):
        self.unit_converter = unit_converter or UnitConverter()

    def aggregate(self, lines: Iterable[IngredientLine]) -> tuple[IngredientLine, ...]:
        """Aggregate lines; empty input yields an empty tuple."""
        by_name: dict[str, list[IngredientLine]] = {}
        for line in lines:
            by_name.setdefault(line.normalized_name, []).append(line)

        aggregated: list[IngredientLine] = []
        for group in by_name.values():
            aggregated.extend(self._aggregate_group(group))

        return tuple(aggregated)

    def _aggregate_group(self, group: list[IngredientLine]) -> list[IngredientLine]:
        """Aggregate lines sharing one ingredient name."""
        if len(group) == 1:
            return group

        by_unit: dict[str, list[IngredientLine]] = {}
        for line in group:
            by_unit.setdefault(compatibility_key(line.unit), []).append(line)

        return [
            lines[0] if len(lines) == 1 else self._combine(lines)
            for lines in by_unit.values()
        ]

    def _combine(self, lines: list[IngredientLine]) -> IngredientLine:
        """Sum lines with compatible units into the first line's unit."""
        base = lines[0]
        total: float | None = None

        for line in lines:
            if line.quantity is None:
                continue

            if line.unit == base.unit:
                amount = line.quantity
            else:
                try:
                    amount = self.unit_converter.convert(line.quantity, line.unit, base.unit)
                except IncompatibleUnitsError as e:
                    # Grouping by compatibility class should make this unreachable
                    logger.warning(
                        f"Adding {line.name} unconverted ({line.unit} -> {base.unit}): {e}"
                    )
                    amount = line.quantity

            total = amount if total is None else total + amount

        return IngredientLine(
            name=base.name,
            quantity=total,
            unit=base.unit,
            category=base.category,
        )
