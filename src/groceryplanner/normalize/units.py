"""Unit classification and conversion utilities."""

import enum

from groceryplanner.enums import MeasurementUnit
from groceryplanner.exceptions import IncompatibleUnitsError

# =============================================================================
# Unit Conversion Tables
# =============================================================================

# Volume conversions (base unit: fl_oz)
VOLUME_TO_FL_OZ: dict[MeasurementUnit, float] = {
    MeasurementUnit.TSP: 0.166667,
    MeasurementUnit.TBSP: 0.5,
    MeasurementUnit.FL_OZ: 1.0,
    MeasurementUnit.CUP: 8.0,
    MeasurementUnit.PINT: 16.0,
    MeasurementUnit.QUART: 32.0,
    MeasurementUnit.GALLON: 128.0,
    MeasurementUnit.ML: 0.033814,
    MeasurementUnit.LITER: 33.814,
}

# Weight conversions (base unit: oz)
WEIGHT_TO_OZ: dict[MeasurementUnit, float] = {
    MeasurementUnit.OZ: 1.0,
    MeasurementUnit.LB: 16.0,
    MeasurementUnit.GRAM: 0.035274,
    MeasurementUnit.KG: 35.274,
}


class UnitClass(str, enum.Enum):
    """Dimension class of a measurement unit."""

    VOLUME = "volume"
    WEIGHT = "weight"
    COUNT = "count"
    NON_STANDARD = "non_standard"
    CONTAINER = "container"


UNIT_CLASSES: dict[MeasurementUnit, UnitClass] = {
    **{unit: UnitClass.VOLUME for unit in VOLUME_TO_FL_OZ},
    **{unit: UnitClass.WEIGHT for unit in WEIGHT_TO_OZ},
    MeasurementUnit.WHOLE: UnitClass.COUNT,
    MeasurementUnit.CLOVE: UnitClass.COUNT,
    MeasurementUnit.SLICE: UnitClass.COUNT,
    MeasurementUnit.PIECE: UnitClass.COUNT,
    MeasurementUnit.PINCH: UnitClass.NON_STANDARD,
    MeasurementUnit.DASH: UnitClass.NON_STANDARD,
    MeasurementUnit.TO_TASTE: UnitClass.NON_STANDARD,
    MeasurementUnit.JAR: UnitClass.CONTAINER,
    MeasurementUnit.CAN: UnitClass.CONTAINER,
    MeasurementUnit.BOX: UnitClass.CONTAINER,
    MeasurementUnit.BAG: UnitClass.CONTAINER,
    MeasurementUnit.BOTTLE: UnitClass.CONTAINER,
    MeasurementUnit.PACKAGE: UnitClass.CONTAINER,
    MeasurementUnit.CONTAINER: UnitClass.CONTAINER,
}

_FACTOR_TABLES: dict[UnitClass, dict[MeasurementUnit, float]] = {
    UnitClass.VOLUME: VOLUME_TO_FL_OZ,
    UnitClass.WEIGHT: WEIGHT_TO_OZ,
}


def _verify_unit_table() -> None:
    """Fail at import time if a unit has no dimension class."""
    missing = [unit.value for unit in MeasurementUnit if unit not in UNIT_CLASSES]
    if missing:
        raise RuntimeError(f"Units without a dimension class: {', '.join(missing)}")


_verify_unit_table()


# =============================================================================
# Classification
# =============================================================================


def unit_class(unit: MeasurementUnit) -> UnitClass:
    """Return the dimension class of a unit."""
    return UNIT_CLASSES[MeasurementUnit(unit)]


def compatibility_key(unit: MeasurementUnit | None) -> str:
    """
    Key under which lines with this unit may be summed together.

    Volume and weight units share one key per dimension. Every count,
    non-standard and container unit is its own group.
    """
    if unit is None:
        return "unknown_none"

    unit = MeasurementUnit(unit)
    cls = UNIT_CLASSES[unit]

    if cls in (UnitClass.VOLUME, UnitClass.WEIGHT):
        return cls.value
    if cls is UnitClass.COUNT:
        return f"count_{unit.value}"
    if cls is UnitClass.NON_STANDARD:
        return f"non_standard_{unit.value}"
    return f"unknown_{unit.value}"


def can_convert(from_unit: MeasurementUnit | None, to_unit: MeasurementUnit | None) -> bool:
    """Check whether a quantity can be converted between two units."""
    if from_unit is None or to_unit is None:
        return from_unit == to_unit
    if from_unit == to_unit:
        return True
    from_cls = unit_class(from_unit)
    return from_cls in _FACTOR_TABLES and from_cls is unit_class(to_unit)


# =============================================================================
# Conversion
# =============================================================================


class UnitConverter:
    """Converts quantities between units of the same dimension."""

    def convert(
        self,
        quantity: float,
        from_unit: MeasurementUnit,
        to_unit: MeasurementUnit,
    ) -> float:
        """
        Convert a quantity from one unit to another.

        Raises:
            IncompatibleUnitsError: If either unit is a count, non-standard or
                container unit, or the units measure different dimensions.
        """
        if from_unit == to_unit:
            return quantity

        from_unit = MeasurementUnit(from_unit)
        to_unit = MeasurementUnit(to_unit)
        from_cls = UNIT_CLASSES[from_unit]
        to_cls = UNIT_CLASSES[to_unit]

        if UnitClass.COUNT in (from_cls, to_cls):
            raise IncompatibleUnitsError(
                "Cannot convert count-based units", from_unit=from_unit, to_unit=to_unit
            )

        if UnitClass.NON_STANDARD in (from_cls, to_cls):
            raise IncompatibleUnitsError(
                "Cannot convert non-standard units", from_unit=from_unit, to_unit=to_unit
            )

        if UnitClass.CONTAINER in (from_cls, to_cls):
            raise IncompatibleUnitsError(
                "Cannot convert container units", from_unit=from_unit, to_unit=to_unit
            )

        if from_cls is not to_cls:
            raise IncompatibleUnitsError(
                "Cannot convert between volume and weight units",
                from_unit=from_unit,
                to_unit=to_unit,
            )

        factors = _FACTOR_TABLES[from_cls]
        return quantity * factors[from_unit] / factors[to_unit]


# =============================================================================
# Display
# =============================================================================

# Common fractions shown instead of decimals
_FRACTIONS: dict[float, str] = {
    0.25: "¼",
    0.33: "⅓",
    0.5: "½",
    0.66: "⅔",
    0.75: "¾",
}


def _to_fraction(value: float) -> str:
    if value == int(value):
        return str(int(value))

    whole = int(value)
    remainder = value - whole

    for fraction, symbol in _FRACTIONS.items():
        if abs(remainder - fraction) < 0.05:
            return f"{whole}{symbol}" if whole > 0 else symbol

    return f"{value:.2f}"


def format_quantity(quantity: float | None, unit: MeasurementUnit | None) -> str:
    """
    Format a quantity and unit for display.

    Examples:
        (1.5, CUP) -> "1½ cup"
        (2.0, None) -> "2"
        (None, GRAM) -> ""
    """
    if quantity is None:
        return ""

    unit_str = MeasurementUnit(unit).value if unit is not None else ""
    return f"{_to_fraction(float(quantity))} {unit_str}".strip()
