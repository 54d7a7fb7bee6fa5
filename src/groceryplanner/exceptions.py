"""Exceptions raised by the grocery list pipeline."""

from typing import Any


class IncompatibleUnitsError(ValueError):
    """Raised when a quantity cannot be converted between two units."""

    def __init__(self, message: str, from_unit: Any = None, to_unit: Any = None):
        super().__init__(message)
        self.from_unit = from_unit
        self.to_unit = to_unit


class InvalidStateError(Exception):
    """Raised when an operation is invoked on an object in the wrong state."""
