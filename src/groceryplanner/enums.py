"""Enumerations shared by the models and the grocery list pipeline."""

import enum


class MeasurementUnit(str, enum.Enum):
    """Units a recipe ingredient or grocery item can be measured in."""

    # Volume
    TSP = "tsp"
    TBSP = "tbsp"
    FL_OZ = "fl_oz"
    CUP = "cup"
    PINT = "pint"
    QUART = "quart"
    GALLON = "gallon"
    ML = "ml"
    LITER = "liter"

    # Weight
    OZ = "oz"
    LB = "lb"
    GRAM = "gram"
    KG = "kg"

    # Count
    WHOLE = "whole"
    CLOVE = "clove"
    SLICE = "slice"
    PIECE = "piece"

    # Non-standard
    PINCH = "pinch"
    DASH = "dash"
    TO_TASTE = "to_taste"

    # Containers
    JAR = "jar"
    CAN = "can"
    BOX = "box"
    BAG = "bag"
    BOTTLE = "bottle"
    PACKAGE = "package"
    CONTAINER = "container"


class IngredientCategory(str, enum.Enum):
    """Store section an ingredient is shopped from."""

    PRODUCE = "produce"
    DAIRY = "dairy"
    MEAT = "meat"
    SEAFOOD = "seafood"
    PANTRY = "pantry"
    FROZEN = "frozen"
    BAKERY = "bakery"
    DELI = "deli"
    BEVERAGES = "beverages"
    OTHER = "other"


class SourceType(str, enum.Enum):
    """How a grocery item came to be on a list."""

    GENERATED = "generated"
    MANUAL = "manual"


class MealType(str, enum.Enum):
    """Meal slot of a meal assignment."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
