"""Domain errors."""


class MacroTrackerError(ValueError):
    """Base error for invalid nutrition computations."""


class InvalidUnitConversion(MacroTrackerError):
    """Raised when an amount cannot be resolved to grams."""


class MalformedNutrientVector(MacroTrackerError):
    """Raised when a nutrient payload is missing a required field."""
