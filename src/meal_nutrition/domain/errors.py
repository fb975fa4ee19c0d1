"""Exceptions raised by the nutrition core."""


class NutritionError(Exception):
    """Base class for nutrition core errors."""


class ConfigurationError(NutritionError):
    """Raised for invalid targets, thresholds or reference quantities."""


class InvalidInputError(NutritionError):
    """Raised when a calculation request is malformed."""


class ReferenceDataUnavailableError(NutritionError):
    """Raised when the reference food set cannot be loaded."""


class TargetsUnavailableError(NutritionError):
    """Raised when no nutrient targets exist for a trimester."""
