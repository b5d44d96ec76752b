"""
Validation utilities for core domain models.

Provides consistent validation across the application.
"""

import math
from collections.abc import Sequence

from src.core.exceptions.backtest import ValidationError


def validate_positive(value: float, param_name: str) -> float:
    """Validate that a numeric value is positive and finite.

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated value

    Raises:
        ValidationError: If value is not positive
    """
    if not isinstance(value, int | float) or math.isnan(value) or value <= 0:
        raise ValidationError(f"{param_name} must be positive, got {value}")
    if math.isinf(value):
        raise ValidationError(f"{param_name} must be finite, got {value}")
    return value


def validate_non_negative(value: float, param_name: str) -> float:
    """Validate that a numeric value is zero or greater.

    Raises:
        ValidationError: If value is negative or NaN
    """
    if not isinstance(value, int | float) or math.isnan(value) or value < 0:
        raise ValidationError(f"{param_name} must be non-negative, got {value}")
    return value


def validate_percentage(value: float, param_name: str = "percentage") -> float:
    """Validate that a value is a valid percentage (0-100].

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated percentage

    Raises:
        ValidationError: If value is not between 0 and 100
    """
    if not isinstance(value, int | float) or math.isnan(value) or value <= 0 or value > 100:
        raise ValidationError(f"{param_name} must be between 0 and 100, got {value}")
    return value


def validate_symbols(symbols: Sequence[str], param_name: str = "symbols") -> list[str]:
    """Validate a list of trading symbols.

    Symbols are stripped of surrounding whitespace; empty entries and
    duplicates are rejected.

    Raises:
        ValidationError: If the list is empty or contains invalid entries
    """
    if isinstance(symbols, str):
        raise ValidationError(f"{param_name} must be a list of symbols, got a string")

    cleaned = [str(symbol).strip() for symbol in symbols]
    if not cleaned:
        raise ValidationError(f"{param_name} must contain at least one symbol")
    if any(not symbol for symbol in cleaned):
        raise ValidationError(f"{param_name} contains an empty symbol")

    duplicates = sorted({symbol for symbol in cleaned if cleaned.count(symbol) > 1})
    if duplicates:
        raise ValidationError(f"{param_name} contains duplicates: {', '.join(duplicates)}")
    return cleaned
