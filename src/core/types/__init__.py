"""
Core type definitions and utilities.
"""

from .financial import (
    HUNDRED,
    ONE,
    ZERO,
    calculate_commission,
    calculate_pnl,
    percent_of,
    safe_divide,
)

__all__ = [
    # Utility functions
    "safe_divide",
    "percent_of",
    "calculate_pnl",
    "calculate_commission",
    # Constants
    "ZERO",
    "ONE",
    "HUNDRED",
]
