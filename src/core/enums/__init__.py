"""
Core enumerations for the backtesting engine.

This module provides centralized enumerations for domain concepts
like position direction, exit reasons, timeframes and engine modes.
"""

from .backtest_modes import BandPosition, CapitalPolicy, IndicatorMode, PositionSizing
from .position_types import ExitReason, PositionType
from .timeframes import Timeframe

__all__ = [
    "Timeframe",
    "PositionType",
    "ExitReason",
    "PositionSizing",
    "CapitalPolicy",
    "IndicatorMode",
    "BandPosition",
]
