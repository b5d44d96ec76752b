"""
Backtest behaviour enumerations.

This module defines the switches that change how a backtest sizes positions,
allocates capital across symbols and computes indicators.
"""

from enum import StrEnum


class PositionSizing(StrEnum):
    """
    Position sizing modes declared by a strategy's risk block.

    All modes size by risk-per-trade divided by the distance to the stop.
    They differ in which balance the risk percentage is applied to.
    """

    FIXED = "fixed"  # Starting balance of the ledger, no compounding
    PERCENTAGE = "percentage"  # Current ledger balance
    DYNAMIC = "dynamic"  # Current ledger balance

    @property
    def compounds(self) -> bool:
        """Check if the risk amount follows the running balance."""
        return self != self.FIXED


class CapitalPolicy(StrEnum):
    """
    Capital allocation across the symbols of one backtest.
    """

    ISOLATED = "isolated"  # Initial capital split evenly, one ledger per symbol
    SHARED = "shared"  # One running ledger, symbols processed in list order


class IndicatorMode(StrEnum):
    """
    Indicator formula variants.

    SIMPLIFIED keeps the dashboard's historical formulas (RSI from the first
    window only, MACD signal as 0.9 x MACD). STANDARD uses Wilder-smoothed RSI
    and a 9-period EMA of the MACD line.
    """

    SIMPLIFIED = "simplified"
    STANDARD = "standard"


class BandPosition(StrEnum):
    """Where the last price sits relative to the Bollinger Bands."""

    OVERSOLD = "oversold"
    OVERBOUGHT = "overbought"
    NEUTRAL = "neutral"
