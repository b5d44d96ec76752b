"""
Position direction and exit reason enumerations.

This module defines the allowed position directions and the reasons a
simulated position can be closed.
"""

from enum import StrEnum


class PositionType(StrEnum):
    """
    Allowed position directions.

    Defines whether a simulated position profits from rising (long) or
    falling (short) prices.
    """

    LONG = "long"
    SHORT = "short"

    @property
    def is_long(self) -> bool:
        """Check if position type is long."""
        return self == self.LONG

    @property
    def is_short(self) -> bool:
        """Check if position type is short."""
        return self == self.SHORT

    @property
    def sign(self) -> float:
        """Direction multiplier applied to price moves (+1 long, -1 short)."""
        return 1.0 if self.is_long else -1.0

    def opposite(self) -> "PositionType":
        """Get the opposite position type."""
        return self.SHORT if self.is_long else self.LONG  # type: ignore[return-value]


class ExitReason(StrEnum):
    """
    Reasons a position is closed.

    Exactly one reason is recorded per closed position.
    """

    STOP_LOSS = "stop_loss"
    TAKE_PROFIT = "take_profit"
    STRATEGY_EXIT = "strategy_exit"
    TIME_LIMIT = "time_limit"
