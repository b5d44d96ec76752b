"""
Bar timeframes.

A timeframe value is a count followed by a unit letter: m (minutes),
h (hours), d (days) or w (weeks).
"""

from datetime import timedelta
from enum import StrEnum

_UNIT_SECONDS = {"m": 60, "h": 3600, "d": 86400, "w": 604800}


class Timeframe(StrEnum):
    """Supported bar intervals."""

    M1 = "1m"
    M5 = "5m"
    M15 = "15m"
    M30 = "30m"
    H1 = "1h"
    H4 = "4h"
    D1 = "1d"
    W1 = "1w"

    @classmethod
    def from_string(cls, value: str) -> "Timeframe":
        """
        Parse a timeframe, ignoring case and surrounding whitespace.

        Raises:
            ValueError: If the timeframe is not supported
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unsupported timeframe: {value}. "
                f"Supported timeframes: {', '.join(tf.value for tf in cls)}"
            ) from None

    @property
    def seconds(self) -> int:
        """Length of one bar in seconds."""
        return int(self.value[:-1]) * _UNIT_SECONDS[self.value[-1]]

    @property
    def interval(self) -> timedelta:
        """Spacing between two consecutive bars."""
        return timedelta(seconds=self.seconds)
