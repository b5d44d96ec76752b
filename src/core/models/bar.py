"""
OHLCV bar domain model.
"""

from dataclasses import dataclass
from datetime import datetime

import pandas as pd

from src.core.exceptions.backtest import DataError, ValidationError

OHLCV_COLUMNS = ["timestamp", "open", "high", "low", "close", "volume"]


@dataclass(frozen=True, slots=True)
class Bar:
    """One OHLCV sample for a symbol at a point in time."""

    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float

    def __post_init__(self) -> None:
        """Validate prices, volume and the OHLC envelope."""
        for name in ("open", "high", "low", "close"):
            value = getattr(self, name)
            if value <= 0:
                raise ValidationError(f"Bar {name} must be positive, got {value}")
        if self.volume < 0:
            raise ValidationError(f"Bar volume must be non-negative, got {self.volume}")
        if self.high < max(self.open, self.close, self.low) or self.low > min(self.open, self.close):
            raise ValidationError(
                f"Inconsistent OHLC at {self.timestamp}: "
                f"o={self.open} h={self.high} l={self.low} c={self.close}"
            )

    @classmethod
    def from_dataframe(cls, data: pd.DataFrame) -> list["Bar"]:
        """Convert a normalized OHLCV DataFrame into bars.

        Args:
            data: DataFrame with a datetime ``timestamp`` column and OHLCV columns

        Returns:
            Bars in the DataFrame's row order

        Raises:
            DataError: If required columns are missing
        """
        if data.empty:
            return []

        missing_columns = set(OHLCV_COLUMNS) - set(data.columns)
        if missing_columns:
            raise DataError(f"Missing required columns: {sorted(missing_columns)}")

        timestamps = [ts.to_pydatetime() for ts in pd.to_datetime(data["timestamp"])]
        return [
            cls(
                timestamp=timestamp,
                open=float(row_open),
                high=float(row_high),
                low=float(row_low),
                close=float(row_close),
                volume=float(row_volume),
            )
            for timestamp, row_open, row_high, row_low, row_close, row_volume in zip(
                timestamps,
                data["open"],
                data["high"],
                data["low"],
                data["close"],
                data["volume"],
                strict=True,
            )
        ]
