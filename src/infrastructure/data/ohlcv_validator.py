"""
OHLCV data validation module.

Provides validation for OHLCV market data including structure, data types,
value ranges, and relationship validation.
"""

import pandas as pd
from loguru import logger

from src.core.constants import EXTREME_MOVE_THRESHOLD
from src.core.exceptions.backtest import ValidationError
from src.core.models.bar import OHLCV_COLUMNS


class OHLCVValidator:
    """
    OHLCV data validator.

    Features:
    - Data structure validation (required columns, duplicates)
    - Data type validation for numeric columns
    - Value range validation (positive prices, non-negative volume)
    - OHLC relationship validation
    - Data quality checks with warnings
    """

    def validate_data(self, data: pd.DataFrame, symbol: str = "") -> bool:
        """
        Validate OHLCV data integrity.

        Args:
            data: DataFrame with normalized OHLCV data
            symbol: Symbol name used in messages

        Returns:
            True if data is valid

        Raises:
            ValidationError: If data has integrity issues
        """
        if data.empty:
            return True

        self._validate_data_structure(data, symbol)
        self._validate_data_types(data, symbol)
        self._validate_data_values(data, symbol)
        self._validate_ohlc_relationships(data, symbol)
        self._validate_data_quality(data, symbol)

        return True

    def _validate_data_structure(self, data: pd.DataFrame, symbol: str) -> None:
        """Validate basic data structure requirements."""
        missing_columns = set(OHLCV_COLUMNS) - set(data.columns)
        if missing_columns:
            raise ValidationError(f"{symbol}: missing required columns: {sorted(missing_columns)}")

        if data["timestamp"].duplicated().any():
            raise ValidationError(f"{symbol}: duplicate timestamps found in data")

    def _validate_data_types(self, data: pd.DataFrame, symbol: str) -> None:
        """Validate data types for numeric columns."""
        for col in OHLCV_COLUMNS[1:]:
            if not pd.api.types.is_numeric_dtype(data[col]):
                raise ValidationError(f"{symbol}: column {col} must be numeric")

        for col in OHLCV_COLUMNS:
            if data[col].isna().any():
                raise ValidationError(f"{symbol}: column {col} contains NaN values")

    def _validate_data_values(self, data: pd.DataFrame, symbol: str) -> None:
        """Validate value ranges for prices and volume."""
        for col in ["open", "high", "low", "close"]:
            if (data[col] <= 0).any():
                raise ValidationError(f"{symbol}: column {col} contains non-positive values")

        if (data["volume"] < 0).any():
            raise ValidationError(f"{symbol}: volume column contains negative values")

    def _validate_ohlc_relationships(self, data: pd.DataFrame, symbol: str) -> None:
        """Validate OHLC price relationships."""
        invalid_ohlc = (
            (data["high"] < data["low"])
            | (data["high"] < data["open"])
            | (data["high"] < data["close"])
            | (data["low"] > data["open"])
            | (data["low"] > data["close"])
        )

        if invalid_ohlc.any():
            raise ValidationError(
                f"{symbol}: invalid OHLC relationships found in {int(invalid_ohlc.sum())} rows"
            )

    def _validate_data_quality(self, data: pd.DataFrame, symbol: str) -> None:
        """Log warnings for anomalies that do not invalidate the data."""
        bar_range = (data["high"] - data["low"]) / data["low"]
        extreme_moves = bar_range > EXTREME_MOVE_THRESHOLD

        if extreme_moves.any():
            logger.warning(
                f"{symbol}: found {int(extreme_moves.sum())} bars with extreme price ranges "
                f"(>{EXTREME_MOVE_THRESHOLD:.0%})"
            )

        if not data["timestamp"].is_monotonic_increasing:
            logger.warning(f"{symbol}: timestamps are not in ascending order")
