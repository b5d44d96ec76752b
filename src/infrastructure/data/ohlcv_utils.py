"""
OHLCV utility functions.

This module provides timestamp normalization and date-range filtering shared
by every market data source.
"""

from datetime import datetime

import pandas as pd

from src.core.exceptions.backtest import DataError
from src.core.models.bar import OHLCV_COLUMNS


class OHLCVUtils:
    """Utility functions for OHLCV DataFrames."""

    @staticmethod
    def empty_frame() -> pd.DataFrame:
        """Empty DataFrame with the OHLCV columns."""
        return pd.DataFrame(
            {
                "timestamp": pd.Series(dtype="datetime64[ns, UTC]"),
                "open": pd.Series(dtype="float64"),
                "high": pd.Series(dtype="float64"),
                "low": pd.Series(dtype="float64"),
                "close": pd.Series(dtype="float64"),
                "volume": pd.Series(dtype="float64"),
            }
        )

    @staticmethod
    def to_utc_timestamp(value: datetime | pd.Timestamp) -> pd.Timestamp:
        """Convert a datetime to a UTC pandas Timestamp (naive values are taken as UTC)."""
        timestamp = pd.Timestamp(value)
        if timestamp.tzinfo is None:
            return timestamp.tz_localize("UTC")
        return timestamp.tz_convert("UTC")

    @staticmethod
    def normalize_timestamps(df: pd.DataFrame) -> pd.DataFrame:
        """Convert the timestamp column to timezone-aware UTC datetimes.

        Integer timestamps are interpreted as epoch milliseconds, everything
        else is parsed as datetimes.

        Raises:
            DataError: If the column is missing or cannot be parsed
        """
        if "timestamp" not in df.columns:
            raise DataError("Missing required column: timestamp")

        result = df.copy()
        try:
            if pd.api.types.is_numeric_dtype(result["timestamp"]):
                result["timestamp"] = pd.to_datetime(result["timestamp"], unit="ms", utc=True)
            else:
                result["timestamp"] = pd.to_datetime(result["timestamp"], utc=True)
        except (ValueError, TypeError) as e:
            raise DataError(f"Unparseable timestamps: {e}") from e
        return result

    @staticmethod
    def filter_by_date_range(
        df: pd.DataFrame, start_date: datetime, end_date: datetime
    ) -> pd.DataFrame:
        """Filter a normalized DataFrame to [start_date, end_date] and sort by timestamp."""
        if df.empty:
            return df

        missing_columns = set(OHLCV_COLUMNS) - set(df.columns)
        if missing_columns:
            raise DataError(f"Missing required columns: {sorted(missing_columns)}")

        start_ts = OHLCVUtils.to_utc_timestamp(start_date)
        end_ts = OHLCVUtils.to_utc_timestamp(end_date)

        mask = (df["timestamp"] >= start_ts) & (df["timestamp"] <= end_ts)
        filtered_df = df.loc[mask, OHLCV_COLUMNS].copy()

        return filtered_df.sort_values("timestamp", kind="stable").reset_index(drop=True)
