"""
In-memory market data source.

Serves caller-supplied DataFrames, e.g. bars fetched elsewhere or
hand-built fixtures.
"""

from collections.abc import Mapping
from datetime import datetime

import pandas as pd
from loguru import logger

from src.core.enums import Timeframe
from src.core.interfaces.data import IMarketDataSource

from .ohlcv_utils import OHLCVUtils


class InMemoryMarketDataSource(IMarketDataSource):
    """Market data source backed by one OHLCV DataFrame per symbol."""

    def __init__(self, frames: Mapping[str, pd.DataFrame]):
        self._frames = {
            symbol: OHLCVUtils.normalize_timestamps(frame) for symbol, frame in frames.items()
        }

    @property
    def symbols(self) -> list[str]:
        """Symbols with data."""
        return sorted(self._frames)

    async def load_bars(
        self, symbol: str, timeframe: Timeframe, start_date: datetime, end_date: datetime
    ) -> pd.DataFrame:
        """Return the symbol's bars inside the date range (timeframe is not resampled)."""
        frame = self._frames.get(symbol)
        if frame is None:
            logger.warning(f"No in-memory data for {symbol}")
            return OHLCVUtils.empty_frame()

        return OHLCVUtils.filter_by_date_range(frame, start_date, end_date)
