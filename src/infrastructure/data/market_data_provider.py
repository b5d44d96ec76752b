"""
Market data provider.

Wraps an ``IMarketDataSource`` with normalization, validation and a
per-instance LRU cache, and hands the simulation loop ready-made bars.
"""

from datetime import datetime

import pandas as pd
from cachetools import LRUCache
from loguru import logger

from src.core.constants import MARKET_DATA_CACHE_SIZE
from src.core.enums import Timeframe
from src.core.interfaces.data import IMarketDataSource
from src.core.models.bar import Bar

from .ohlcv_utils import OHLCVUtils
from .ohlcv_validator import OHLCVValidator

CacheKey = tuple[str, str, pd.Timestamp, pd.Timestamp]


class MarketDataProvider:
    """
    Loads, validates and caches bars per (symbol, timeframe, date range).

    The cache belongs to the provider instance; two engines never share
    cached data.
    """

    def __init__(self, source: IMarketDataSource, cache_size: int = MARKET_DATA_CACHE_SIZE):
        if cache_size <= 0:
            raise ValueError("Cache size must be positive")

        self.source = source
        self._validator = OHLCVValidator()
        self._cache: LRUCache[CacheKey, tuple[Bar, ...]] = LRUCache(maxsize=cache_size)
        self._hits = 0
        self._misses = 0

    @staticmethod
    def _build_cache_key(
        symbol: str, timeframe: Timeframe, start_date: datetime, end_date: datetime
    ) -> CacheKey:
        return (
            symbol,
            Timeframe(timeframe).value,
            OHLCVUtils.to_utc_timestamp(start_date),
            OHLCVUtils.to_utc_timestamp(end_date),
        )

    async def load_bars(
        self, symbol: str, timeframe: Timeframe, start_date: datetime, end_date: datetime
    ) -> list[Bar]:
        """
        Load bars for one symbol.

        Returns:
            Time-ordered bars; empty when the source has no data

        Raises:
            DataError: If the source fails to load data
            ValidationError: If the loaded data is malformed
        """
        cache_key = self._build_cache_key(symbol, timeframe, start_date, end_date)
        cached = self._cache.get(cache_key)
        if cached is not None:
            self._hits += 1
            logger.debug(f"Cache hit for {symbol} {timeframe}")
            return list(cached)

        self._misses += 1
        frame = await self.source.load_bars(symbol, timeframe, start_date, end_date)
        bars = self._prepare_bars(frame, symbol)
        self._cache[cache_key] = tuple(bars)

        if not bars:
            logger.warning(f"No bars returned for {symbol} {timeframe}")
        return bars

    def _prepare_bars(self, frame: pd.DataFrame, symbol: str) -> list[Bar]:
        """Normalize, validate and sort a source DataFrame into bars."""
        if frame.empty:
            return []

        normalized = OHLCVUtils.normalize_timestamps(frame)
        self._validator.validate_data(normalized, symbol)
        ordered = normalized.sort_values("timestamp", kind="stable").reset_index(drop=True)
        return Bar.from_dataframe(ordered)

    def clear_cache(self) -> None:
        """Drop every cached series."""
        self._cache.clear()

    def get_cache_info(self) -> dict[str, int]:
        """Get cache statistics."""
        return {
            "size": len(self._cache),
            "max_size": int(self._cache.maxsize),
            "hits": self._hits,
            "misses": self._misses,
        }
