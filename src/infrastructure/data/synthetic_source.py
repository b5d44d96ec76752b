"""
Synthetic market data source.

Generates a random-walk OHLCV series for any symbol. The series is a pure
function of (seed, symbol, timeframe, date range), which makes it suitable
for reproducible tests and demos.
"""

import zlib
from datetime import datetime

import numpy as np
import pandas as pd
from loguru import logger

from src.core.constants import (
    SYNTHETIC_BASE_PRICE,
    SYNTHETIC_DEFAULT_SEED,
    SYNTHETIC_MAX_STEP,
    SYNTHETIC_MAX_WICK,
    SYNTHETIC_MIN_VOLUME,
    SYNTHETIC_VOLUME_RANGE,
)
from src.core.enums import Timeframe
from src.core.interfaces.data import IMarketDataSource
from src.core.utils.validation import validate_positive

from .ohlcv_utils import OHLCVUtils


class SyntheticMarketDataSource(IMarketDataSource):
    """
    Seeded random-walk bar generator.

    Each bar moves the close by a uniform step in ``[-max_step, +max_step)``.
    Open equals close, high and low sit within ``max_wick`` of the close and
    volume is uniform in ``[min_volume, min_volume + volume_range)``.
    """

    def __init__(
        self,
        seed: int = SYNTHETIC_DEFAULT_SEED,
        base_price: float = SYNTHETIC_BASE_PRICE,
        max_step: float = SYNTHETIC_MAX_STEP,
        max_wick: float = SYNTHETIC_MAX_WICK,
    ):
        self.seed = seed
        self.base_price = validate_positive(base_price, "base_price")
        self.max_step = max_step
        self.max_wick = max_wick

    def _rng_for(self, symbol: str) -> np.random.Generator:
        """Independent generator per symbol, stable across processes."""
        return np.random.default_rng([self.seed, zlib.crc32(symbol.encode("utf-8"))])

    async def load_bars(
        self, symbol: str, timeframe: Timeframe, start_date: datetime, end_date: datetime
    ) -> pd.DataFrame:
        """Generate bars from start_date to end_date (inclusive) at the timeframe's spacing."""
        timestamps = pd.date_range(
            start=OHLCVUtils.to_utc_timestamp(start_date),
            end=OHLCVUtils.to_utc_timestamp(end_date),
            freq=pd.Timedelta(Timeframe(timeframe).interval),
        )
        count = len(timestamps)
        if count == 0:
            return OHLCVUtils.empty_frame()

        rng = self._rng_for(symbol)
        steps = (rng.random(count) - 0.5) * 2 * self.max_step
        closes = self.base_price * np.cumprod(1 + steps)
        highs = closes * (1 + rng.random(count) * self.max_wick)
        lows = closes * (1 - rng.random(count) * self.max_wick)
        volumes = rng.random(count) * SYNTHETIC_VOLUME_RANGE + SYNTHETIC_MIN_VOLUME

        logger.debug(f"Generated {count} synthetic {timeframe} bars for {symbol}")

        return pd.DataFrame(
            {
                "timestamp": timestamps,
                "open": closes,
                "high": highs,
                "low": lows,
                "close": closes,
                "volume": volumes,
            }
        )
