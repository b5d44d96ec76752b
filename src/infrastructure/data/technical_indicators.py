"""
Technical Indicators Calculator.

This module computes the technical indicators the strategy rules read from a
trailing price window: RSI, EMA/MACD, Bollinger Bands and support/resistance.

Two formula variants are available (see ``IndicatorMode``):

- SIMPLIFIED reproduces the dashboard's historical numbers. RSI is computed
  once from the first ``period`` price changes of the window and the MACD
  signal line is ``0.9 * macd``.
- STANDARD uses Wilder smoothing over the whole window for RSI and a
  9-period EMA of the MACD line as signal.

Every function degrades to a neutral value on insufficient data instead of
raising.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from src.core.constants import (
    BOLLINGER_PERIOD,
    BOLLINGER_STD_MULTIPLIER,
    MACD_FAST_PERIOD,
    MACD_SIGNAL_PERIOD,
    MACD_SLOW_PERIOD,
    MIN_INDICATOR_BARS,
    RSI_NEUTRAL,
    RSI_PERIOD,
    SIMPLIFIED_MACD_SIGNAL_FACTOR,
    SUPPORT_RESISTANCE_LOOKBACK,
    TRADING_PERIODS_PER_YEAR,
)
from src.core.enums import BandPosition, IndicatorMode
from src.core.models.bar import Bar


@dataclass(frozen=True)
class MACDResult:
    """MACD line, signal line and histogram at the last price."""

    macd: float
    signal: float

    @property
    def histogram(self) -> float:
        return self.macd - self.signal

    @property
    def is_bullish(self) -> bool:
        return self.macd > self.signal


@dataclass(frozen=True)
class BollingerBands:
    """Bollinger Bands at the last price."""

    upper: float
    middle: float
    lower: float
    position: BandPosition


@dataclass(frozen=True)
class IndicatorSnapshot:
    """All indicators a strategy rule may read for one window."""

    rsi: float
    macd: float
    macd_signal: float
    bollinger: BollingerBands
    support: float
    resistance: float


def _as_array(prices: Sequence[float]) -> np.ndarray:
    return np.asarray(prices, dtype=float)


def ema_series(prices: Sequence[float], period: int) -> pd.Series:
    """Recursive exponential moving average seeded with the first price.

    Args:
        prices: Ordered prices
        period: EMA span; smoothing factor is ``2 / (period + 1)``

    Returns:
        EMA value at every price
    """
    return pd.Series(_as_array(prices)).ewm(span=period, adjust=False).mean()


def calculate_ema(prices: Sequence[float], period: int) -> float:
    """EMA at the last price, 0 for an empty sequence."""
    if len(prices) == 0:
        return 0.0
    return float(ema_series(prices, period).iloc[-1])


def calculate_sma(prices: Sequence[float], period: int) -> float:
    """Simple moving average of the trailing ``period`` prices.

    Uses every available price when fewer than ``period`` are given and
    returns 0 for an empty sequence.
    """
    values = _as_array(prices)
    if values.size == 0:
        return 0.0
    return float(values[-period:].mean())


def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0.0:
        # No losses: overbought extreme, or neutral for a flat window
        return 100.0 if avg_gain > 0.0 else RSI_NEUTRAL
    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))


def calculate_rsi(
    prices: Sequence[float],
    period: int = RSI_PERIOD,
    mode: IndicatorMode = IndicatorMode.SIMPLIFIED,
) -> float:
    """Relative Strength Index.

    Args:
        prices: Ordered closing prices
        period: Number of price changes averaged
        mode: SIMPLIFIED averages only the first ``period`` changes of the
            sequence; STANDARD seeds with those and applies Wilder smoothing
            to every later change

    Returns:
        RSI in [0, 100]; 50 when fewer than ``period + 1`` prices are given
    """
    values = _as_array(prices)
    if values.size < period + 1:
        return RSI_NEUTRAL

    changes = np.diff(values)
    gains = np.where(changes > 0, changes, 0.0)
    losses = np.where(changes < 0, -changes, 0.0)

    avg_gain = float(gains[:period].mean())
    avg_loss = float(losses[:period].mean())

    if mode == IndicatorMode.STANDARD:
        for gain, loss in zip(gains[period:], losses[period:], strict=True):
            avg_gain = (avg_gain * (period - 1) + gain) / period
            avg_loss = (avg_loss * (period - 1) + loss) / period

    return _rsi_from_averages(avg_gain, avg_loss)


def calculate_macd(
    prices: Sequence[float],
    fast_period: int = MACD_FAST_PERIOD,
    slow_period: int = MACD_SLOW_PERIOD,
    signal_period: int = MACD_SIGNAL_PERIOD,
    mode: IndicatorMode = IndicatorMode.SIMPLIFIED,
) -> MACDResult:
    """MACD line (fast EMA minus slow EMA) and its signal line.

    Args:
        prices: Ordered closing prices
        fast_period: Fast EMA span
        slow_period: Slow EMA span
        signal_period: Signal EMA span (STANDARD mode only)
        mode: Signal line variant

    Returns:
        MACDResult; zeros for an empty sequence
    """
    if len(prices) == 0:
        return MACDResult(macd=0.0, signal=0.0)

    macd_line = ema_series(prices, fast_period) - ema_series(prices, slow_period)
    macd = float(macd_line.iloc[-1])

    if mode == IndicatorMode.STANDARD:
        signal = float(macd_line.ewm(span=signal_period, adjust=False).mean().iloc[-1])
    else:
        signal = macd * SIMPLIFIED_MACD_SIGNAL_FACTOR

    return MACDResult(macd=macd, signal=signal)


def calculate_bollinger_bands(
    prices: Sequence[float],
    period: int = BOLLINGER_PERIOD,
    std_multiplier: float = BOLLINGER_STD_MULTIPLIER,
) -> BollingerBands:
    """Bollinger Bands over the trailing ``period`` prices.

    The band width uses the population standard deviation. With fewer than
    ``period`` prices the bands collapse onto the last price and the position
    is neutral.
    """
    values = _as_array(prices)
    if values.size == 0:
        return BollingerBands(upper=0.0, middle=0.0, lower=0.0, position=BandPosition.NEUTRAL)

    current_price = float(values[-1])
    if values.size < period:
        return BollingerBands(
            upper=current_price,
            middle=current_price,
            lower=current_price,
            position=BandPosition.NEUTRAL,
        )

    tail = values[-period:]
    middle = float(tail.mean())
    deviation = float(tail.std()) * std_multiplier
    upper = middle + deviation
    lower = middle - deviation

    position = BandPosition.NEUTRAL
    if current_price > upper:
        position = BandPosition.OVERBOUGHT
    elif current_price < lower:
        position = BandPosition.OVERSOLD

    return BollingerBands(upper=upper, middle=middle, lower=lower, position=position)


def find_support_level(
    prices: Sequence[float], lookback: int = SUPPORT_RESISTANCE_LOOKBACK
) -> float:
    """Lowest of the trailing ``lookback`` prices (0 when empty)."""
    values = _as_array(prices)
    if values.size == 0:
        return 0.0
    return float(values[-lookback:].min())


def find_resistance_level(
    prices: Sequence[float], lookback: int = SUPPORT_RESISTANCE_LOOKBACK
) -> float:
    """Highest of the trailing ``lookback`` prices (0 when empty)."""
    values = _as_array(prices)
    if values.size == 0:
        return 0.0
    return float(values[-lookback:].max())


def calculate_price_volatility(
    prices: Sequence[float], periods_per_year: int = TRADING_PERIODS_PER_YEAR
) -> float:
    """Annualized volatility of bar-to-bar simple returns.

    Uses the population variance of the returns scaled by
    ``periods_per_year``. This is a price-series measure; trade-return
    volatility in the performance analyzer is per trade and not annualized.

    Returns:
        ``sqrt(variance * periods_per_year)``; 0 with fewer than two prices
    """
    values = _as_array(prices)
    if values.size < 2:
        return 0.0

    returns = np.diff(values) / values[:-1]
    variance = float(returns.var())
    return float(np.sqrt(variance * periods_per_year))


class TechnicalIndicatorsCalculator:
    """
    Computes an ``IndicatorSnapshot`` for a trailing window of bars.

    The formula variant is fixed per calculator so that one backtest uses a
    single indicator mode throughout.
    """

    def __init__(
        self,
        mode: IndicatorMode = IndicatorMode.SIMPLIFIED,
        min_bars: int = MIN_INDICATOR_BARS,
    ) -> None:
        self.mode = IndicatorMode(mode)
        self.min_bars = min_bars

    @staticmethod
    def closes(window: Sequence[Bar]) -> list[float]:
        """Closing prices of a bar window."""
        return [bar.close for bar in window]

    def calculate(
        self,
        window: Sequence[Bar],
        rsi_period: int = RSI_PERIOD,
        macd_fast: int = MACD_FAST_PERIOD,
        macd_slow: int = MACD_SLOW_PERIOD,
    ) -> IndicatorSnapshot:
        """
        Calculate every indicator for the window.

        Args:
            window: Bars preceding the evaluated bar, most recent last
            rsi_period: RSI look-back
            macd_fast: Fast EMA span of the MACD line
            macd_slow: Slow EMA span of the MACD line

        Returns:
            Snapshot; RSI and MACD are neutral (50, 0, 0) when the window has
            fewer than ``min_bars`` bars
        """
        prices = self.closes(window)
        bollinger = calculate_bollinger_bands(prices)
        support = find_support_level(prices)
        resistance = find_resistance_level(prices)

        if len(prices) < self.min_bars:
            return IndicatorSnapshot(
                rsi=RSI_NEUTRAL,
                macd=0.0,
                macd_signal=0.0,
                bollinger=bollinger,
                support=support,
                resistance=resistance,
            )

        macd = calculate_macd(prices, fast_period=macd_fast, slow_period=macd_slow, mode=self.mode)
        return IndicatorSnapshot(
            rsi=calculate_rsi(prices, period=rsi_period, mode=self.mode),
            macd=macd.macd,
            macd_signal=macd.signal,
            bollinger=bollinger,
            support=support,
            resistance=resistance,
        )
