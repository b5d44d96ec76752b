"""
Strategy rules.

A rule turns a trailing window of bars into entry and exit decisions for one
strategy. Rules are stateless: everything they need is the strategy
definition, the current and previous bar and the window of bars preceding
the current bar.

Every rule shares the same risk exits, checked on the close price in a fixed
order: stop-loss, take-profit, then the holding-time limit. Rules may add a
strategy-specific exit after those.
"""

from collections.abc import Sequence

from src.core.constants import (
    BREAKOUT_LOOKBACK,
    MA_FAST_PERIOD,
    MA_SLOW_PERIOD,
    MACD_FAST_PERIOD,
    MACD_SLOW_PERIOD,
    RSI_OVERBOUGHT,
    RSI_OVERSOLD,
    RSI_PERIOD,
)
from src.core.enums import BandPosition, ExitReason, PositionType
from src.core.exceptions.backtest import StrategyError
from src.core.interfaces.strategy import IStrategyRule
from src.core.models.bar import Bar
from src.core.models.position import Position
from src.core.models.strategy import Strategy
from src.infrastructure.data.technical_indicators import (
    TechnicalIndicatorsCalculator,
    calculate_bollinger_bands,
    calculate_ema,
    calculate_sma,
)


class BaseStrategyRule(IStrategyRule):
    """
    Base class implementing the shared risk exits.

    Subclasses implement ``check_entry`` and may override
    ``check_strategy_exit``.
    """

    def __init__(self, calculator: TechnicalIndicatorsCalculator | None = None):
        self.calculator = calculator or TechnicalIndicatorsCalculator()

    def check_exit(
        self,
        strategy: Strategy,
        position: Position,
        current_bar: Bar,
        previous_bar: Bar,
        window: Sequence[Bar],
    ) -> ExitReason | None:
        price = current_bar.close

        if position.is_stop_hit(price):
            return ExitReason.STOP_LOSS
        if position.is_target_hit(price):
            return ExitReason.TAKE_PROFIT
        if position.age_hours(current_bar.timestamp) >= strategy.max_holding_hours:
            return ExitReason.TIME_LIMIT

        return self.check_strategy_exit(strategy, position, current_bar, previous_bar, window)

    def check_strategy_exit(
        self,
        strategy: Strategy,
        position: Position,
        current_bar: Bar,
        previous_bar: Bar,
        window: Sequence[Bar],
    ) -> ExitReason | None:
        """Strategy-specific exit evaluated after the risk exits. None by default."""
        return None


class RSIMACDRule(BaseStrategyRule):
    """
    Momentum reversal rule.

    Long when RSI is oversold while MACD is above its signal line, short when
    RSI is overbought while MACD is below it.
    """

    def check_entry(
        self,
        strategy: Strategy,
        current_bar: Bar,
        previous_bar: Bar,
        window: Sequence[Bar],
    ) -> PositionType | None:
        snapshot = self.calculator.calculate(
            window,
            rsi_period=int(strategy.get_parameter("rsiPeriod", RSI_PERIOD)),
            macd_fast=int(strategy.get_parameter("macdFast", MACD_FAST_PERIOD)),
            macd_slow=int(strategy.get_parameter("macdSlow", MACD_SLOW_PERIOD)),
        )
        oversold = float(strategy.get_parameter("rsiOversold", RSI_OVERSOLD))
        overbought = float(strategy.get_parameter("rsiOverbought", RSI_OVERBOUGHT))

        if snapshot.rsi < oversold and snapshot.macd > snapshot.macd_signal:
            return PositionType.LONG
        if snapshot.rsi > overbought and snapshot.macd < snapshot.macd_signal:
            return PositionType.SHORT
        return None


class BreakoutRule(BaseStrategyRule):
    """
    Range breakout rule.

    Long when the close clears the highest high of the trailing look-back,
    short when it falls through the lowest low. An optional ``minVolume``
    parameter ignores breakouts on thin bars.
    """

    def check_entry(
        self,
        strategy: Strategy,
        current_bar: Bar,
        previous_bar: Bar,
        window: Sequence[Bar],
    ) -> PositionType | None:
        lookback = int(strategy.get_parameter("lookbackPeriod", BREAKOUT_LOOKBACK))
        if lookback <= 0:
            raise StrategyError(f"lookbackPeriod must be positive, got {lookback}")
        recent = list(window)[-lookback:]
        if not recent:
            return None

        min_volume = strategy.get_parameter("minVolume")
        if min_volume is not None and current_bar.volume < float(min_volume):
            return None

        resistance = max(bar.high for bar in recent)
        support = min(bar.low for bar in recent)

        if current_bar.close > resistance:
            return PositionType.LONG
        if current_bar.close < support:
            return PositionType.SHORT
        return None


class MovingAverageCrossRule(BaseStrategyRule):
    """
    Moving-average crossover rule.

    Compares a fast and a slow average of the window closes before and after
    the current close is added. A fast-over-slow cross opens a long, the
    opposite cross opens a short, and an open position is closed with
    ``strategy_exit`` when the averages cross against it.
    """

    def _cross(self, strategy: Strategy, current_bar: Bar, window: Sequence[Bar]) -> PositionType | None:
        fast_period = int(strategy.get_parameter("fastMA", MA_FAST_PERIOD))
        slow_period = int(strategy.get_parameter("slowMA", MA_SLOW_PERIOD))
        use_ema = bool(strategy.get_parameter("ema", False))

        prices = self.calculator.closes(window) + [current_bar.close]
        if len(prices) < slow_period + 1:
            return None

        average = calculate_ema if use_ema else calculate_sma
        previous_fast = average(prices[:-1], fast_period)
        previous_slow = average(prices[:-1], slow_period)
        current_fast = average(prices, fast_period)
        current_slow = average(prices, slow_period)

        if previous_fast <= previous_slow and current_fast > current_slow:
            return PositionType.LONG
        if previous_fast >= previous_slow and current_fast < current_slow:
            return PositionType.SHORT
        return None

    def check_entry(
        self,
        strategy: Strategy,
        current_bar: Bar,
        previous_bar: Bar,
        window: Sequence[Bar],
    ) -> PositionType | None:
        return self._cross(strategy, current_bar, window)

    def check_strategy_exit(
        self,
        strategy: Strategy,
        position: Position,
        current_bar: Bar,
        previous_bar: Bar,
        window: Sequence[Bar],
    ) -> ExitReason | None:
        cross = self._cross(strategy, current_bar, window)
        if cross is not None and cross == position.position_type.opposite():
            return ExitReason.STRATEGY_EXIT
        return None


class BollingerReversionRule(BaseStrategyRule):
    """
    Mean reversion off the Bollinger Bands.

    Long when the last window close sits below the lower band and the current
    close turns back up; short when it sits above the upper band and the
    current close turns down. Positions are closed once price returns to the
    middle band.
    """

    def check_entry(
        self,
        strategy: Strategy,
        current_bar: Bar,
        previous_bar: Bar,
        window: Sequence[Bar],
    ) -> PositionType | None:
        bands = calculate_bollinger_bands(self.calculator.closes(window))

        if bands.position == BandPosition.OVERSOLD and current_bar.close > previous_bar.close:
            return PositionType.LONG
        if bands.position == BandPosition.OVERBOUGHT and current_bar.close < previous_bar.close:
            return PositionType.SHORT
        return None

    def check_strategy_exit(
        self,
        strategy: Strategy,
        position: Position,
        current_bar: Bar,
        previous_bar: Bar,
        window: Sequence[Bar],
    ) -> ExitReason | None:
        bands = calculate_bollinger_bands(self.calculator.closes(window))
        if bands.position == BandPosition.NEUTRAL and bands.upper == bands.lower:
            # Not enough history for meaningful bands
            return None

        if position.position_type.is_long and current_bar.close >= bands.middle:
            return ExitReason.STRATEGY_EXIT
        if position.position_type.is_short and current_bar.close <= bands.middle:
            return ExitReason.STRATEGY_EXIT
        return None
