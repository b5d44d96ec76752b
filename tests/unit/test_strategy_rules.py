"""
Unit tests for strategy rules.

Windows are built by hand so each signal condition is met (or missed) on
purpose.
"""

from datetime import timedelta

import pytest

from src.core.enums import ExitReason, IndicatorMode, PositionType
from src.core.exceptions.backtest import StrategyError
from src.core.models.position import Position
from src.engine.strategy_rules import (
    BollingerReversionRule,
    BreakoutRule,
    MovingAverageCrossRule,
    RSIMACDRule,
)
from src.infrastructure.data.technical_indicators import TechnicalIndicatorsCalculator
from tests.builders import START, make_bars, make_strategy


def _position(
    position_type: PositionType = PositionType.LONG,
    entry_price: float = 1.0,
    stop_loss_percent: float = 2.0,
    take_profit_percent: float = 4.0,
) -> Position:
    return Position.open(
        symbol="EUR/USD",
        position_type=position_type,
        entry_price=entry_price,
        entry_time=START,
        risk_amount=100.0,
        stop_loss_percent=stop_loss_percent,
        take_profit_percent=take_profit_percent,
    )


def _bar_at(close: float, hours: float = 1.0):
    return make_bars([close], start=START + timedelta(hours=hours))[0]


class TestRiskExits:
    """Test suite for the exits shared by every rule."""

    @pytest.fixture
    def rule(self) -> RSIMACDRule:
        return RSIMACDRule(TechnicalIndicatorsCalculator())

    def test_should_exit_long_at_stop_loss(self, rule: RSIMACDRule) -> None:
        """Test a close at or below the stop."""
        strategy = make_strategy()
        reason = rule.check_exit(strategy, _position(), _bar_at(0.979), _bar_at(1.0), [])

        assert reason == ExitReason.STOP_LOSS

    def test_should_exit_long_at_take_profit(self, rule: RSIMACDRule) -> None:
        """Test a close at or above the target."""
        strategy = make_strategy()
        reason = rule.check_exit(strategy, _position(), _bar_at(1.05), _bar_at(1.0), [])

        assert reason == ExitReason.TAKE_PROFIT

    def test_should_mirror_exits_for_short(self, rule: RSIMACDRule) -> None:
        """Test short stop above and target below entry."""
        strategy = make_strategy()
        short = _position(PositionType.SHORT)

        assert rule.check_exit(strategy, short, _bar_at(1.021), _bar_at(1.0), []) == (
            ExitReason.STOP_LOSS
        )
        assert rule.check_exit(strategy, short, _bar_at(0.95), _bar_at(1.0), []) == (
            ExitReason.TAKE_PROFIT
        )

    def test_should_exit_at_time_limit(self, rule: RSIMACDRule) -> None:
        """Test the 24h default holding limit (inclusive)."""
        strategy = make_strategy()

        assert rule.check_exit(strategy, _position(), _bar_at(1.0, hours=23), _bar_at(1.0), []) is None
        assert rule.check_exit(strategy, _position(), _bar_at(1.0, hours=24), _bar_at(1.0), []) == (
            ExitReason.TIME_LIMIT
        )

    def test_should_honor_max_holding_time_parameter(self, rule: RSIMACDRule) -> None:
        """Test a custom holding limit."""
        strategy = make_strategy(maxHoldingTime=4)

        assert rule.check_exit(strategy, _position(), _bar_at(1.0, hours=4), _bar_at(1.0), []) == (
            ExitReason.TIME_LIMIT
        )

    def test_should_check_stop_before_time_limit(self, rule: RSIMACDRule) -> None:
        """Test the fixed check order."""
        strategy = make_strategy()
        reason = rule.check_exit(strategy, _position(), _bar_at(0.9, hours=48), _bar_at(1.0), [])

        assert reason == ExitReason.STOP_LOSS


class TestRSIMACDRule:
    """Test suite for the RSI/MACD rule."""

    @pytest.fixture
    def rule(self) -> RSIMACDRule:
        return RSIMACDRule(TechnicalIndicatorsCalculator(IndicatorMode.SIMPLIFIED))

    def test_should_go_long_when_oversold_with_bullish_macd(self, rule: RSIMACDRule) -> None:
        """Test oversold RSI (falling start) with a rising tail (MACD > signal)."""
        falling = [2.0 - 0.01 * i for i in range(15)]
        rising = [falling[-1] + 0.02 * (i + 1) for i in range(35)]
        window = make_bars(falling + rising)

        direction = rule.check_entry(make_strategy(), _bar_at(2.6, 50), window[-1], window)

        assert direction == PositionType.LONG

    def test_should_go_short_when_overbought_with_bearish_macd(self, rule: RSIMACDRule) -> None:
        """Test overbought RSI (rising start) with a falling tail."""
        rising = [1.0 + 0.01 * i for i in range(15)]
        falling = [rising[-1] - 0.02 * (i + 1) for i in range(35)]
        window = make_bars(rising + falling)

        direction = rule.check_entry(make_strategy(), _bar_at(0.4, 50), window[-1], window)

        assert direction == PositionType.SHORT

    def test_should_not_enter_on_flat_prices(self, rule: RSIMACDRule) -> None:
        """Test neutral indicators on a flat window."""
        window = make_bars([1.085] * 50)

        assert rule.check_entry(make_strategy(), _bar_at(1.085, 50), window[-1], window) is None

    def test_should_not_enter_with_short_window(self, rule: RSIMACDRule) -> None:
        """Test fewer than 14 bars keeps indicators neutral."""
        window = make_bars([2.0 - 0.01 * i for i in range(13)])

        assert rule.check_entry(make_strategy(), _bar_at(1.8, 13), window[-1], window) is None

    def test_should_honor_threshold_parameters(self, rule: RSIMACDRule) -> None:
        """Test custom oversold threshold disables the long signal."""
        falling = [2.0 - 0.01 * i for i in range(15)]
        rising = [falling[-1] + 0.02 * (i + 1) for i in range(35)]
        window = make_bars(falling + rising)
        strategy = make_strategy(rsiOversold=-1)

        assert rule.check_entry(strategy, _bar_at(2.6, 50), window[-1], window) is None


class TestBreakoutRule:
    """Test suite for the breakout rule."""

    @pytest.fixture
    def rule(self) -> BreakoutRule:
        return BreakoutRule(TechnicalIndicatorsCalculator())

    @pytest.fixture
    def window(self):
        # A spike older than the 20-bar lookback must not count as resistance
        return make_bars([5.0] + [1.0] * 24, wick=0.01)

    def test_should_go_long_above_recent_high(self, rule: BreakoutRule, window) -> None:
        """Test close above the highest high of the lookback."""
        strategy = make_strategy("breakout", lookbackPeriod=20)

        assert rule.check_entry(strategy, _bar_at(1.02, 25), window[-1], window) == (
            PositionType.LONG
        )

    def test_should_go_short_below_recent_low(self, rule: BreakoutRule, window) -> None:
        """Test close below the lowest low of the lookback."""
        strategy = make_strategy("breakout", lookbackPeriod=20)

        assert rule.check_entry(strategy, _bar_at(0.98, 25), window[-1], window) == (
            PositionType.SHORT
        )

    def test_should_stay_flat_inside_range(self, rule: BreakoutRule, window) -> None:
        """Test no signal within the range."""
        strategy = make_strategy("breakout")

        assert rule.check_entry(strategy, _bar_at(1.005, 25), window[-1], window) is None
        assert rule.check_entry(strategy, _bar_at(1.5, 1), window[0], []) is None

    def test_should_ignore_thin_volume(self, rule: BreakoutRule, window) -> None:
        """Test the minVolume filter."""
        strategy = make_strategy("breakout", minVolume=2_000_000)

        assert rule.check_entry(strategy, _bar_at(1.02, 25), window[-1], window) is None

    @pytest.mark.parametrize("lookback", [0, -5])
    def test_should_reject_non_positive_lookback(
        self, rule: BreakoutRule, window, lookback: int
    ) -> None:
        """Test a zero or negative lookbackPeriod is an error, not the whole window."""
        strategy = make_strategy("breakout", lookbackPeriod=lookback)

        with pytest.raises(StrategyError, match="lookbackPeriod must be positive"):
            rule.check_entry(strategy, _bar_at(1.02, 25), window[-1], window)


class TestMovingAverageCrossRule:
    """Test suite for the moving-average crossover rule."""

    @pytest.fixture
    def rule(self) -> MovingAverageCrossRule:
        return MovingAverageCrossRule(TechnicalIndicatorsCalculator())

    @pytest.fixture
    def strategy(self):
        return make_strategy("moving_average", fastMA=2, slowMA=3, ema=False)

    def test_should_go_long_on_upward_cross(self, rule, strategy) -> None:
        """Test fast SMA crossing above slow SMA."""
        window = make_bars([1.0] * 4)

        assert rule.check_entry(strategy, _bar_at(2.0, 4), window[-1], window) == PositionType.LONG

    def test_should_go_short_on_downward_cross(self, rule, strategy) -> None:
        """Test fast SMA crossing below slow SMA."""
        window = make_bars([1.0] * 4)

        assert rule.check_entry(strategy, _bar_at(0.5, 4), window[-1], window) == (
            PositionType.SHORT
        )

    def test_should_need_slow_period_history(self, rule, strategy) -> None:
        """Test no signal without enough closes."""
        window = make_bars([1.0] * 2)

        assert rule.check_entry(strategy, _bar_at(2.0, 2), window[-1], window) is None

    def test_should_exit_on_opposite_cross(self, rule, strategy) -> None:
        """Test strategy exit when averages cross against the position."""
        window = make_bars([1.0] * 4)

        reason = rule.check_exit(strategy, _position(), _bar_at(0.999, 4), window[-1], window)

        assert reason == ExitReason.STRATEGY_EXIT

    def test_should_keep_position_on_same_direction_cross(self, rule, strategy) -> None:
        """Test a cross in the position's direction does not exit."""
        window = make_bars([1.0] * 4)

        assert rule.check_exit(strategy, _position(), _bar_at(1.001, 4), window[-1], window) is None

    def test_should_support_ema_averages(self, rule) -> None:
        """Test the EMA variant detects the same upward cross."""
        strategy = make_strategy("moving_average", fastMA=2, slowMA=3, ema=True)
        window = make_bars([1.0] * 4)

        assert rule.check_entry(strategy, _bar_at(2.0, 4), window[-1], window) == PositionType.LONG


class TestBollingerReversionRule:
    """Test suite for the Bollinger reversion rule."""

    @pytest.fixture
    def rule(self) -> BollingerReversionRule:
        return BollingerReversionRule(TechnicalIndicatorsCalculator())

    def test_should_go_long_when_turning_up_below_lower_band(self, rule) -> None:
        """Test oversold window with an up-tick."""
        window = make_bars([1.0] * 19 + [0.5])
        strategy = make_strategy("bollinger_reversion")

        assert rule.check_entry(strategy, _bar_at(0.6, 20), window[-1], window) == (
            PositionType.LONG
        )
        assert rule.check_entry(strategy, _bar_at(0.4, 20), window[-1], window) is None

    def test_should_go_short_when_turning_down_above_upper_band(self, rule) -> None:
        """Test overbought window with a down-tick."""
        window = make_bars([1.0] * 19 + [2.0])
        strategy = make_strategy("bollinger_reversion")

        assert rule.check_entry(strategy, _bar_at(1.9, 20), window[-1], window) == (
            PositionType.SHORT
        )

    def test_should_exit_at_middle_band(self, rule) -> None:
        """Test long exit once price reverts to the middle band."""
        window = make_bars([1.0] * 10 + [1.1] * 10)
        strategy = make_strategy("bollinger_reversion")
        position = _position(entry_price=1.04)

        assert rule.check_exit(strategy, position, _bar_at(1.06, 20), window[-1], window) == (
            ExitReason.STRATEGY_EXIT
        )
        assert rule.check_exit(strategy, position, _bar_at(1.045, 20), window[-1], window) is None

    def test_should_not_exit_without_band_history(self, rule) -> None:
        """Test no strategy exit with a short window."""
        window = make_bars([1.0] * 5)
        strategy = make_strategy("bollinger_reversion")

        assert rule.check_exit(strategy, _position(), _bar_at(1.01, 5), window[-1], window) is None
