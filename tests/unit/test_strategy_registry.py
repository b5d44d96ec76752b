"""
Unit tests for the strategy registry and the predefined strategy catalog.
"""

import pytest

from src.core.enums import IndicatorMode, PositionSizing, PositionType
from src.core.exceptions.backtest import StrategyError, UnknownStrategyError
from src.engine.strategy_catalog import default_strategies, get_predefined_strategy
from src.engine.strategy_registry import StrategyRegistry, create_default_registry
from src.engine.strategy_rules import (
    BaseStrategyRule,
    BollingerReversionRule,
    BreakoutRule,
    MovingAverageCrossRule,
    RSIMACDRule,
)
from src.infrastructure.data.technical_indicators import TechnicalIndicatorsCalculator
from tests.builders import make_strategy


class AlwaysLongRule(BaseStrategyRule):
    """Rule entering long on every bar."""

    def check_entry(self, strategy, current_bar, previous_bar, window):
        return PositionType.LONG


class TestStrategyRegistry:
    """Test suite for StrategyRegistry."""

    @pytest.fixture
    def registry(self) -> StrategyRegistry:
        return create_default_registry()

    @pytest.mark.parametrize(
        ("strategy_id", "rule_cls"),
        [
            ("rsi_macd", RSIMACDRule),
            ("breakout", BreakoutRule),
            ("moving_average", MovingAverageCrossRule),
            ("bollinger_reversion", BollingerReversionRule),
        ],
    )
    def test_should_resolve_builtin_rules_by_id(
        self, registry: StrategyRegistry, strategy_id: str, rule_cls: type
    ) -> None:
        """Test id lookup for every built-in rule."""
        rule = registry.resolve(make_strategy(strategy_id))

        assert isinstance(rule, rule_cls)

    def test_should_resolve_by_name_alias(self, registry: StrategyRegistry) -> None:
        """Test name aliases when the id is unknown."""
        strategy = make_strategy("custom-id", name="Breakout_Strategy")

        assert isinstance(registry.resolve(strategy), BreakoutRule)

    def test_should_resolve_case_insensitively(self, registry: StrategyRegistry) -> None:
        """Test key normalization."""
        assert isinstance(registry.resolve(make_strategy(" RSI_MACD ")), RSIMACDRule)
        assert registry.is_registered("Moving_Average_Strategy")

    def test_should_prefer_id_over_name(self, registry: StrategyRegistry) -> None:
        """Test id takes precedence over a conflicting name alias."""
        strategy = make_strategy("rsi_macd", name="Breakout_Strategy")

        assert isinstance(registry.resolve(strategy), RSIMACDRule)

    def test_should_raise_for_unknown_strategy(self, registry: StrategyRegistry) -> None:
        """Test unknown ids and names."""
        with pytest.raises(UnknownStrategyError) as exc_info:
            registry.resolve(make_strategy("scalper", name="Scalper"))

        assert exc_info.value.strategy_key == "scalper"
        assert exc_info.value.available == [
            "bollinger_reversion",
            "breakout",
            "moving_average",
            "rsi_macd",
        ]

    def test_should_pass_calculator_to_rule(self, registry: StrategyRegistry) -> None:
        """Test the rule uses the engine's indicator mode."""
        calculator = TechnicalIndicatorsCalculator(IndicatorMode.STANDARD)

        rule = registry.resolve(make_strategy("rsi_macd"), calculator)

        assert rule.calculator is calculator

    def test_should_register_custom_rules(self) -> None:
        """Test runtime registration with aliases."""
        registry = StrategyRegistry()
        registry.register("always_long", AlwaysLongRule, aliases=["Always Long"])

        assert isinstance(registry.resolve(make_strategy("always_long")), AlwaysLongRule)
        assert isinstance(registry.resolve(make_strategy("x", name="always long")), AlwaysLongRule)
        assert registry.available() == ["always_long"]

    def test_should_replace_existing_registration(self) -> None:
        """Test re-registering an id replaces the rule."""
        registry = create_default_registry()
        registry.register("rsi_macd", AlwaysLongRule)

        assert isinstance(registry.resolve(make_strategy("rsi_macd")), AlwaysLongRule)

    def test_should_reject_empty_id(self) -> None:
        """Test registration requires an id."""
        with pytest.raises(StrategyError, match="must not be empty"):
            StrategyRegistry().register("  ", AlwaysLongRule)


class TestStrategyCatalog:
    """Test suite for the predefined strategies."""

    def test_should_define_three_strategies(self) -> None:
        """Test catalog ids and risk settings."""
        strategies = {strategy.id: strategy for strategy in default_strategies()}

        assert list(strategies) == ["rsi_macd", "breakout", "moving_average"]

        rsi_macd = strategies["rsi_macd"].risk_management
        assert (rsi_macd.max_risk_percent, rsi_macd.stop_loss_percent) == (2.0, 2.0)
        assert rsi_macd.take_profit_percent == 4.0
        assert rsi_macd.position_sizing == PositionSizing.PERCENTAGE

        breakout = strategies["breakout"]
        assert breakout.risk_management.position_sizing == PositionSizing.DYNAMIC
        assert breakout.get_parameter("lookbackPeriod") == 20

        moving_average = strategies["moving_average"]
        assert moving_average.risk_management.position_sizing == PositionSizing.FIXED
        assert moving_average.get_parameter("ema") is True

    def test_should_resolve_every_catalog_strategy(self) -> None:
        """Test each predefined strategy has a registered rule."""
        registry = create_default_registry()

        for strategy in default_strategies():
            assert registry.resolve(strategy) is not None

    def test_should_look_up_predefined_strategy(self) -> None:
        """Test lookup by id."""
        assert get_predefined_strategy("Breakout").id == "breakout"

        with pytest.raises(UnknownStrategyError):
            get_predefined_strategy("scalper")
