"""
Strategy registry.

Maps strategy ids (and name aliases) to rule classes so the simulation loop
never branches on strategy names.
"""

from collections.abc import Iterable
from typing import TypeAlias

from loguru import logger

from src.core.exceptions.backtest import StrategyError, UnknownStrategyError
from src.core.interfaces.strategy import IStrategyRule
from src.core.models.strategy import Strategy
from src.infrastructure.data.technical_indicators import TechnicalIndicatorsCalculator

from .strategy_rules import (
    BollingerReversionRule,
    BreakoutRule,
    MovingAverageCrossRule,
    RSIMACDRule,
)

RuleFactory: TypeAlias = type[IStrategyRule]


def _normalize_key(key: str) -> str:
    return key.strip().lower()


class StrategyRegistry:
    """Registry of strategy rules keyed by strategy id."""

    def __init__(self) -> None:
        self._rules: dict[str, RuleFactory] = {}
        self._aliases: dict[str, str] = {}

    def register(
        self, strategy_id: str, rule_cls: RuleFactory, aliases: Iterable[str] = ()
    ) -> None:
        """
        Register a rule class for a strategy id.

        Args:
            strategy_id: Id the rule is looked up by (case-insensitive)
            rule_cls: Rule class, constructed with a TechnicalIndicatorsCalculator
            aliases: Strategy names that resolve to the same rule

        Raises:
            StrategyError: If the id is empty
        """
        key = _normalize_key(strategy_id)
        if not key:
            raise StrategyError("Strategy id must not be empty")

        if key in self._rules:
            logger.debug(f"Replacing rule registered for '{key}'")
        self._rules[key] = rule_cls
        for alias in aliases:
            self._aliases[_normalize_key(alias)] = key

    def is_registered(self, key: str) -> bool:
        """Check if an id or alias resolves to a rule."""
        normalized = _normalize_key(key)
        return normalized in self._rules or normalized in self._aliases

    def available(self) -> list[str]:
        """Registered strategy ids, sorted."""
        return sorted(self._rules)

    def resolve(
        self, strategy: Strategy, calculator: TechnicalIndicatorsCalculator | None = None
    ) -> IStrategyRule:
        """
        Build the rule for a strategy, trying its id first and then its name.

        Raises:
            UnknownStrategyError: If neither id nor name is registered
        """
        for candidate in (strategy.id, strategy.name):
            key = _normalize_key(candidate)
            key = self._aliases.get(key, key)
            rule_cls = self._rules.get(key)
            if rule_cls is not None:
                logger.debug(f"Resolved strategy '{strategy.id}' to {rule_cls.__name__}")
                return rule_cls(calculator or TechnicalIndicatorsCalculator())

        raise UnknownStrategyError(strategy.id, self.available())


def create_default_registry() -> StrategyRegistry:
    """Registry holding the built-in rules."""
    registry = StrategyRegistry()
    registry.register("rsi_macd", RSIMACDRule, aliases=["RSI_MACD_Strategy"])
    registry.register("breakout", BreakoutRule, aliases=["Breakout_Strategy"])
    registry.register(
        "moving_average", MovingAverageCrossRule, aliases=["Moving_Average_Strategy"]
    )
    registry.register("bollinger_reversion", BollingerReversionRule)
    return registry
