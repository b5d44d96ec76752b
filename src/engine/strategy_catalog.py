"""
Predefined strategies offered to users out of the box.
"""

from src.core.enums import PositionSizing
from src.core.exceptions.backtest import UnknownStrategyError
from src.core.models.strategy import RiskManagement, Strategy


def default_strategies() -> list[Strategy]:
    """Catalog of predefined strategies, each resolvable by the default registry."""
    return [
        Strategy(
            id="rsi_macd",
            name="RSI & MACD Strategy",
            description="Enter on oversold RSI confirmed by a positive MACD signal",
            parameters={"rsiPeriod": 14, "macdFast": 12, "macdSlow": 26},
            entry_conditions=("RSI < 30", "MACD > Signal"),
            exit_conditions=("RSI > 70", "MACD < Signal"),
            risk_management=RiskManagement(
                max_risk_percent=2.0,
                stop_loss_percent=2.0,
                take_profit_percent=4.0,
                position_sizing=PositionSizing.PERCENTAGE,
            ),
        ),
        Strategy(
            id="breakout",
            name="Breakout Strategy",
            description="Enter when price breaks through support or resistance",
            parameters={"lookbackPeriod": 20, "minVolume": 100_000},
            entry_conditions=("Price > Resistance", "Volume > Average"),
            exit_conditions=("Price < Support", "Time Limit"),
            risk_management=RiskManagement(
                max_risk_percent=3.0,
                stop_loss_percent=3.0,
                take_profit_percent=6.0,
                position_sizing=PositionSizing.DYNAMIC,
            ),
        ),
        Strategy(
            id="moving_average",
            name="Moving Average Strategy",
            description="Enter on moving average crossovers",
            parameters={"fastMA": 20, "slowMA": 50, "ema": True},
            entry_conditions=("Fast MA > Slow MA", "Price > Fast MA"),
            exit_conditions=("Fast MA < Slow MA", "Price < Fast MA"),
            risk_management=RiskManagement(
                max_risk_percent=1.5,
                stop_loss_percent=1.5,
                take_profit_percent=3.0,
                position_sizing=PositionSizing.FIXED,
            ),
        ),
    ]


def get_predefined_strategy(strategy_id: str) -> Strategy:
    """
    Look up a catalog strategy by id.

    Raises:
        UnknownStrategyError: If the id is not in the catalog
    """
    strategies = default_strategies()
    for strategy in strategies:
        if strategy.id == strategy_id.strip().lower():
            return strategy
    raise UnknownStrategyError(strategy_id, [strategy.id for strategy in strategies])
