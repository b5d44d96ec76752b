"""
Backtesting engine.

This module provides the simulation loop, strategy rules and registry,
position management, performance analytics and reporting.
"""

from .backtesting_engine import BacktestingEngine
from .performance_analyzer import PerformanceAnalyzer
from .position_manager import PositionManager
from .reporting import equity_curve_to_dataframe, export_trades_csv, trades_to_dataframe
from .strategy_catalog import default_strategies, get_predefined_strategy
from .strategy_registry import StrategyRegistry, create_default_registry

__all__ = [
    "BacktestingEngine",
    "PerformanceAnalyzer",
    "PositionManager",
    "StrategyRegistry",
    "create_default_registry",
    "default_strategies",
    "get_predefined_strategy",
    "trades_to_dataframe",
    "equity_curve_to_dataframe",
    "export_trades_csv",
]
