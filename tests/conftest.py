"""
Shared fixtures for backtesting tests.
"""

from datetime import datetime, timedelta

import pytest

from src.core.models.backtest import BacktestConfig
from src.core.models.strategy import Strategy
from tests.builders import START, make_strategy


@pytest.fixture
def start_date() -> datetime:
    return START


@pytest.fixture
def strategy() -> Strategy:
    """RSI/MACD strategy with 2% risk, 2% stop and 4% target."""
    return make_strategy()


@pytest.fixture
def config() -> BacktestConfig:
    """Ten days of hourly bars for two symbols."""
    return BacktestConfig(
        start_date=START,
        end_date=START + timedelta(days=10),
        initial_capital=10000.0,
        symbols=["EUR/USD", "GBP/USD"],
        commission=0.1,
    )
