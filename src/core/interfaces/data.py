"""
Market data and metrics interfaces.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime

import pandas as pd

from src.core.enums import Timeframe
from src.core.models.backtest import (
    EquityPoint,
    MonthlyReturn,
    PerformanceSummary,
    RiskMetrics,
)
from src.core.models.trade import Trade


class IMarketDataSource(ABC):
    """Abstract interface for historical bar providers."""

    @abstractmethod
    async def load_bars(
        self, symbol: str, timeframe: Timeframe, start_date: datetime, end_date: datetime
    ) -> pd.DataFrame:
        """Load OHLCV bars for the specified parameters.

        Returns a DataFrame with columns timestamp, open, high, low, close,
        volume. An empty DataFrame means no data is available.
        """
        pass


class IMetricsCalculator(ABC):
    """Abstract interface for performance metrics calculation."""

    @abstractmethod
    def calculate_performance(self, trades: Sequence[Trade]) -> PerformanceSummary:
        """Calculate trade statistics."""
        pass

    @abstractmethod
    def calculate_equity_curve(self, trades: Sequence[Trade]) -> list[EquityPoint]:
        """Calculate the equity curve."""
        pass

    @abstractmethod
    def calculate_monthly_returns(self, trades: Sequence[Trade]) -> list[MonthlyReturn]:
        """Calculate realized returns per calendar month."""
        pass

    @abstractmethod
    def calculate_risk_metrics(
        self, trades: Sequence[Trade], equity_curve: Sequence[EquityPoint]
    ) -> RiskMetrics:
        """Calculate risk-adjusted metrics."""
        pass
