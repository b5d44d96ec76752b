"""
Performance analyzer.

Turns the chronological list of closed trades into aggregate statistics, an
equity curve, monthly returns and risk metrics.

Volatility convention: every trade-return metric (Sharpe, Sortino and
``RiskMetrics.volatility``) uses the sample standard deviation (n - 1) of the
per-trade percentage returns. None of them are annualized.
"""

from collections.abc import Sequence
from datetime import datetime

import numpy as np
import pandas as pd

from src.core.interfaces.data import IMetricsCalculator
from src.core.models.backtest import (
    EquityPoint,
    MonthlyReturn,
    PerformanceSummary,
    RiskMetrics,
)
from src.core.models.trade import Trade
from src.core.types.financial import HUNDRED, ZERO, percent_of, safe_divide
from src.core.utils.validation import validate_positive


def _sample_std(values: np.ndarray) -> float:
    """Sample standard deviation, 0 with fewer than two values."""
    if values.size < 2:
        return ZERO
    return float(np.std(values, ddof=1))


class PerformanceAnalyzer(IMetricsCalculator):
    """
    Computes backtest metrics for one initial capital.

    Trades are expected in exit-time order. Every ratio returns 0 instead of
    dividing by zero.
    """

    def __init__(self, initial_capital: float, start_date: datetime):
        self.initial_capital = validate_positive(initial_capital, "initial_capital")
        self.start_date = start_date

    @staticmethod
    def _returns(trades: Sequence[Trade]) -> np.ndarray:
        return np.array([trade.profit_percentage for trade in trades], dtype=float)

    def calculate_performance(
        self, trades: Sequence[Trade], equity_curve: Sequence[EquityPoint] | None = None
    ) -> PerformanceSummary:
        if not trades:
            return PerformanceSummary()

        wins = [trade.profit for trade in trades if trade.is_win]
        losses = [abs(trade.profit) for trade in trades if trade.is_loss]

        decided = len(wins) + len(losses)
        win_rate = percent_of(len(wins), decided)
        total_wins = float(sum(wins))
        total_losses = float(sum(losses))
        average_win = safe_divide(total_wins, len(wins))
        average_loss = safe_divide(total_losses, len(losses))

        profit_factor = total_wins if total_losses == ZERO else total_wins / total_losses
        win_fraction = win_rate / HUNDRED
        expectancy = win_fraction * average_win - (1 - win_fraction) * average_loss

        total_profit = float(sum(trade.profit for trade in trades))
        if equity_curve is None:
            equity_curve = self.calculate_equity_curve(trades)

        return PerformanceSummary(
            total_trades=len(trades),
            winning_trades=len(wins),
            losing_trades=len(losses),
            win_rate=win_rate,
            total_return=percent_of(total_profit, self.initial_capital),
            max_drawdown=self._max_drawdown(equity_curve),
            sharpe_ratio=self.calculate_sharpe_ratio(trades),
            profit_factor=profit_factor,
            average_win=average_win,
            average_loss=average_loss,
            expectancy=expectancy,
            total_profit=total_profit,
            total_commission=float(sum(trade.commission for trade in trades)),
        )

    def calculate_sharpe_ratio(self, trades: Sequence[Trade]) -> float:
        """Mean per-trade return over its sample standard deviation."""
        returns = self._returns(trades)
        volatility = _sample_std(returns)
        if volatility == ZERO:
            return ZERO
        return float(returns.mean()) / volatility

    def calculate_sortino_ratio(self, trades: Sequence[Trade]) -> float:
        """Mean per-trade return over the sample standard deviation of losing returns."""
        returns = self._returns(trades)
        downside = _sample_std(returns[returns < 0])
        if downside == ZERO:
            return ZERO
        return float(returns.mean()) / downside

    def calculate_equity_curve(self, trades: Sequence[Trade]) -> list[EquityPoint]:
        """
        Equity after each trade close, starting with the initial capital.

        Drawdown is measured from the running peak (which starts at the
        initial capital) and clamped to [0, 100].
        """
        equity = self.initial_capital
        peak = self.initial_capital
        curve = [EquityPoint(date=self.start_date, equity=equity, drawdown=ZERO)]

        for trade in trades:
            equity += trade.profit
            peak = max(peak, equity)
            drawdown = min(max(percent_of(peak - equity, peak), ZERO), HUNDRED)
            curve.append(EquityPoint(date=trade.exit_time, equity=equity, drawdown=drawdown))

        return curve

    @staticmethod
    def _max_drawdown(equity_curve: Sequence[EquityPoint]) -> float:
        return max((point.drawdown for point in equity_curve), default=ZERO)

    def calculate_monthly_returns(self, trades: Sequence[Trade]) -> list[MonthlyReturn]:
        """Realized profit grouped by exit month, as percent of initial capital."""
        if not trades:
            return []

        frame = pd.DataFrame(
            {
                "month": [trade.exit_time.strftime("%Y-%m") for trade in trades],
                "profit": [trade.profit for trade in trades],
            }
        )
        grouped = frame.groupby("month", sort=True)["profit"].agg(["sum", "count"])

        return [
            MonthlyReturn(
                month=str(month),
                return_percent=percent_of(float(row["sum"]), self.initial_capital),
                profit=float(row["sum"]),
                trades=int(row["count"]),
            )
            for month, row in grouped.iterrows()
        ]

    @staticmethod
    def _max_streaks(trades: Sequence[Trade]) -> tuple[int, int]:
        """Longest runs of wins and losses; break-even trades end both runs."""
        max_wins = max_losses = 0
        wins = losses = 0
        for trade in trades:
            if trade.is_win:
                wins += 1
                losses = 0
            elif trade.is_loss:
                losses += 1
                wins = 0
            else:
                wins = losses = 0
            max_wins = max(max_wins, wins)
            max_losses = max(max_losses, losses)
        return max_wins, max_losses

    def calculate_risk_metrics(
        self, trades: Sequence[Trade], equity_curve: Sequence[EquityPoint]
    ) -> RiskMetrics:
        if not trades:
            return RiskMetrics()

        max_wins, max_losses = self._max_streaks(trades)
        profits = [trade.profit for trade in trades]

        final_equity = equity_curve[-1].equity if equity_curve else self.initial_capital
        total_return = percent_of(final_equity - self.initial_capital, self.initial_capital)
        max_drawdown = self._max_drawdown(equity_curve)

        return RiskMetrics(
            volatility=_sample_std(self._returns(trades)),
            max_consecutive_losses=max_losses,
            max_consecutive_wins=max_wins,
            largest_win=max(max(profits), ZERO),
            largest_loss=min(min(profits), ZERO),
            average_trade_duration=float(np.mean([trade.duration_hours for trade in trades])),
            calmar_ratio=safe_divide(total_return, max_drawdown),
            sortino_ratio=self.calculate_sortino_ratio(trades),
        )
