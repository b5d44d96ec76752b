"""
Backtest configuration and results models.
"""

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime

from src.core.enums import CapitalPolicy, IndicatorMode, Timeframe
from src.core.exceptions.backtest import ConfigurationError, ValidationError
from src.core.utils.validation import (
    validate_non_negative,
    validate_positive,
    validate_symbols,
)

from .strategy import Strategy
from .trade import Trade


@dataclass
class BacktestConfig:
    """Configuration for a backtest execution.

    Validated on construction; an invalid configuration raises
    ``ConfigurationError`` before any market data is requested.
    """

    start_date: datetime
    end_date: datetime
    initial_capital: float
    symbols: list[str]
    commission: float = 0.1  # Percent of notional, charged on entry and exit
    slippage: float = 0.0  # Carried for reporting, not applied to fills
    timeframe: Timeframe = Timeframe.H1
    currency: str = "USD"
    indicator_mode: IndicatorMode = IndicatorMode.SIMPLIFIED
    capital_policy: CapitalPolicy = CapitalPolicy.ISOLATED

    def __post_init__(self) -> None:
        """Normalize enum fields and validate the configuration."""
        # Naive dates are UTC
        if self.start_date.tzinfo is None:
            self.start_date = self.start_date.replace(tzinfo=UTC)
        if self.end_date.tzinfo is None:
            self.end_date = self.end_date.replace(tzinfo=UTC)
        try:
            if not isinstance(self.timeframe, Timeframe):
                self.timeframe = Timeframe.from_string(str(self.timeframe))
            self.indicator_mode = IndicatorMode(self.indicator_mode)
            self.capital_policy = CapitalPolicy(self.capital_policy)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        self.validate()

    def validate(self) -> None:
        """Validate every field.

        Raises:
            ConfigurationError: If any field is invalid
        """
        try:
            self.symbols = validate_symbols(self.symbols)
            validate_positive(self.initial_capital, "initial_capital")
            validate_non_negative(self.commission, "commission")
            validate_non_negative(self.slippage, "slippage")
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

        if not self.is_valid_date_range():
            raise ConfigurationError(
                f"end_date ({self.end_date.isoformat()}) must be after "
                f"start_date ({self.start_date.isoformat()})"
            )
        if not self.currency or not self.currency.strip():
            raise ConfigurationError("currency must not be empty")

    def is_valid_date_range(self) -> bool:
        """Validate that end_date is after start_date."""
        return self.end_date > self.start_date

    def duration_days(self) -> int:
        """Calculate duration of backtest in days."""
        return (self.end_date - self.start_date).days

    def capital_per_symbol(self) -> float:
        """Starting balance of each symbol ledger under the isolated policy."""
        return self.initial_capital / len(self.symbols)

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "initial_capital": self.initial_capital,
            "symbols": list(self.symbols),
            "commission": self.commission,
            "slippage": self.slippage,
            "timeframe": self.timeframe.value,
            "currency": self.currency,
            "indicator_mode": self.indicator_mode.value,
            "capital_policy": self.capital_policy.value,
        }


@dataclass(frozen=True)
class EquityPoint:
    """Account value after a trade close (or at simulation start)."""

    date: datetime
    equity: float
    drawdown: float  # Percent below the running peak, 0..100


@dataclass(frozen=True)
class MonthlyReturn:
    """Realized profit of trades closed within one calendar month."""

    month: str  # YYYY-MM
    return_percent: float  # Percent of initial capital
    profit: float
    trades: int


@dataclass(frozen=True)
class PerformanceSummary:
    """Aggregate trade statistics."""

    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: float = 0.0
    total_return: float = 0.0
    max_drawdown: float = 0.0
    sharpe_ratio: float = 0.0
    profit_factor: float = 0.0
    average_win: float = 0.0
    average_loss: float = 0.0
    expectancy: float = 0.0
    total_profit: float = 0.0
    total_commission: float = 0.0


@dataclass(frozen=True)
class RiskMetrics:
    """Risk statistics derived from trades and the equity curve."""

    volatility: float = 0.0
    max_consecutive_losses: int = 0
    max_consecutive_wins: int = 0
    largest_win: float = 0.0
    largest_loss: float = 0.0
    average_trade_duration: float = 0.0
    calmar_ratio: float = 0.0
    sortino_ratio: float = 0.0


@dataclass(frozen=True)
class SymbolCoverage:
    """How much data a symbol contributed to the run."""

    symbol: str
    bars: int
    trades: int
    price_volatility: float = 0.0  # Annualized volatility of bar-to-bar returns

    @property
    def has_data(self) -> bool:
        """Check if the symbol had enough bars to simulate (two or more)."""
        return self.bars >= 2


@dataclass(frozen=True)
class BacktestResults:
    """Results from a backtest execution."""

    strategy: Strategy
    config: BacktestConfig
    performance: PerformanceSummary
    trades: list[Trade]
    equity_curve: list[EquityPoint]
    monthly_returns: list[MonthlyReturn]
    risk_metrics: RiskMetrics
    coverage: list[SymbolCoverage] = field(default_factory=list)

    @property
    def final_equity(self) -> float:
        """Equity after the last trade close."""
        if not self.equity_curve:
            return self.config.initial_capital
        return self.equity_curve[-1].equity

    @property
    def symbols_without_data(self) -> list[str]:
        """Symbols that produced no simulation because data was missing."""
        return [item.symbol for item in self.coverage if not item.has_data]

    def is_profitable(self) -> bool:
        """Check if the backtest was profitable."""
        return self.performance.total_return > 0.0

    def performance_summary(self) -> dict:
        """Get a summary of key performance metrics."""
        return {
            "strategy": self.strategy.name,
            "initial_value": self.config.initial_capital,
            "final_value": self.final_equity,
            "total_return": self.performance.total_return,
            "total_trades": self.performance.total_trades,
            "win_rate": self.performance.win_rate,
            "max_drawdown": self.performance.max_drawdown,
            "sharpe_ratio": self.performance.sharpe_ratio,
            "duration_days": self.config.duration_days(),
        }

    def to_dict(self) -> dict:
        """Convert results to dictionary."""
        return {
            "strategy": self.strategy.to_dict(),
            "config": self.config.to_dict(),
            "performance": asdict(self.performance),
            "risk_metrics": asdict(self.risk_metrics),
            "trades": [trade.to_dict() for trade in self.trades],
            "equity_curve": [
                {
                    "date": point.date.isoformat(),
                    "equity": point.equity,
                    "drawdown": point.drawdown,
                }
                for point in self.equity_curve
            ],
            "monthly_returns": [asdict(month) for month in self.monthly_returns],
            "coverage": [asdict(item) for item in self.coverage],
        }
