"""
Backtesting engine.

Replays historical bars per symbol through a strategy rule, turns the
resulting positions into trades and summarizes them. Market data loading is
the only asynchronous step; the simulation itself is synchronous and
deterministic for a given data source.
"""

from collections.abc import Sequence

from loguru import logger

from src.core.constants import INDICATOR_WINDOW_SIZE
from src.core.enums import ExitReason
from src.core.interfaces.data import IMarketDataSource
from src.core.interfaces.strategy import IStrategyRule
from src.core.models.backtest import BacktestConfig, BacktestResults, SymbolCoverage
from src.core.models.bar import Bar
from src.core.models.strategy import Strategy
from src.core.models.trade import Trade
from src.infrastructure.data.market_data_provider import MarketDataProvider
from src.infrastructure.data.synthetic_source import SyntheticMarketDataSource
from src.infrastructure.data.technical_indicators import (
    TechnicalIndicatorsCalculator,
    calculate_price_volatility,
)

from .capital import CapitalAllocator, CapitalLedger
from .performance_analyzer import PerformanceAnalyzer
from .position_manager import PositionManager
from .strategy_registry import StrategyRegistry, create_default_registry


class BacktestingEngine:
    """
    Runs strategies against one backtest configuration.

    Each engine owns its market data cache, so repeated runs over the same
    configuration load every symbol only once.
    """

    def __init__(
        self,
        config: BacktestConfig,
        data_source: IMarketDataSource | None = None,
        registry: StrategyRegistry | None = None,
    ):
        config.validate()
        self.config = config
        self.data_provider = MarketDataProvider(data_source or SyntheticMarketDataSource())
        self.registry = registry or create_default_registry()
        self.calculator = TechnicalIndicatorsCalculator(config.indicator_mode)

    async def run_backtest(self, strategy: Strategy) -> BacktestResults:
        """
        Run a strategy over every configured symbol.

        Raises:
            UnknownStrategyError: If no rule is registered for the strategy
            DataError: If market data cannot be loaded
        """
        rule = self.registry.resolve(strategy, self.calculator)
        logger.info(
            f"Starting backtest '{strategy.name}' on {len(self.config.symbols)} symbols "
            f"({self.config.start_date.isoformat()} -> {self.config.end_date.isoformat()}, "
            f"{self.config.timeframe}, {self.config.capital_policy} capital)"
        )

        try:
            market_data = await self._load_market_data()
            trades, coverage = self._simulate(strategy, rule, market_data)
        except Exception as e:
            logger.error(f"Backtest '{strategy.name}' failed: {e}")
            raise

        # Chronological order across symbols; sort is stable so symbol order breaks ties
        trades.sort(key=lambda trade: trade.exit_time)

        analyzer = PerformanceAnalyzer(self.config.initial_capital, self.config.start_date)
        equity_curve = analyzer.calculate_equity_curve(trades)
        results = BacktestResults(
            strategy=strategy,
            config=self.config,
            performance=analyzer.calculate_performance(trades, equity_curve),
            trades=trades,
            equity_curve=equity_curve,
            monthly_returns=analyzer.calculate_monthly_returns(trades),
            risk_metrics=analyzer.calculate_risk_metrics(trades, equity_curve),
            coverage=coverage,
        )

        missing = results.symbols_without_data
        if missing:
            logger.warning(f"No market data for: {', '.join(missing)}")
        logger.success(
            f"Backtest '{strategy.name}' completed: {len(trades)} trades, "
            f"return {results.performance.total_return:.2f}%"
        )
        return results

    async def _load_market_data(self) -> dict[str, list[Bar]]:
        """Load bars for every symbol in configuration order."""
        market_data: dict[str, list[Bar]] = {}
        for symbol in self.config.symbols:
            market_data[symbol] = await self.data_provider.load_bars(
                symbol, self.config.timeframe, self.config.start_date, self.config.end_date
            )
            logger.debug(f"Loaded {len(market_data[symbol])} bars for {symbol}")
        return market_data

    def _simulate(
        self,
        strategy: Strategy,
        rule: IStrategyRule,
        market_data: dict[str, list[Bar]],
    ) -> tuple[list[Trade], list[SymbolCoverage]]:
        allocator = CapitalAllocator(self.config)
        manager = PositionManager(self.config.commission)
        trades: list[Trade] = []
        coverage: list[SymbolCoverage] = []

        for symbol in self.config.symbols:
            bars = market_data[symbol]
            symbol_trades = self._simulate_symbol(
                symbol, bars, strategy, rule, manager, allocator.ledger_for(symbol)
            )
            trades.extend(symbol_trades)
            coverage.append(
                SymbolCoverage(
                    symbol=symbol,
                    bars=len(bars),
                    trades=len(symbol_trades),
                    price_volatility=calculate_price_volatility([bar.close for bar in bars]),
                )
            )

        return trades, coverage

    def _simulate_symbol(
        self,
        symbol: str,
        bars: Sequence[Bar],
        strategy: Strategy,
        rule: IStrategyRule,
        manager: PositionManager,
        ledger: CapitalLedger,
    ) -> list[Trade]:
        """
        Walk one symbol's bars: flat until an entry signal, open until an exit.

        A position opened on a bar may exit on the same bar. A position still
        open after the last bar is closed there with ``strategy_exit``.
        """
        if len(bars) < 2:
            logger.debug(f"Skipping {symbol}: {len(bars)} bars")
            return []

        sizing = strategy.risk_management.position_sizing
        trades: list[Trade] = []
        position = None

        for i in range(1, len(bars)):
            current_bar = bars[i]
            previous_bar = bars[i - 1]
            window = bars[max(0, i - INDICATOR_WINDOW_SIZE) : i]

            if position is None:
                direction = rule.check_entry(strategy, current_bar, previous_bar, window)
                if direction is not None:
                    if ledger.is_depleted:
                        logger.warning(f"Skipping {direction} entry on {symbol}: capital depleted")
                    else:
                        position = manager.open_position(
                            symbol, direction, current_bar, ledger.sizing_balance(sizing), strategy
                        )

            if position is not None:
                exit_reason = rule.check_exit(strategy, position, current_bar, previous_bar, window)
                if exit_reason is not None:
                    trade = manager.close_position(position, current_bar, exit_reason)
                    ledger.book(trade.profit)
                    trades.append(trade)
                    position = None

        if position is not None:
            trade = manager.close_position(position, bars[-1], ExitReason.STRATEGY_EXIT)
            ledger.book(trade.profit)
            trades.append(trade)

        logger.debug(f"{symbol}: {len(trades)} trades, ledger balance {ledger.balance:.2f}")
        return trades
