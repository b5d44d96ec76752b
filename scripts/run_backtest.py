#!/usr/bin/env python3
"""
Backtest Runner Script

Runs a predefined strategy over synthetic (or CSV) market data and prints the
performance summary.
Input: strategy id, symbols, date range and capital settings
Output: JSON performance summary on stdout, optional trades CSV
"""

import argparse
import asyncio
import json
import sys
from datetime import datetime

from loguru import logger
from pydantic import ValidationError as RequestValidationError

from src.core.enums import CapitalPolicy, IndicatorMode, Timeframe
from src.core.exceptions.backtest import BacktestException
from src.core.interfaces.data import IMarketDataSource
from src.core.schemas.backtest_request import BacktestRequest
from src.engine.backtesting_engine import BacktestingEngine
from src.engine.reporting import export_trades_csv
from src.engine.strategy_catalog import default_strategies, get_predefined_strategy
from src.infrastructure.data.csv_source import CSVMarketDataSource
from src.infrastructure.data.synthetic_source import SyntheticMarketDataSource


def setup_logging(debug: bool = False):
    """Configure logging with loguru."""
    logger.remove()

    level = "DEBUG" if debug else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run a predefined trading strategy backtest",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/run_backtest.py --strategy rsi_macd --symbols EUR/USD,GBP/USD
  python scripts/run_backtest.py --strategy breakout --start 2024-01-01 --end 2024-03-01 --csv trades.csv
  python scripts/run_backtest.py --strategy moving_average --data-dir data/ohlcv --timeframe 4h
        """,
    )

    parser.add_argument(
        "--strategy",
        choices=[strategy.id for strategy in default_strategies()],
        default="rsi_macd",
        help="Predefined strategy to run (default: rsi_macd)",
    )
    parser.add_argument(
        "--symbols",
        type=str,
        default="EUR/USD,GBP/USD,USD/JPY",
        help="Comma separated symbols (default: EUR/USD,GBP/USD,USD/JPY)",
    )
    parser.add_argument("--start", type=str, default="2024-01-01", help="Start date (ISO)")
    parser.add_argument("--end", type=str, default="2024-12-01", help="End date (ISO)")
    parser.add_argument("--capital", type=float, default=10000.0, help="Initial capital")
    parser.add_argument("--commission", type=float, default=0.1, help="Commission per leg (%%)")
    parser.add_argument(
        "--timeframe",
        choices=[timeframe.value for timeframe in Timeframe],
        default=Timeframe.H1.value,
        help="Bar timeframe (default: 1h)",
    )
    parser.add_argument(
        "--capital-policy",
        choices=[policy.value for policy in CapitalPolicy],
        default=CapitalPolicy.ISOLATED.value,
        help="Capital allocation across symbols (default: isolated)",
    )
    parser.add_argument(
        "--indicator-mode",
        choices=[mode.value for mode in IndicatorMode],
        default=IndicatorMode.SIMPLIFIED.value,
        help="Indicator formula variant (default: simplified)",
    )
    parser.add_argument("--seed", type=int, default=42, help="Synthetic data seed (default: 42)")
    parser.add_argument(
        "--data-dir",
        type=str,
        help="Directory of <symbol>/<timeframe>.csv files (synthetic data when omitted)",
    )
    parser.add_argument("--csv", type=str, help="Write the trades CSV to this path")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(args.debug)

    try:
        request = BacktestRequest(
            start_date=datetime.fromisoformat(args.start),
            end_date=datetime.fromisoformat(args.end),
            initial_capital=args.capital,
            commission=args.commission,
            symbols=args.symbols,
            timeframe=args.timeframe,
            indicator_mode=args.indicator_mode,
            capital_policy=args.capital_policy,
        )
    except (RequestValidationError, ValueError) as e:
        logger.error(f"Invalid backtest request: {e}")
        return 2

    data_source: IMarketDataSource
    try:
        if args.data_dir:
            data_source = CSVMarketDataSource(args.data_dir)
        else:
            data_source = SyntheticMarketDataSource(seed=args.seed)

        engine = BacktestingEngine(request.to_config(), data_source)
        result = asyncio.run(engine.run_backtest(get_predefined_strategy(args.strategy)))
    except BacktestException as e:
        logger.error(f"Backtest failed: {e}")
        return 1

    print(json.dumps(result.performance_summary(), indent=2))

    if args.csv:
        export_trades_csv(result, args.csv)

    return 0


if __name__ == "__main__":
    sys.exit(main())
