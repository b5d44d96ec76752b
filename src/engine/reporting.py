"""
Result reporting helpers: DataFrame views and CSV export.
"""

from collections.abc import Sequence
from pathlib import Path

import pandas as pd
from loguru import logger

from src.core.constants import CSV_AMOUNT_DECIMALS, CSV_PRICE_DECIMALS
from src.core.models.backtest import BacktestResults, EquityPoint
from src.core.models.trade import Trade

CSV_COLUMNS = [
    "date",
    "symbol",
    "direction",
    "entry_price",
    "exit_price",
    "profit",
    "profit_pct",
]

TRADE_COLUMNS = [
    "trade_id",
    "symbol",
    "direction",
    "entry_time",
    "exit_time",
    "entry_price",
    "exit_price",
    "quantity",
    "commission",
    "profit",
    "profit_percentage",
    "duration_hours",
    "exit_reason",
]


def trades_to_dataframe(trades: Sequence[Trade]) -> pd.DataFrame:
    """One row per trade with datetime columns kept as timestamps."""
    frame = pd.DataFrame([trade.to_dict() for trade in trades], columns=TRADE_COLUMNS)
    if not frame.empty:
        frame["entry_time"] = pd.to_datetime(frame["entry_time"], utc=True)
        frame["exit_time"] = pd.to_datetime(frame["exit_time"], utc=True)
    return frame


def equity_curve_to_dataframe(equity_curve: Sequence[EquityPoint]) -> pd.DataFrame:
    """Equity curve indexed by date."""
    frame = pd.DataFrame(
        {
            "date": [point.date for point in equity_curve],
            "equity": [point.equity for point in equity_curve],
            "drawdown": [point.drawdown for point in equity_curve],
        }
    )
    return frame.set_index("date")


def export_trades_csv(result: BacktestResults, path: str | Path | None = None) -> str:
    """
    Export the trades of a backtest as CSV.

    Columns are date (exit time), symbol, direction, entry price, exit price,
    profit and profit percentage. Prices carry five decimals, amounts two.

    Args:
        result: Backtest results
        path: Optional file to write the CSV to

    Returns:
        The CSV text: a header line plus one line per trade
    """
    rows = [
        {
            "date": trade.exit_time.isoformat(),
            "symbol": trade.symbol,
            "direction": trade.position_type.value,
            "entry_price": f"{trade.entry_price:.{CSV_PRICE_DECIMALS}f}",
            "exit_price": f"{trade.exit_price:.{CSV_PRICE_DECIMALS}f}",
            "profit": f"{trade.profit:.{CSV_AMOUNT_DECIMALS}f}",
            "profit_pct": f"{trade.profit_percentage:.{CSV_AMOUNT_DECIMALS}f}",
        }
        for trade in result.trades
    ]
    csv_text = pd.DataFrame(rows, columns=CSV_COLUMNS).to_csv(index=False, lineterminator="\n")

    if path is not None:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(csv_text, encoding="utf-8")
        logger.info(f"Exported {len(rows)} trades to {output_path}")

    return csv_text
