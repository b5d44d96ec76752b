"""
Bar, frame and strategy builders shared by the test suites.
"""

from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

import pandas as pd

from src.core.enums import PositionSizing
from src.core.models.bar import Bar
from src.core.models.strategy import RiskManagement, Strategy

START = datetime(2024, 1, 1, tzinfo=UTC)


def make_bars(
    closes: Sequence[float],
    start: datetime = START,
    step: timedelta = timedelta(hours=1),
    wick: float = 0.0,
    volume: float = 1_000_000.0,
) -> list[Bar]:
    """Bars with open == close and high/low ``wick`` (fraction) around the close."""
    return [
        Bar(
            timestamp=start + i * step,
            open=close,
            high=close * (1 + wick),
            low=close * (1 - wick),
            close=close,
            volume=volume,
        )
        for i, close in enumerate(closes)
    ]


def make_frame(
    closes: Sequence[float],
    start: datetime = START,
    step: timedelta = timedelta(hours=1),
    wick: float = 0.001,
) -> pd.DataFrame:
    """OHLCV DataFrame with hourly bars (open == close)."""
    bars = make_bars(closes, start=start, step=step, wick=wick)
    return pd.DataFrame(
        {
            "timestamp": [bar.timestamp for bar in bars],
            "open": [bar.open for bar in bars],
            "high": [bar.high for bar in bars],
            "low": [bar.low for bar in bars],
            "close": [bar.close for bar in bars],
            "volume": [bar.volume for bar in bars],
        }
    )


def make_strategy(
    strategy_id: str = "rsi_macd",
    name: str = "Test Strategy",
    max_risk: float = 2.0,
    stop_loss: float = 2.0,
    take_profit: float = 4.0,
    position_sizing: PositionSizing = PositionSizing.PERCENTAGE,
    **parameters,
) -> Strategy:
    return Strategy(
        id=strategy_id,
        name=name,
        risk_management=RiskManagement(
            max_risk_percent=max_risk,
            stop_loss_percent=stop_loss,
            take_profit_percent=take_profit,
            position_sizing=position_sizing,
        ),
        parameters=parameters,
    )
