"""
Trade domain model.
"""

from dataclasses import dataclass
from datetime import datetime

from src.core.enums import ExitReason, PositionType
from src.core.exceptions.backtest import ValidationError
from src.core.types.financial import ZERO


@dataclass(frozen=True)
class Trade:
    """A closed position with realized, commission-adjusted profit."""

    trade_id: str
    symbol: str
    position_type: PositionType
    entry_time: datetime
    exit_time: datetime
    entry_price: float
    exit_price: float
    quantity: float
    commission: float
    profit: float
    profit_percentage: float
    duration_hours: float
    exit_reason: ExitReason

    def __post_init__(self) -> None:
        """Validate trade data after initialization."""
        if self.quantity <= ZERO:
            raise ValidationError(f"Quantity must be positive, got {self.quantity}")
        if self.entry_price <= ZERO:
            raise ValidationError(f"Entry price must be positive, got {self.entry_price}")
        if self.exit_price <= ZERO:
            raise ValidationError(f"Exit price must be positive, got {self.exit_price}")
        if self.commission < ZERO:
            raise ValidationError(f"Commission must be non-negative, got {self.commission}")
        if self.exit_time < self.entry_time:
            raise ValidationError(
                f"Exit time {self.exit_time} precedes entry time {self.entry_time}"
            )

    @property
    def gross_profit(self) -> float:
        """Profit before commission."""
        return self.profit + self.commission

    @property
    def is_win(self) -> bool:
        """Check if the trade closed with a positive profit."""
        return self.profit > ZERO

    @property
    def is_loss(self) -> bool:
        """Check if the trade closed with a negative profit."""
        return self.profit < ZERO

    def notional_value(self) -> float:
        """Notional value at entry."""
        return self.quantity * self.entry_price

    def to_dict(self) -> dict:
        """Convert trade to dictionary."""
        return {
            "trade_id": self.trade_id,
            "symbol": self.symbol,
            "direction": self.position_type.value,
            "entry_time": self.entry_time.isoformat(),
            "exit_time": self.exit_time.isoformat(),
            "entry_price": self.entry_price,
            "exit_price": self.exit_price,
            "quantity": self.quantity,
            "commission": self.commission,
            "profit": self.profit,
            "profit_percentage": self.profit_percentage,
            "duration_hours": self.duration_hours,
            "exit_reason": self.exit_reason.value,
        }
