"""
Position domain model.

A position only lives inside the simulation loop; closing it produces an
immutable Trade.
"""

from dataclasses import dataclass
from datetime import datetime

from src.core.constants import SECONDS_PER_HOUR
from src.core.enums import PositionType
from src.core.exceptions.backtest import ValidationError
from src.core.types.financial import HUNDRED, ONE, ZERO


@dataclass
class Position:
    """Represents an open simulated position."""

    symbol: str
    position_type: PositionType
    entry_price: float
    entry_time: datetime
    stop_loss: float
    take_profit: float
    quantity: float

    def __post_init__(self) -> None:
        """Validate position data after initialization."""
        if self.entry_price <= ZERO:
            raise ValidationError(f"Entry price must be positive, got {self.entry_price}")
        if self.quantity <= ZERO:
            raise ValidationError(f"Quantity must be positive, got {self.quantity}")
        if self.stop_loss < ZERO or self.take_profit < ZERO:
            raise ValidationError(
                f"Protective levels must be non-negative, got stop={self.stop_loss} "
                f"target={self.take_profit}"
            )

    def is_stop_hit(self, price: float) -> bool:
        """Check if price reached the stop-loss level (direction-aware)."""
        if self.position_type.is_long:
            return price <= self.stop_loss
        return price >= self.stop_loss

    def is_target_hit(self, price: float) -> bool:
        """Check if price reached the take-profit level (direction-aware)."""
        if self.position_type.is_long:
            return price >= self.take_profit
        return price <= self.take_profit

    def age_hours(self, at: datetime) -> float:
        """Hours elapsed between entry and ``at``."""
        return (at - self.entry_time).total_seconds() / SECONDS_PER_HOUR

    def notional_value(self) -> float:
        """Notional value at entry."""
        return self.entry_price * self.quantity

    @classmethod
    def open(
        cls,
        symbol: str,
        position_type: PositionType,
        entry_price: float,
        entry_time: datetime,
        risk_amount: float,
        stop_loss_percent: float,
        take_profit_percent: float,
    ) -> "Position":
        """Factory method sizing a position from the amount put at risk.

        Stop-loss and take-profit are offset from the entry price by the given
        percentages, on the losing and winning side of the direction
        respectively. Quantity is ``risk_amount / |entry - stop|``.

        Args:
            symbol: Trading symbol
            position_type: Long or short
            entry_price: Fill price
            entry_time: Fill time
            risk_amount: Currency amount lost if the stop is hit
            stop_loss_percent: Stop distance in percent of entry
            take_profit_percent: Target distance in percent of entry

        Returns:
            New Position instance

        Raises:
            ValidationError: If the inputs yield a non-positive quantity
        """
        direction = position_type.sign
        stop_loss = entry_price * (ONE - direction * stop_loss_percent / HUNDRED)
        take_profit = entry_price * (ONE + direction * take_profit_percent / HUNDRED)

        risk_per_unit = abs(entry_price - stop_loss)
        if risk_per_unit == ZERO:
            raise ValidationError(f"Stop-loss distance is zero for {symbol} at {entry_price}")

        return cls(
            symbol=symbol,
            position_type=position_type,
            entry_price=entry_price,
            entry_time=entry_time,
            stop_loss=stop_loss,
            take_profit=take_profit,
            quantity=risk_amount / risk_per_unit,
        )
