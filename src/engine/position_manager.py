"""
Position manager.

Opens positions sized from the capital put at risk and closes them into
immutable trades with commission-adjusted profit.
"""

from src.core.enums import ExitReason, PositionType
from src.core.exceptions.backtest import (
    PositionAlreadyOpenError,
    PositionNotFoundError,
)
from src.core.models.bar import Bar
from src.core.models.position import Position
from src.core.models.strategy import Strategy
from src.core.models.trade import Trade
from src.core.types.financial import (
    HUNDRED,
    calculate_commission,
    calculate_pnl,
    percent_of,
)
from src.core.utils.decorators import log_trades
from src.core.utils.validation import validate_non_negative


class PositionManager:
    """
    Manages the open positions of one backtest run.

    At most one position is open per symbol. Trade ids are assigned from a
    run-wide sequence so identical runs produce identical ids.
    """

    def __init__(self, commission_percent: float = 0.1):
        self.commission_percent = validate_non_negative(commission_percent, "commission_percent")
        self._positions: dict[str, Position] = {}
        self._sequence = 0
        self.opened_count = 0
        self.closed_count = 0

    def get_position(self, symbol: str) -> Position | None:
        """Open position for a symbol, if any."""
        return self._positions.get(symbol)

    def has_position(self, symbol: str) -> bool:
        """Check if a position is open for a symbol."""
        return symbol in self._positions

    @property
    def open_positions(self) -> list[Position]:
        """Currently open positions."""
        return list(self._positions.values())

    @log_trades
    def open_position(
        self,
        symbol: str,
        direction: PositionType,
        bar: Bar,
        available_capital: float,
        strategy: Strategy,
    ) -> Position:
        """
        Open a position at the bar's close.

        The amount at risk is ``available_capital * max_risk_percent / 100``;
        stop-loss and take-profit come from the strategy's risk block.

        Raises:
            PositionAlreadyOpenError: If the symbol already has a position
            ValidationError: If the inputs yield an invalid position
        """
        if symbol in self._positions:
            raise PositionAlreadyOpenError(symbol)

        risk = strategy.risk_management
        position = Position.open(
            symbol=symbol,
            position_type=PositionType(direction),
            entry_price=bar.close,
            entry_time=bar.timestamp,
            risk_amount=available_capital * risk.max_risk_percent / HUNDRED,
            stop_loss_percent=risk.stop_loss_percent,
            take_profit_percent=risk.take_profit_percent,
        )

        self._positions[symbol] = position
        self.opened_count += 1
        return position

    @log_trades
    def close_position(self, position: Position, bar: Bar, exit_reason: ExitReason) -> Trade:
        """
        Close a position at the bar's close.

        Profit is the gross price move times quantity minus commission on
        both legs; no rounding is applied so realized profits reconcile
        exactly with the equity curve.

        Raises:
            PositionNotFoundError: If the position is not open in this manager
        """
        if self._positions.get(position.symbol) is not position:
            raise PositionNotFoundError(position.symbol)

        exit_price = bar.close
        gross = calculate_pnl(
            entry_price=position.entry_price,
            exit_price=exit_price,
            quantity=position.quantity,
            position_type=position.position_type.value,
        )
        commission = calculate_commission(
            position.entry_price, exit_price, position.quantity, self.commission_percent
        )
        profit = gross - commission

        self._sequence += 1
        trade = Trade(
            trade_id=f"{position.symbol}-{self._sequence:05d}",
            symbol=position.symbol,
            position_type=position.position_type,
            entry_time=position.entry_time,
            exit_time=bar.timestamp,
            entry_price=position.entry_price,
            exit_price=exit_price,
            quantity=position.quantity,
            commission=commission,
            profit=profit,
            profit_percentage=percent_of(profit, position.notional_value()),
            duration_hours=position.age_hours(bar.timestamp),
            exit_reason=ExitReason(exit_reason),
        )

        del self._positions[position.symbol]
        self.closed_count += 1
        return trade
