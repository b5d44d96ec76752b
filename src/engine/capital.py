"""
Capital ledgers.

A ledger tracks the realized balance positions are sized from. The capital
policy of a backtest decides how many ledgers exist and which symbols share
them.
"""

from dataclasses import dataclass, field

from src.core.enums import CapitalPolicy, PositionSizing
from src.core.models.backtest import BacktestConfig


@dataclass
class CapitalLedger:
    """Running balance booked with the profit of every closed trade."""

    starting_balance: float
    balance: float = field(init=False)
    trades_booked: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.balance = self.starting_balance

    @property
    def is_depleted(self) -> bool:
        """Check if nothing is left to risk."""
        return self.balance <= 0.0

    def book(self, profit: float) -> None:
        """Add a realized, commission-adjusted profit (negative for losses)."""
        self.balance += profit
        self.trades_booked += 1

    def sizing_balance(self, position_sizing: PositionSizing) -> float:
        """Balance the strategy's risk percentage is applied to."""
        if position_sizing.compounds:
            return self.balance
        return self.starting_balance


class CapitalAllocator:
    """
    Hands out the ledger each symbol sizes from.

    ISOLATED splits the initial capital evenly into one ledger per symbol.
    SHARED routes every symbol through a single ledger, so sizing depends on
    the order symbols are simulated in.
    """

    def __init__(self, config: BacktestConfig):
        self.policy = config.capital_policy
        if self.policy == CapitalPolicy.SHARED:
            shared = CapitalLedger(config.initial_capital)
            self._ledgers = {symbol: shared for symbol in config.symbols}
        else:
            per_symbol = config.capital_per_symbol()
            self._ledgers = {symbol: CapitalLedger(per_symbol) for symbol in config.symbols}

    def ledger_for(self, symbol: str) -> CapitalLedger:
        """Ledger a symbol sizes from and books into."""
        return self._ledgers[symbol]

    def total_balance(self) -> float:
        """Sum of distinct ledger balances."""
        unique = {id(ledger): ledger for ledger in self._ledgers.values()}
        return sum(ledger.balance for ledger in unique.values())
