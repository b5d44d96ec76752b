"""
Strategy rule interface definition.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from src.core.enums import ExitReason, PositionType
from src.core.models.bar import Bar
from src.core.models.position import Position
from src.core.models.strategy import Strategy


class IStrategyRule(ABC):
    """Abstract interface for the entry/exit capability of a strategy."""

    @abstractmethod
    def check_entry(
        self,
        strategy: Strategy,
        current_bar: Bar,
        previous_bar: Bar,
        window: Sequence[Bar],
    ) -> PositionType | None:
        """Return the direction to open, or None when there is no entry signal.

        ``window`` holds the bars preceding ``current_bar`` (most recent last).
        """
        pass

    @abstractmethod
    def check_exit(
        self,
        strategy: Strategy,
        position: Position,
        current_bar: Bar,
        previous_bar: Bar,
        window: Sequence[Bar],
    ) -> ExitReason | None:
        """Return the reason to close ``position``, or None to keep it open."""
        pass
