"""
Strategy definition models.

A strategy is an immutable description: the rule that trades it is looked
up in the strategy registry by id (or name alias).
"""

from dataclasses import dataclass, field
from typing import Any

from src.core.constants import DEFAULT_MAX_HOLDING_HOURS
from src.core.enums import PositionSizing
from src.core.exceptions.backtest import ValidationError
from src.core.utils.validation import validate_percentage


@dataclass(frozen=True)
class RiskManagement:
    """Risk block of a strategy. All values are percentages."""

    max_risk_percent: float
    stop_loss_percent: float
    take_profit_percent: float
    position_sizing: PositionSizing = PositionSizing.PERCENTAGE

    def __post_init__(self) -> None:
        """Validate risk parameters after initialization."""
        validate_percentage(self.max_risk_percent, "max_risk_percent")
        validate_percentage(self.stop_loss_percent, "stop_loss_percent")
        # A stop of 100% would put a long's stop at zero
        if self.stop_loss_percent >= 100:
            raise ValidationError(
                f"stop_loss_percent must be below 100, got {self.stop_loss_percent}"
            )
        validate_percentage(self.take_profit_percent, "take_profit_percent")
        if not isinstance(self.position_sizing, PositionSizing):
            try:
                object.__setattr__(self, "position_sizing", PositionSizing(self.position_sizing))
            except ValueError as e:
                raise ValidationError(f"Invalid position_sizing: {self.position_sizing}") from e


@dataclass(frozen=True)
class Strategy:
    """Immutable trading strategy definition consumed by the engine."""

    id: str
    name: str
    risk_management: RiskManagement
    description: str = ""
    parameters: dict[str, Any] = field(default_factory=dict)
    entry_conditions: tuple[str, ...] = ()
    exit_conditions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate strategy data after initialization."""
        if not self.id or not self.id.strip():
            raise ValidationError("Strategy id must not be empty")
        if not self.name or not self.name.strip():
            raise ValidationError("Strategy name must not be empty")
        object.__setattr__(self, "entry_conditions", tuple(self.entry_conditions))
        object.__setattr__(self, "exit_conditions", tuple(self.exit_conditions))

    def get_parameter(self, key: str, default: Any = None) -> Any:
        """Read a strategy parameter, falling back to ``default``."""
        value = self.parameters.get(key)
        return default if value is None else value

    @property
    def max_holding_hours(self) -> float:
        """Maximum position age before a time-limit exit."""
        return float(self.get_parameter("maxHoldingTime", DEFAULT_MAX_HOLDING_HOURS))

    def to_dict(self) -> dict:
        """Convert strategy to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "parameters": dict(self.parameters),
            "entry_conditions": list(self.entry_conditions),
            "exit_conditions": list(self.exit_conditions),
            "risk_management": {
                "max_risk_percent": self.risk_management.max_risk_percent,
                "stop_loss_percent": self.risk_management.stop_loss_percent,
                "take_profit_percent": self.risk_management.take_profit_percent,
                "position_sizing": self.risk_management.position_sizing.value,
            },
        }
