"""
Unit tests for strategy definition models.
"""

import pytest

from src.core.enums import PositionSizing
from src.core.exceptions.backtest import ValidationError
from src.core.models.strategy import RiskManagement, Strategy


class TestRiskManagement:
    """Test suite for RiskManagement."""

    def test_should_coerce_position_sizing_string(self) -> None:
        """Test sizing given as a string is converted to the enum."""
        risk = RiskManagement(2.0, 2.0, 4.0, position_sizing="dynamic")  # type: ignore[arg-type]

        assert risk.position_sizing == PositionSizing.DYNAMIC

    def test_should_reject_unknown_position_sizing(self) -> None:
        """Test invalid sizing modes."""
        with pytest.raises(ValidationError, match="Invalid position_sizing"):
            RiskManagement(2.0, 2.0, 4.0, position_sizing="martingale")  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        ("max_risk", "stop_loss", "take_profit"),
        [(0.0, 2.0, 4.0), (2.0, -1.0, 4.0), (2.0, 2.0, 0.0), (2.0, 100.0, 4.0)],
    )
    def test_should_reject_invalid_percentages(
        self, max_risk: float, stop_loss: float, take_profit: float
    ) -> None:
        """Test percentage validation, including a stop of 100%."""
        with pytest.raises(ValidationError):
            RiskManagement(max_risk, stop_loss, take_profit)


class TestStrategy:
    """Test suite for Strategy."""

    @pytest.fixture
    def strategy(self) -> Strategy:
        return Strategy(
            id="breakout",
            name="Breakout",
            risk_management=RiskManagement(3.0, 3.0, 6.0),
            parameters={"lookbackPeriod": 20, "maxHoldingTime": 12},
            entry_conditions=["Price > Resistance"],  # type: ignore[arg-type]
        )

    def test_should_require_id_and_name(self) -> None:
        """Test empty identifiers are rejected."""
        risk = RiskManagement(2.0, 2.0, 4.0)
        with pytest.raises(ValidationError, match="id"):
            Strategy(id=" ", name="x", risk_management=risk)
        with pytest.raises(ValidationError, match="name"):
            Strategy(id="x", name="", risk_management=risk)

    def test_should_freeze_condition_lists(self, strategy: Strategy) -> None:
        """Test condition lists are stored as tuples."""
        assert strategy.entry_conditions == ("Price > Resistance",)

    def test_should_read_parameters_with_defaults(self, strategy: Strategy) -> None:
        """Test parameter lookup."""
        assert strategy.get_parameter("lookbackPeriod") == 20
        assert strategy.get_parameter("missing", 5) == 5

    def test_should_read_max_holding_time(self, strategy: Strategy) -> None:
        """Test the holding limit parameter and its 24h default."""
        assert strategy.max_holding_hours == 12.0
        default = Strategy(id="a", name="a", risk_management=RiskManagement(1.0, 1.0, 2.0))
        assert default.max_holding_hours == 24.0

    def test_should_serialize_to_dict(self, strategy: Strategy) -> None:
        """Test dictionary representation."""
        data = strategy.to_dict()

        assert data["id"] == "breakout"
        assert data["risk_management"]["position_sizing"] == "percentage"
        assert data["entry_conditions"] == ["Price > Resistance"]
