"""
Unit tests for BacktestConfig validation.
Invalid configurations must fail before any data is requested.
"""

from datetime import UTC, datetime, timedelta

import pytest

from src.core.enums import CapitalPolicy, IndicatorMode, Timeframe
from src.core.exceptions.backtest import ConfigurationError, ValidationError
from src.core.models.backtest import BacktestConfig

START = datetime(2024, 1, 1, tzinfo=UTC)
END = datetime(2024, 2, 1, tzinfo=UTC)


def _config(**overrides) -> BacktestConfig:
    values = {
        "start_date": START,
        "end_date": END,
        "initial_capital": 10000.0,
        "symbols": ["EUR/USD", "GBP/USD"],
    }
    values.update(overrides)
    return BacktestConfig(**values)


class TestBacktestConfigValidation:
    """Test suite for BacktestConfig validation."""

    def test_should_create_valid_config_with_defaults(self) -> None:
        """Test default values."""
        config = _config()

        assert config.commission == 0.1
        assert config.slippage == 0.0
        assert config.timeframe == Timeframe.H1
        assert config.currency == "USD"
        assert config.indicator_mode == IndicatorMode.SIMPLIFIED
        assert config.capital_policy == CapitalPolicy.ISOLATED
        assert config.duration_days() == 31

    def test_should_coerce_string_enums(self) -> None:
        """Test string values for enum fields."""
        config = _config(timeframe="4h", indicator_mode="standard", capital_policy="shared")

        assert config.timeframe == Timeframe.H4
        assert config.indicator_mode == IndicatorMode.STANDARD
        assert config.capital_policy == CapitalPolicy.SHARED

    def test_should_reject_unknown_enum_values(self) -> None:
        """Test invalid enum strings raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            _config(timeframe="2h")
        with pytest.raises(ConfigurationError):
            _config(capital_policy="pooled")

    def test_should_reject_empty_symbols(self) -> None:
        """Test an empty symbol list."""
        with pytest.raises(ConfigurationError, match="at least one symbol"):
            _config(symbols=[])

    def test_should_strip_symbols(self) -> None:
        """Test symbols are normalized."""
        assert _config(symbols=[" EUR/USD "]).symbols == ["EUR/USD"]

    @pytest.mark.parametrize("capital", [0.0, -100.0])
    def test_should_reject_non_positive_capital(self, capital: float) -> None:
        """Test capital must be positive."""
        with pytest.raises(ConfigurationError, match="initial_capital"):
            _config(initial_capital=capital)

    def test_should_reject_negative_commission_and_slippage(self) -> None:
        """Test cost parameters must be non-negative."""
        with pytest.raises(ConfigurationError, match="commission"):
            _config(commission=-0.1)
        with pytest.raises(ConfigurationError, match="slippage"):
            _config(slippage=-0.1)

    def test_should_reject_end_before_start(self) -> None:
        """Test date range validation."""
        with pytest.raises(ConfigurationError, match="must be after"):
            _config(end_date=START - timedelta(days=1))
        with pytest.raises(ConfigurationError):
            _config(end_date=START)

    def test_should_reject_blank_currency(self) -> None:
        """Test currency must not be blank."""
        with pytest.raises(ConfigurationError, match="currency"):
            _config(currency=" ")

    def test_should_be_catchable_as_validation_error(self) -> None:
        """Test ConfigurationError is a ValidationError."""
        with pytest.raises(ValidationError):
            _config(initial_capital=0.0)

    def test_should_split_capital_per_symbol(self) -> None:
        """Test isolated ledger size."""
        assert _config().capital_per_symbol() == pytest.approx(5000.0)

    def test_should_serialize_to_dict(self) -> None:
        """Test dictionary representation."""
        data = _config().to_dict()

        assert data["symbols"] == ["EUR/USD", "GBP/USD"]
        assert data["timeframe"] == "1h"
        assert data["capital_policy"] == "isolated"
        assert data["start_date"] == START.isoformat()

    def test_should_treat_naive_dates_as_utc(self) -> None:
        """Test naive start and end dates are tagged UTC."""
        config = _config(start_date=datetime(2024, 1, 1), end_date=datetime(2024, 2, 1))

        assert config.start_date == START
        assert config.end_date.tzinfo is UTC
