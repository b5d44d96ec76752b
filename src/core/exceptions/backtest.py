"""
Custom exception hierarchy for the backtesting engine.

This module defines domain-specific exceptions for better error handling.
"""


class BacktestException(Exception):
    """Base exception for all backtesting-related errors."""

    pass


class ValidationError(BacktestException):
    """Raised when input validation fails."""

    pass


class ConfigurationError(ValidationError):
    """Raised when a backtest configuration is invalid."""

    pass


class DataError(BacktestException):
    """Raised when market data access or processing fails."""

    pass


class StrategyError(BacktestException):
    """Raised when strategy resolution or evaluation fails."""

    pass


class UnknownStrategyError(StrategyError):
    """Raised when no rule is registered for a strategy."""

    def __init__(self, strategy_key: str, available: list[str]):
        self.strategy_key = strategy_key
        self.available = available
        super().__init__(
            f"No rule registered for strategy '{strategy_key}'. "
            f"Available: {', '.join(available) or 'none'}"
        )


class CalculationError(BacktestException):
    """Raised when mathematical calculations fail."""

    pass


class PositionError(BacktestException):
    """Raised when position operations fail."""

    pass


class PositionAlreadyOpenError(PositionError):
    """Raised when opening a position for a symbol that already has one."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"Position already open for symbol: {symbol}")


class PositionNotFoundError(PositionError):
    """Raised when trying to operate on a non-existent position."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"Position not found for symbol: {symbol}")
