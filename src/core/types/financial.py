"""
Financial helpers for backtesting calculations.

All amounts are plain floats. Values stored on trades are kept at full
precision so that bookkeeping identities (profit + commission == gross PnL,
equity == initial capital + cumulative profit) hold exactly. Rounding happens only in the CSV export.
"""

from src.core.exceptions.backtest import CalculationError

# Common financial values as float constants
ZERO = 0.0
ONE = 1.0
HUNDRED = 100.0


def safe_divide(numerator: float, denominator: float, default: float = ZERO) -> float:
    """Divide, returning ``default`` when the denominator is zero.

    Args:
        numerator: Dividend
        denominator: Divisor
        default: Value returned for a zero divisor

    Returns:
        Quotient or default
    """
    if denominator == ZERO:
        return default
    return numerator / denominator


def percent_of(part: float, whole: float) -> float:
    """Express ``part`` as a percentage of ``whole`` (0 when whole is zero)."""
    return safe_divide(part, whole) * HUNDRED


def calculate_pnl(
    entry_price: float,
    exit_price: float,
    quantity: float,
    position_type: str,
) -> float:
    """Calculate gross PnL of a round trip.

    Args:
        entry_price: Entry price of position
        exit_price: Exit price of position
        quantity: Position quantity (absolute value)
        position_type: 'long' or 'short'

    Returns:
        Gross PnL before commission

    Raises:
        CalculationError: If the position type is neither long nor short
    """
    qty = abs(quantity)
    position_type_lower = position_type.lower()

    if position_type_lower == "long":
        return (exit_price - entry_price) * qty
    elif position_type_lower == "short":
        return (entry_price - exit_price) * qty

    raise CalculationError(f"Invalid position type: {position_type}")


def calculate_commission(
    entry_price: float, exit_price: float, quantity: float, commission_percent: float
) -> float:
    """Commission charged on both legs of a round trip.

    Args:
        entry_price: Entry price
        exit_price: Exit price
        quantity: Position quantity
        commission_percent: Commission rate in percent per leg notional

    Returns:
        Commission amount (non-negative)
    """
    return (entry_price + exit_price) * abs(quantity) * (commission_percent / HUNDRED)
