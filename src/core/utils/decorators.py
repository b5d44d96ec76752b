"""
Utility decorators for logging simulated trading operations.
"""

import functools
import inspect
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger

_CONTEXT_PARAMS = ["symbol", "direction", "exit_reason", "available_capital"]


def _extract_trading_context(bound_args: inspect.BoundArguments) -> dict[str, Any]:
    """Extract trading context from function arguments."""
    context = {}
    for param_name, value in bound_args.arguments.items():
        if param_name == "self":
            continue
        if param_name in _CONTEXT_PARAMS:
            context[param_name] = _serialize_parameter_value(value)
        elif param_name == "position" and hasattr(value, "symbol"):
            context["symbol"] = value.symbol
            context["direction"] = _serialize_parameter_value(value.position_type)
        elif param_name == "bar" and hasattr(value, "timestamp"):
            context["bar_time"] = value.timestamp.isoformat()
    return context


def _serialize_parameter_value(value: Any) -> Any:
    """Serialize parameter value for logging."""
    if hasattr(value, "value"):
        return str(value.value)  # Enum values
    return value


def _create_success_context(
    base_context: dict[str, Any], execution_time_ms: float, result: Any
) -> dict[str, Any]:
    """Create success logging context."""
    success_context = {
        **base_context,
        "success": True,
        "execution_time_ms": round(execution_time_ms, 3),
        "result_type": type(result).__name__,
    }

    if hasattr(result, "quantity"):
        success_context["quantity"] = result.quantity
    if hasattr(result, "profit"):
        success_context["profit"] = result.profit

    return success_context


def _create_error_context(
    base_context: dict[str, Any], execution_time_ms: float, error: Exception
) -> dict[str, Any]:
    """Create error logging context."""
    return {
        **base_context,
        "success": False,
        "execution_time_ms": round(execution_time_ms, 3),
        "error_type": type(error).__name__,
        "error_message": str(error),
    }


def _setup_logging_context(
    func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
) -> tuple[dict[str, Any], str]:
    """Setup logging context for trading operations."""
    sig = inspect.signature(func)
    bound_args = sig.bind(*args, **kwargs)
    bound_args.apply_defaults()

    context = {
        "correlation_id": str(uuid.uuid4())[:8],
        **_extract_trading_context(bound_args),
    }

    return context, func.__name__


def _execute_with_logging(
    func: Callable[..., Any],
    context: dict[str, Any],
    func_name: str,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> Any:
    """Execute function with logging around it."""
    logger.debug(f"Trading operation started: {func_name}", extra=context)
    start_time = time.perf_counter()

    try:
        result = func(*args, **kwargs)
        execution_time_ms = (time.perf_counter() - start_time) * 1000
        success_context = _create_success_context(context, execution_time_ms, result)
        logger.debug(f"Trading operation completed: {func_name}", extra=success_context)
        return result
    except Exception as e:
        execution_time_ms = (time.perf_counter() - start_time) * 1000
        error_context = _create_error_context(context, execution_time_ms, e)
        logger.error(f"Trading operation failed: {func_name}", extra=error_context)
        raise


F = TypeVar("F", bound=Callable[..., Any])


def log_trades(func: F) -> F:
    """Decorator to log simulated position operations with correlation IDs."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        context, func_name = _setup_logging_context(func, args, kwargs)
        return _execute_with_logging(func, context, func_name, args, kwargs)

    return wrapper  # type: ignore
