"""
Pydantic schemas validating user-submitted backtest requests.

The limits mirror the backtest form: at least 1000 of initial capital,
commission between 0% and 1%, risk between 0.1% and 10%, stop-loss between
0.1% and 20% and take-profit between 0.1% and 50%.
"""

from dataclasses import replace
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.core.constants import (
    MAX_COMMISSION_PERCENT,
    MAX_RISK_PERCENT,
    MAX_STOP_LOSS_PERCENT,
    MAX_TAKE_PROFIT_PERCENT,
    MIN_INITIAL_CAPITAL,
    MIN_RISK_PERCENT,
)
from src.core.enums import CapitalPolicy, IndicatorMode, PositionSizing, Timeframe
from src.core.models.backtest import BacktestConfig
from src.core.models.strategy import RiskManagement, Strategy


class RiskManagementRequest(BaseModel):
    """Risk overrides for the selected strategy."""

    max_risk: float = Field(
        ..., ge=MIN_RISK_PERCENT, le=MAX_RISK_PERCENT, description="Risk per trade (%)"
    )
    stop_loss: float = Field(
        ..., ge=MIN_RISK_PERCENT, le=MAX_STOP_LOSS_PERCENT, description="Stop-loss distance (%)"
    )
    take_profit: float = Field(
        ...,
        ge=MIN_RISK_PERCENT,
        le=MAX_TAKE_PROFIT_PERCENT,
        description="Take-profit distance (%)",
    )
    position_sizing: PositionSizing | None = Field(
        default=None, description="Sizing mode; keeps the strategy's mode when omitted"
    )

    def to_risk_management(self, base: RiskManagement) -> RiskManagement:
        """Apply the overrides to a strategy's risk block."""
        return RiskManagement(
            max_risk_percent=self.max_risk,
            stop_loss_percent=self.stop_loss,
            take_profit_percent=self.take_profit,
            position_sizing=self.position_sizing or base.position_sizing,
        )


class StrategyRequest(BaseModel):
    """Selected strategy with optional name, parameter and risk overrides."""

    strategy_id: str = Field(..., min_length=1, description="Registered strategy id")
    name: str | None = Field(default=None, min_length=1, description="Display name")
    parameters: dict[str, Any] = Field(default_factory=dict, description="Parameter overrides")
    risk: RiskManagementRequest | None = None

    def to_strategy(self, base: Strategy) -> Strategy:
        """Build the strategy to run by applying the overrides to ``base``."""
        return replace(
            base,
            name=self.name or base.name,
            parameters={**base.parameters, **self.parameters},
            risk_management=(
                self.risk.to_risk_management(base.risk_management)
                if self.risk is not None
                else base.risk_management
            ),
        )


class BacktestRequest(BaseModel):
    """Request model for a backtest run."""

    start_date: datetime = Field(..., description="Backtest start date")
    end_date: datetime = Field(..., description="Backtest end date")
    initial_capital: float = Field(
        default=10000.0, ge=MIN_INITIAL_CAPITAL, description="Starting capital"
    )
    commission: float = Field(
        default=0.1, ge=0.0, le=MAX_COMMISSION_PERCENT, description="Commission per leg (%)"
    )
    slippage: float = Field(default=0.1, ge=0.0, description="Slippage (%), reported only")
    symbols: list[str] = Field(..., min_length=1, description="Symbols to backtest")
    timeframe: Timeframe = Field(default=Timeframe.H1, description="Bar timeframe")
    currency: str = Field(default="USD", min_length=1)
    indicator_mode: IndicatorMode = Field(default=IndicatorMode.SIMPLIFIED)
    capital_policy: CapitalPolicy = Field(default=CapitalPolicy.ISOLATED)

    @field_validator("symbols", mode="before")
    @classmethod
    def split_symbols(cls, v: Any) -> Any:
        """Accept a comma separated string of symbols."""
        if isinstance(v, str):
            return [symbol.strip() for symbol in v.split(",") if symbol.strip()]
        return v

    @field_validator("end_date")
    @classmethod
    def validate_date_range(cls, v: datetime, info) -> datetime:
        """Validate that end_date is after start_date."""
        if "start_date" in info.data and v <= info.data["start_date"]:
            raise ValueError("end_date must be after start_date")
        return v

    def to_config(self) -> BacktestConfig:
        """Convert the request into a validated backtest configuration."""
        return BacktestConfig(
            start_date=self.start_date,
            end_date=self.end_date,
            initial_capital=self.initial_capital,
            symbols=list(self.symbols),
            commission=self.commission,
            slippage=self.slippage,
            timeframe=self.timeframe,
            currency=self.currency,
            indicator_mode=self.indicator_mode,
            capital_policy=self.capital_policy,
        )
