"""Consistency calculator data models."""

from datetime import date as date_type

from pydantic import BaseModel, Field


class TradingDay(BaseModel):
    """One day of a profit series."""

    date: date_type = Field(..., description="Trading day")
    profit: float = Field(..., description="Profit or loss for the day")

    model_config = {"frozen": True}


class ConsistencyResult(BaseModel):
    """Summary statistics for a daily profit series."""

    total_days: int = Field(..., ge=0, description="Number of trading days")
    total_profit: float = Field(..., description="Sum of daily profits")
    average_profit: float = Field(..., description="Mean daily profit")
    profitable_days: int = Field(..., ge=0, description="Days with profit > 0")
    unprofitable_days: int = Field(..., ge=0, description="Days with profit < 0")
    profitable_percentage: float = Field(..., ge=0, le=100, description="Share of profitable days")
    std_deviation: float = Field(..., ge=0, description="Population standard deviation")
    consistency_score: float = Field(..., ge=0, description="Consistency score (>= 0)")
    percent_of_account: float = Field(..., description="Total profit as % of account size")
    max_drawdown: float = Field(..., ge=0, description="Max peak-to-trough decline")
    max_drawdown_percentage: float = Field(..., ge=0, description="Max drawdown as % of account size")
    trading_days: list[TradingDay] = Field(..., description="Input series sorted by date")

    model_config = {"frozen": True}


class DayCapEntry(BaseModel):
    """A day checked against the concentration cap."""

    profit: float = Field(..., description="Profit for the day")
    is_valid: bool = Field(..., description="Profit within the per-day cap")
    percentage: float = Field(..., description="Share of total profit")

    model_config = {"frozen": True}


class DayCapResult(BaseModel):
    """Result of checking days against a consistency percentage."""

    total_profit: float = Field(..., description="Sum of daily profits")
    consistency_percentage: float = Field(..., gt=0, le=100, description="Max share per day")
    max_allowed_per_day: float = Field(..., description="Largest valid daily profit")
    profit_target: float = Field(..., description="Account profit target")
    target_cap: float = Field(..., description="Consistency percentage of the profit target")
    needs_more_trading: bool = Field(..., description="Per-day cap exceeds the target cap")
    days: list[DayCapEntry] = Field(..., description="Per-day validity")

    model_config = {"frozen": True}

    @property
    def invalid_days(self) -> list[DayCapEntry]:
        return [day for day in self.days if not day.is_valid]
