"""Consistency, drawdown and day-cap calculations.

All functions are pure and can be re-run on every input change.
"""

import math
from typing import Iterable, Sequence

from propjournal.errors import CalculationError
from propjournal.models import (
    ConsistencyResult,
    DayCapEntry,
    DayCapResult,
    TradingDay,
    TradingJournalData,
)
from propjournal.parsers.common import parse_datetime, parse_float

MIN_TRADING_DAYS = 2


def drawdown_curve(profits: Iterable[float]) -> list[float]:
    """Running maximum drawdown after each day.

    Cumulative profit starts from a peak of 0; the drawdown is the distance
    from the highest cumulative total seen so far.

    Args:
        profits: Daily profits in date order.

    Returns:
        Max drawdown observed up to and including each day.
    """
    curve = []
    peak = 0.0
    running_total = 0.0
    max_dd = 0.0

    for profit in profits:
        running_total += profit
        if running_total > peak:
            peak = running_total
        else:
            max_dd = max(max_dd, peak - running_total)
        curve.append(max_dd)

    return curve


def max_drawdown(profits: Iterable[float]) -> float:
    """Largest peak-to-trough decline in cumulative profit."""
    curve = drawdown_curve(profits)
    return curve[-1] if curve else 0.0


def _check_account_size(account_size: float) -> None:
    if account_size <= 0:
        raise CalculationError(f"Account size must be positive, got {account_size}")


def calculate_consistency(days: Sequence[TradingDay], account_size: float) -> ConsistencyResult:
    """Compute summary statistics for a daily profit series.

    Args:
        days: Trading days in any order.
        account_size: Account balance used for percentage metrics.

    Returns:
        ConsistencyResult over the date-sorted series.

    Raises:
        CalculationError: If account_size is not positive or fewer than
            MIN_TRADING_DAYS days are given.
    """
    _check_account_size(account_size)
    if len(days) < MIN_TRADING_DAYS:
        raise CalculationError(
            f"At least {MIN_TRADING_DAYS} trading days are needed, got {len(days)}"
        )

    sorted_days = sorted(days, key=lambda day: day.date)
    profits = [day.profit for day in sorted_days]

    total_days = len(profits)
    total_profit = sum(profits)
    average_profit = total_profit / total_days
    profitable_days = sum(1 for p in profits if p > 0)
    unprofitable_days = sum(1 for p in profits if p < 0)

    variance = sum((p - average_profit) ** 2 for p in profits) / total_days
    std_deviation = math.sqrt(variance)

    if average_profit != 0:
        consistency_score = (1 - std_deviation / abs(average_profit)) * 100
    else:
        consistency_score = 0.0

    max_dd = max_drawdown(profits)

    return ConsistencyResult(
        total_days=total_days,
        total_profit=total_profit,
        average_profit=average_profit,
        profitable_days=profitable_days,
        unprofitable_days=unprofitable_days,
        profitable_percentage=profitable_days / total_days * 100,
        std_deviation=std_deviation,
        consistency_score=max(0.0, consistency_score),
        percent_of_account=total_profit / account_size * 100,
        max_drawdown=max_dd,
        max_drawdown_percentage=max_dd / account_size * 100,
        trading_days=sorted_days,
    )


def evaluate_day_caps(
    profits: Sequence[float],
    consistency_percentage: float,
    profit_target: float,
) -> DayCapResult:
    """Check each day's profit against a concentration cap.

    A day is valid when its profit is at most ``consistency_percentage`` of
    the total profit.

    Args:
        profits: Daily profits.
        consistency_percentage: Max share of total profit per day, in (0, 100].
        profit_target: Account profit target.

    Raises:
        CalculationError: If consistency_percentage is outside (0, 100].
    """
    if not 0 < consistency_percentage <= 100:
        raise CalculationError(
            f"Consistency percentage must be in (0, 100], got {consistency_percentage}"
        )

    share = consistency_percentage / 100
    total_profit = sum(profits)
    max_allowed = total_profit * share
    target_cap = profit_target * share

    days = [
        DayCapEntry(
            profit=profit,
            is_valid=profit <= max_allowed,
            percentage=profit / total_profit * 100 if total_profit != 0 else 0.0,
        )
        for profit in profits
    ]

    return DayCapResult(
        total_profit=total_profit,
        consistency_percentage=consistency_percentage,
        max_allowed_per_day=max_allowed,
        profit_target=profit_target,
        target_cap=target_cap,
        needs_more_trading=max_allowed > target_cap,
        days=days,
    )


def parse_day_series(text: str) -> list[TradingDay]:
    """Parse bulk ``date,profit`` lines into trading days.

    Blank lines and lines with an unparseable date are ignored; a missing or
    non-numeric profit reads as 0.
    """
    days = []
    for line in text.splitlines():
        if not line.strip():
            continue
        date_part, _, profit_part = line.partition(",")
        parsed = parse_datetime(date_part)
        if parsed is None:
            continue
        profit = parse_float(profit_part.split(",")[0])
        days.append(TradingDay(date=parsed.date(), profit=profit or 0.0))
    return days


def days_from_journal(journal: TradingJournalData) -> list[TradingDay]:
    """Daily totals of a journal as a calculator series."""
    return [TradingDay(date=entry.date, profit=entry.total_pnl) for entry in journal.entries]
