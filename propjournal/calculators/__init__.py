"""Derived-metric calculators."""

from propjournal.calculators.consistency import (
    MIN_TRADING_DAYS,
    calculate_consistency,
    days_from_journal,
    drawdown_curve,
    evaluate_day_caps,
    max_drawdown,
    parse_day_series,
)
from propjournal.calculators.performance import parse_transactions, summarize_performance

__all__ = [
    "MIN_TRADING_DAYS",
    "calculate_consistency",
    "days_from_journal",
    "drawdown_curve",
    "evaluate_day_caps",
    "max_drawdown",
    "parse_day_series",
    "parse_transactions",
    "summarize_performance",
]
