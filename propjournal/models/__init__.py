"""Data models for PropJournal."""

from propjournal.models.trade import Direction, TradeEntry
from propjournal.models.journal import DailyJournalEntry, TradingJournalData
from propjournal.models.consistency import (
    ConsistencyResult,
    DayCapEntry,
    DayCapResult,
    TradingDay,
)
from propjournal.models.contract import ContractSpec
from propjournal.models.transaction import PerformanceSummary, Transaction
from propjournal.models.parse_result import ImportFormat, ParseResult

__all__ = [
    "Direction",
    "TradeEntry",
    "DailyJournalEntry",
    "TradingJournalData",
    "TradingDay",
    "ConsistencyResult",
    "DayCapEntry",
    "DayCapResult",
    "ContractSpec",
    "Transaction",
    "PerformanceSummary",
    "ImportFormat",
    "ParseResult",
]
