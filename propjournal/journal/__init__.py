"""Journal aggregation and per-user sessions."""

from propjournal.journal.aggregator import (
    add_trade,
    group_trades_by_day,
    merge_entries,
    remove_entry,
    remove_trade,
    set_notes,
)

__all__ = [
    "add_trade",
    "group_trades_by_day",
    "merge_entries",
    "remove_entry",
    "remove_trade",
    "set_notes",
]
