"""Daily aggregation of trades into journal entries.

Every function here is pure: inputs are never modified, new lists and
entries are returned. Entry collections are always kept ascending by date
with at most one entry per date.
"""

from collections import defaultdict
from datetime import date
from typing import Iterable, Optional

from propjournal.models import DailyJournalEntry, TradeEntry


def group_trades_by_day(trades: Iterable[TradeEntry]) -> list[DailyJournalEntry]:
    """Group trades into one entry per calendar day.

    Args:
        trades: Trades in any order.

    Returns:
        Daily entries sorted ascending by date. Trades keep their input order
        within a day.
    """
    by_day: dict[date, list[TradeEntry]] = defaultdict(list)
    for trade in trades:
        by_day[trade.trade_date].append(trade)

    return [
        DailyJournalEntry(date=day, trades=day_trades)
        for day, day_trades in sorted(by_day.items())
    ]


def _dedup_trades(trades: Iterable[TradeEntry]) -> list[TradeEntry]:
    seen: set[str] = set()
    unique = []
    for trade in trades:
        if trade.id in seen:
            continue
        seen.add(trade.id)
        unique.append(trade)
    return unique


def merge_entries(
    existing: Iterable[DailyJournalEntry],
    incoming: Iterable[DailyJournalEntry],
) -> list[DailyJournalEntry]:
    """Merge incoming daily entries into an existing collection.

    Dates already present are extended with the incoming trades, skipping
    trade ids that are already there. Existing notes are kept unless the
    existing entry has none. New dates are inserted.

    Returns:
        The merged entries, ascending by date.
    """
    merged: dict[date, DailyJournalEntry] = {entry.date: entry for entry in existing}

    for entry in incoming:
        current = merged.get(entry.date)
        if current is None:
            merged[entry.date] = DailyJournalEntry(
                date=entry.date,
                trades=_dedup_trades(entry.trades),
                notes=entry.notes,
            )
            continue
        merged[entry.date] = DailyJournalEntry(
            date=current.date,
            trades=_dedup_trades([*current.trades, *entry.trades]),
            notes=current.notes if current.notes is not None else entry.notes,
        )

    return [merged[day] for day in sorted(merged)]


def add_trade(
    entries: Iterable[DailyJournalEntry], day: date, trade: TradeEntry
) -> list[DailyJournalEntry]:
    """Add a single trade to the entry for ``day``, creating it if needed."""
    return merge_entries(entries, [DailyJournalEntry(date=day, trades=[trade])])


def remove_trade(
    entries: Iterable[DailyJournalEntry], day: date, trade_id: str
) -> list[DailyJournalEntry]:
    """Remove a trade from a day; the day goes too once it has no trades."""
    result = []
    for entry in entries:
        if entry.date != day:
            result.append(entry)
            continue
        trades = [trade for trade in entry.trades if trade.id != trade_id]
        if trades:
            result.append(DailyJournalEntry(date=entry.date, trades=trades, notes=entry.notes))
    return result


def remove_entry(entries: Iterable[DailyJournalEntry], day: date) -> list[DailyJournalEntry]:
    """Remove the whole entry for ``day``."""
    return [entry for entry in entries if entry.date != day]


def set_notes(
    entries: Iterable[DailyJournalEntry], day: date, notes: Optional[str]
) -> list[DailyJournalEntry]:
    """Replace the notes on the entry for ``day``.

    Raises:
        KeyError: If there is no entry for ``day``.
    """
    result = list(entries)
    for index, entry in enumerate(result):
        if entry.date == day:
            result[index] = DailyJournalEntry(date=entry.date, trades=entry.trades, notes=notes)
            return result
    raise KeyError(day.isoformat())
