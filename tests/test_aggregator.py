"""Property-based tests for daily aggregation."""

from datetime import date, datetime

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from propjournal.journal.aggregator import (
    add_trade,
    group_trades_by_day,
    merge_entries,
    remove_entry,
    remove_trade,
    set_notes,
)
from propjournal.models import DailyJournalEntry, TradeEntry


def trade_strategy():
    """Generate valid TradeEntry objects for testing."""
    return st.builds(
        TradeEntry,
        id=st.uuids().map(str),
        timestamp=st.datetimes(
            min_value=datetime(2024, 1, 1),
            max_value=datetime(2024, 1, 10),
        ),
        symbol=st.sampled_from(["ES", "NQ", "CL", "MES"]),
        contract=st.none(),
        direction=st.sampled_from(["Long", "Short"]),
        entry_price=st.floats(min_value=1, max_value=10000, allow_nan=False),
        exit_price=st.floats(min_value=1, max_value=10000, allow_nan=False),
        quantity=st.integers(min_value=1, max_value=10).map(float),
        pnl=st.one_of(
            st.just(0.0),
            st.floats(min_value=-5000, max_value=5000, allow_nan=False, allow_infinity=False),
        ),
        fees=st.none(),
        notes=st.none(),
    )


def make_trade(trade_id: str, day: date, pnl: float) -> TradeEntry:
    return TradeEntry(
        id=trade_id,
        timestamp=datetime.combine(day, datetime.min.time()),
        symbol="ES",
        direction="Long",
        entry_price=100,
        exit_price=100,
        quantity=1,
        pnl=pnl,
    )


class TestDailyTotals:
    """
    *For any* set of trades, each day's totals equal the sums over the trades
    dated that day.
    """

    @given(trades=st.lists(trade_strategy(), min_size=0, max_size=40))
    @settings(max_examples=100)
    def test_total_pnl_equals_sum(self, trades: list[TradeEntry]):
        entries = group_trades_by_day(trades)

        for entry in entries:
            expected = sum(t.pnl for t in trades if t.timestamp.date() == entry.date)
            assert entry.total_pnl == pytest.approx(expected)

    @given(trades=st.lists(trade_strategy(), min_size=0, max_size=40))
    @settings(max_examples=100)
    def test_win_loss_counts(self, trades: list[TradeEntry]):
        entries = group_trades_by_day(trades)

        for entry in entries:
            day_trades = [t for t in trades if t.timestamp.date() == entry.date]
            assert entry.winning_trades == sum(1 for t in day_trades if t.pnl > 0)
            assert entry.losing_trades == sum(1 for t in day_trades if t.pnl < 0)
            assert entry.winning_trades + entry.losing_trades <= entry.trades_count

    @given(trades=st.lists(trade_strategy(), min_size=0, max_size=40))
    @settings(max_examples=100)
    def test_dates_unique_and_ascending(self, trades: list[TradeEntry]):
        entries = group_trades_by_day(trades)
        dates = [entry.date for entry in entries]

        assert dates == sorted(set(dates))
        assert sum(entry.trades_count for entry in entries) == len(trades)

    def test_flat_trade_counted_in_neither(self):
        entries = group_trades_by_day([make_trade("a", date(2024, 1, 2), 0.0)])

        assert entries[0].winning_trades == 0
        assert entries[0].losing_trades == 0
        assert entries[0].win_rate == 0.0

    def test_totals_serialized(self):
        entry = group_trades_by_day([make_trade("a", date(2024, 1, 2), 12.5)])[0]

        dumped = entry.model_dump()

        assert dumped["total_pnl"] == 12.5
        assert dumped["winning_trades"] == 1
        assert dumped["losing_trades"] == 0


class TestIdempotentMerge:
    """
    *For any* batch, merging it a second time leaves trades and totals
    unchanged.
    """

    @given(
        existing=st.lists(trade_strategy(), min_size=0, max_size=20),
        batch=st.lists(trade_strategy(), min_size=0, max_size=20),
    )
    @settings(max_examples=100)
    def test_merge_twice_no_duplicates(self, existing, batch):
        base = group_trades_by_day(existing)
        incoming = group_trades_by_day(batch)

        once = merge_entries(base, incoming)
        twice = merge_entries(once, incoming)

        assert [e.date for e in once] == [e.date for e in twice]
        for first, second in zip(once, twice):
            assert [t.id for t in first.trades] == [t.id for t in second.trades]
            assert first.total_pnl == second.total_pnl

    def test_merge_extends_existing_day(self):
        day = date(2024, 1, 2)
        base = [DailyJournalEntry(date=day, trades=[make_trade("a", day, 10)], notes="calm")]
        incoming = [DailyJournalEntry(date=day, trades=[make_trade("b", day, -4)], notes="other")]

        merged = merge_entries(base, incoming)

        assert len(merged) == 1
        assert [t.id for t in merged[0].trades] == ["a", "b"]
        assert merged[0].total_pnl == 6
        assert merged[0].notes == "calm"

    def test_merge_inserts_new_days_sorted(self):
        d1, d2, d3 = date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)
        base = group_trades_by_day([make_trade("a", d1, 1), make_trade("c", d3, 3)])
        incoming = group_trades_by_day([make_trade("b", d2, 2)])

        merged = merge_entries(base, incoming)

        assert [e.date for e in merged] == [d1, d2, d3]

    def test_inputs_not_modified(self):
        day = date(2024, 1, 2)
        base = [DailyJournalEntry(date=day, trades=[make_trade("a", day, 10)])]

        merge_entries(base, [DailyJournalEntry(date=day, trades=[make_trade("b", day, 5)])])

        assert [t.id for t in base[0].trades] == ["a"]


class TestTradeEditing:
    """Adding and removing trades keeps one entry per day."""

    def test_add_trade_creates_day(self):
        day = date(2024, 1, 5)

        entries = add_trade([], day, make_trade("a", day, 50))

        assert len(entries) == 1
        assert entries[0].total_pnl == 50

    def test_remove_last_trade_removes_day(self):
        day = date(2024, 1, 5)
        entries = add_trade([], day, make_trade("a", day, 50))

        entries = remove_trade(entries, day, "a")

        assert entries == []

    def test_remove_trade_recomputes_totals(self):
        day = date(2024, 1, 5)
        entries = group_trades_by_day([make_trade("a", day, 50), make_trade("b", day, -20)])

        entries = remove_trade(entries, day, "a")

        assert entries[0].total_pnl == -20
        assert entries[0].winning_trades == 0
        assert entries[0].losing_trades == 1

    def test_remove_unknown_trade_is_noop(self):
        day = date(2024, 1, 5)
        entries = group_trades_by_day([make_trade("a", day, 50)])

        assert remove_trade(entries, day, "zzz") == entries

    def test_remove_entry(self):
        d1, d2 = date(2024, 1, 1), date(2024, 1, 2)
        entries = group_trades_by_day([make_trade("a", d1, 1), make_trade("b", d2, 2)])

        assert [e.date for e in remove_entry(entries, d1)] == [d2]

    def test_set_notes(self):
        day = date(2024, 1, 5)
        entries = group_trades_by_day([make_trade("a", day, 50)])

        updated = set_notes(entries, day, "followed the plan")

        assert updated[0].notes == "followed the plan"
        assert updated[0].total_pnl == 50
        assert entries[0].notes is None

    def test_set_notes_missing_day(self):
        with pytest.raises(KeyError):
            set_notes([], date(2024, 1, 5), "x")
