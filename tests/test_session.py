"""Tests for the per-user journal session."""

import sqlite3
import tempfile
from datetime import date, datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from propjournal.db import JournalMirror, JournalStore
from propjournal.errors import ParseError, StoreError
from propjournal.journal.session import JournalSession
from propjournal.models import DailyJournalEntry, ImportFormat, TradeEntry, TradingDay

CSV_TEXT = (
    "Date,Symbol,Contract,Direction,EntryPrice,ExitPrice,Quantity,PnL,Fees,Notes\n"
    "2024-01-02,ES,ESH4,Long,4500,4510,1,500,4.2,\n"
    "2024-01-02,ES,ESH4,Short,4510,4515,1,-250,4.2,\n"
    "2024-01-03,NQ,NQH4,Long,16000,16010,1,200,4.2,\n"
)


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def make_session(root: Path, user_id=None) -> JournalSession:
    return JournalSession(
        store=JournalStore(root / "journal.db"),
        mirror=JournalMirror(root / "offline"),
        user_id=user_id,
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


class TestStorageRouting:
    """Anonymous journals stay local; identified users are also stored."""

    def test_anonymous_writes_mirror_only(self, temp_dir: Path):
        session = make_session(temp_dir)

        session.import_csv(CSV_TEXT)

        assert session.storage_key == "prop-trading-journal-data-anonymous"
        assert session.mirror.read(session.storage_key) is not None
        assert session.store.get_user_ids() == []

    def test_identified_user_writes_both(self, temp_dir: Path):
        session = make_session(temp_dir, "trader-1")

        session.import_csv(CSV_TEXT)

        assert session.storage_key == "prop-trading-journal-data-user-trader-1"
        assert session.store.load_journal("trader-1") == session.journal
        assert session.mirror.read(session.storage_key) == session.journal

    def test_users_do_not_share_journals(self, temp_dir: Path):
        make_session(temp_dir, "a").import_csv(CSV_TEXT)

        other = make_session(temp_dir, "b")
        anonymous = make_session(temp_dir)

        assert other.load().entries == []
        assert anonymous.load().entries == []

    def test_user_id_with_path_separators(self, temp_dir: Path):
        for user_id in ["acme/trader", "x/../../escaped"]:
            make_session(temp_dir, user_id).import_csv(CSV_TEXT)

            reloaded = make_session(temp_dir, user_id)
            reloaded.store.delete_journal(user_id)

            assert len(reloaded.load().entries) == 2

        assert not (temp_dir / "escaped.json").exists()

    def test_reload_persists(self, temp_dir: Path):
        make_session(temp_dir, "trader-1").import_csv(CSV_TEXT)

        reloaded = make_session(temp_dir, "trader-1")
        reloaded.load()

        assert [e.date for e in reloaded.entries] == [date(2024, 1, 2), date(2024, 1, 3)]
        assert reloaded.entries[0].total_pnl == 250


class TestImport:
    """
    *For any* CSV, importing it twice leaves the journal as after one import.
    """

    def test_reimport_is_idempotent(self, temp_dir: Path):
        session = make_session(temp_dir, "trader-1")

        session.import_csv(CSV_TEXT)
        first = [(e.date, [t.id for t in e.trades], e.total_pnl) for e in session.entries]
        session.import_csv(CSV_TEXT)
        second = [(e.date, [t.id for t in e.trades], e.total_pnl) for e in session.entries]

        assert first == second
        assert sum(e.trades_count for e in session.entries) == 3

    def test_import_returns_parse_result(self, temp_dir: Path):
        result = make_session(temp_dir).import_csv(CSV_TEXT)

        assert result.format == ImportFormat.STANDARD
        assert result.trade_count == 3
        assert result.skipped_rows == 0

    def test_import_merges_into_existing_day(self, temp_dir: Path):
        session = make_session(temp_dir)
        session.add_trade(date(2024, 1, 2), make_trade("manual", date(2024, 1, 2), 10))

        session.import_csv(CSV_TEXT)

        entry = session.journal.get_entry(date(2024, 1, 2))
        assert entry.trades_count == 3
        assert entry.trades[0].id == "manual"
        assert entry.total_pnl == 260

    def test_empty_import_raises(self, temp_dir: Path):
        session = make_session(temp_dir)

        with pytest.raises(ParseError):
            session.import_csv("")

    def test_import_without_trades_does_not_write(self, temp_dir: Path):
        session = make_session(temp_dir)

        result = session.import_csv("Date,Symbol,Contract,Direction,EntryPrice,ExitPrice,Quantity,PnL\n")

        assert result.trade_count == 0
        assert session.mirror.read(session.storage_key) is None


class TestLoadFallback:
    """Loading tolerates a missing, unreadable or corrupt store."""

    def test_mirror_used_when_store_empty(self, temp_dir: Path):
        make_session(temp_dir).import_csv(CSV_TEXT)
        session = make_session(temp_dir, "trader-1")
        session.mirror.write(session.storage_key, make_session(temp_dir).load())

        session.load()

        assert session.store.load_journal("trader-1") is None
        assert len(session.entries) == 2

    def test_mirror_used_when_store_fails(self, temp_dir: Path):
        make_session(temp_dir, "trader-1").import_csv(CSV_TEXT)
        session = make_session(temp_dir, "trader-1")

        with patch.object(session.store, "load_journal", side_effect=sqlite3.OperationalError("locked")):
            session.load()

        assert len(session.entries) == 2

    def test_corrupt_store_blob_gives_empty_journal(self, temp_dir: Path):
        session = make_session(temp_dir, "trader-1")
        conn = sqlite3.connect(session.store.db_path)
        try:
            conn.execute(
                "INSERT INTO trading_journal (user_id, data, last_updated) VALUES (?, ?, ?)",
                ("trader-1", "{not json", "2024-01-01T00:00:00"),
            )
            conn.commit()
        finally:
            conn.close()

        assert session.load().entries == []

    def test_corrupt_mirror_gives_empty_journal(self, temp_dir: Path):
        session = make_session(temp_dir)
        session.mirror.path_for(session.storage_key).write_text("[]", encoding="utf-8")

        assert session.load().entries == []


class TestSaveFailure:
    """A failed store write is reported after the offline copy is written."""

    def test_store_error_raised(self, temp_dir: Path):
        session = make_session(temp_dir, "trader-1")
        session.load()

        with patch.object(session.store, "save_journal", side_effect=sqlite3.OperationalError("disk full")):
            with pytest.raises(StoreError):
                session.import_csv(CSV_TEXT)

        assert session.mirror.read(session.storage_key) is not None

    def test_offline_copy_error_raised(self, temp_dir: Path):
        session = make_session(temp_dir)
        session.load()

        with patch.object(session.mirror, "write", side_effect=PermissionError("read-only")):
            with pytest.raises(StoreError):
                session.add_trade(date(2024, 1, 5), make_trade("a", date(2024, 1, 5), 50))


class TestEditing:
    """Manual edits go through the same merge and persistence path."""

    def test_delete_last_trade_removes_day(self, temp_dir: Path):
        session = make_session(temp_dir)
        day = date(2024, 1, 5)
        session.add_trade(day, make_trade("a", day, 50))

        session.delete_trade(day, "a")

        assert session.entries == []
        assert make_session(temp_dir).load().entries == []

    def test_update_notes(self, temp_dir: Path):
        session = make_session(temp_dir, "trader-1")
        session.import_csv(CSV_TEXT)

        session.update_notes(date(2024, 1, 3), "good day")

        stored = session.store.load_journal("trader-1")
        assert stored.get_entry(date(2024, 1, 3)).notes == "good day"

    def test_update_notes_missing_day(self, temp_dir: Path):
        session = make_session(temp_dir)

        with pytest.raises(KeyError):
            session.update_notes(date(2024, 1, 3), "x")

    def test_add_manual_entry(self, temp_dir: Path):
        session = make_session(temp_dir)
        day = date(2024, 2, 1)

        session.add_manual_entry(DailyJournalEntry(date=day, trades=[make_trade("m", day, -30)], notes="fomo"))

        entry = session.journal.get_entry(day)
        assert entry.notes == "fomo"
        assert entry.losing_trades == 1

    def test_delete_entry(self, temp_dir: Path):
        session = make_session(temp_dir)
        session.import_csv(CSV_TEXT)

        session.delete_entry(date(2024, 1, 2))

        assert [e.date for e in session.entries] == [date(2024, 1, 3)]

    def test_clear(self, temp_dir: Path):
        session = make_session(temp_dir, "trader-1")
        session.import_csv(CSV_TEXT)

        session.clear()

        assert session.entries == []
        assert session.store.load_journal("trader-1").entries == []

    def test_last_updated_advances(self, temp_dir: Path):
        session = make_session(temp_dir)
        before = session.load().last_updated

        session.import_csv(CSV_TEXT)

        assert session.journal.last_updated >= before


class TestTradingDays:
    def test_daily_series(self, temp_dir: Path):
        session = make_session(temp_dir)
        session.import_csv(CSV_TEXT)

        assert session.trading_days() == [
            TradingDay(date=date(2024, 1, 2), profit=250),
            TradingDay(date=date(2024, 1, 3), profit=200),
        ]
