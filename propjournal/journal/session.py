"""Per-user journal session.

A :class:`JournalSession` is built for one user (or the anonymous local
user) and owns reading, merging and writing that user's journal. It is
created per command/request and passed to whatever needs the journal.
"""

import logging
import sqlite3
from datetime import date, datetime
from typing import Optional

from pydantic import ValidationError

from propjournal.calculators.consistency import days_from_journal
from propjournal.db.mirror import JournalMirror, storage_key
from propjournal.db.store import JournalStore
from propjournal.errors import StoreError
from propjournal.journal import aggregator
from propjournal.models import (
    DailyJournalEntry,
    ImportFormat,
    ParseResult,
    TradeEntry,
    TradingDay,
    TradingJournalData,
)
from propjournal.parsers import CSVParseOptions, parse

logger = logging.getLogger(__name__)


class JournalSession:
    """Journal state for a single user."""

    def __init__(
        self,
        store: JournalStore,
        mirror: JournalMirror,
        user_id: Optional[str] = None,
    ):
        """Initialize the session.

        Args:
            store: Shared journal store, used for identified users.
            mirror: Local offline copy, used for everyone.
            user_id: Current user, or None for the anonymous local journal.
        """
        self.store = store
        self.mirror = mirror
        self.user_id = user_id or None
        self.journal = TradingJournalData()
        self._loaded = False

    @property
    def storage_key(self) -> str:
        return storage_key(self.user_id)

    @property
    def entries(self) -> list[DailyJournalEntry]:
        return self.journal.entries

    # ==================== Loading ====================

    def _read_mirror(self) -> Optional[TradingJournalData]:
        try:
            return self.mirror.read(self.storage_key)
        except ValidationError as e:
            logger.warning("Offline copy %s is corrupt, starting empty: %s", self.storage_key, e)
            return None
        except OSError as e:
            logger.warning("Offline copy %s is unreadable, starting empty: %s", self.storage_key, e)
            return None

    def load(self) -> TradingJournalData:
        """Load the journal for the session's user.

        Identified users read from the store first; the offline copy is used
        when the store has nothing or cannot be read. A corrupt blob yields
        an empty journal.
        """
        journal = None
        if self.user_id:
            try:
                journal = self.store.load_journal(self.user_id)
            except sqlite3.Error as e:
                logger.warning("Store unavailable for user %s, using offline copy: %s", self.user_id, e)
                journal = self._read_mirror()
            except ValidationError as e:
                logger.warning("Stored journal for user %s is corrupt, starting empty: %s", self.user_id, e)
                journal = TradingJournalData()
            else:
                if journal is None:
                    logger.info("No stored journal for user %s, checking offline copy", self.user_id)
                    journal = self._read_mirror()
        else:
            journal = self._read_mirror()

        self.journal = journal or TradingJournalData()
        self._loaded = True
        logger.info("Loaded %d entries for %s", len(self.journal.entries), self.storage_key)
        return self.journal

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    # ==================== Saving ====================

    def _commit(self, entries: list[DailyJournalEntry]) -> TradingJournalData:
        """Replace the entries, stamp the journal and persist it.

        Raises:
            StoreError: If the offline copy or the store cannot be written.
                A store failure happens after the offline copy is written.
        """
        self.journal = TradingJournalData(entries=entries, last_updated=datetime.now())
        try:
            self.mirror.write(self.storage_key, self.journal)
        except OSError as e:
            raise StoreError(f"Could not write offline copy {self.storage_key}: {e}") from e
        if self.user_id:
            try:
                self.store.save_journal(self.user_id, self.journal)
            except sqlite3.Error as e:
                raise StoreError(f"Could not save journal for user {self.user_id}: {e}") from e
        return self.journal

    # ==================== Mutations ====================

    def import_csv(
        self,
        text: str,
        fmt: Optional[ImportFormat] = None,
        options: Optional[CSVParseOptions] = None,
    ) -> ParseResult:
        """Parse CSV text and merge the trades into the journal.

        Re-importing the same file does not duplicate trades.

        Raises:
            ParseError: If the input cannot be parsed at all.
        """
        self._ensure_loaded()
        result = parse(text, fmt=fmt, options=options)
        if result.entries:
            self._commit(aggregator.merge_entries(self.entries, result.entries))
        logger.info(
            "Imported %d trades (%s) for %s, %d rows skipped",
            result.trade_count,
            result.format.value,
            self.storage_key,
            result.skipped_rows,
        )
        return result

    def add_manual_entry(self, entry: DailyJournalEntry) -> TradingJournalData:
        """Merge a manually entered day into the journal."""
        self._ensure_loaded()
        return self._commit(aggregator.merge_entries(self.entries, [entry]))

    def update_notes(self, day: date, notes: Optional[str]) -> TradingJournalData:
        """Set the notes for a day.

        Raises:
            KeyError: If there is no entry for ``day``.
        """
        self._ensure_loaded()
        return self._commit(aggregator.set_notes(self.entries, day, notes))

    def delete_entry(self, day: date) -> TradingJournalData:
        self._ensure_loaded()
        return self._commit(aggregator.remove_entry(self.entries, day))

    def add_trade(self, day: date, trade: TradeEntry) -> TradingJournalData:
        self._ensure_loaded()
        return self._commit(aggregator.add_trade(self.entries, day, trade))

    def delete_trade(self, day: date, trade_id: str) -> TradingJournalData:
        self._ensure_loaded()
        return self._commit(aggregator.remove_trade(self.entries, day, trade_id))

    def clear(self) -> TradingJournalData:
        """Remove all entries from the journal."""
        self._ensure_loaded()
        logger.info("Clearing journal for %s", self.storage_key)
        return self._commit([])

    # ==================== Queries ====================

    def trading_days(self) -> list[TradingDay]:
        """Daily totals as a calculator series."""
        self._ensure_loaded()
        return days_from_journal(self.journal)
