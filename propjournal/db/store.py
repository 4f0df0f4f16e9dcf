"""SQLite journal store for PropJournal."""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from propjournal.models import TradingJournalData


class JournalStore:
    """SQLite-based store of journal blobs keyed by user id."""

    REQUIRED_TABLES = [
        "trading_journal",
    ]

    def __init__(self, db_path: Path):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS trading_journal (
                    user_id TEXT PRIMARY KEY,
                    data TEXT NOT NULL,
                    last_updated TEXT NOT NULL
                )
            """)
            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Journal ====================

    def save_journal(self, user_id: str, journal: TradingJournalData) -> None:
        """Insert or replace a user's journal.

        Args:
            user_id: Owner of the journal.
            journal: Journal to save.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO trading_journal (user_id, data, last_updated)
                VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    data = excluded.data,
                    last_updated = excluded.last_updated
                """,
                (
                    user_id,
                    journal.model_dump_json(),
                    datetime.now().isoformat(),
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def load_journal_blob(self, user_id: str) -> Optional[str]:
        """Get the raw JSON journal for a user.

        Returns:
            The stored JSON text, or None if the user has no journal.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT data FROM trading_journal WHERE user_id = ?",
                (user_id,),
            )
            row = cursor.fetchone()
            return row["data"] if row else None
        finally:
            conn.close()

    def load_journal(self, user_id: str) -> Optional[TradingJournalData]:
        """Get a user's journal.

        Raises:
            pydantic.ValidationError: If the stored blob is corrupt.
        """
        blob = self.load_journal_blob(user_id)
        if blob is None:
            return None
        return TradingJournalData.model_validate_json(blob)

    def delete_journal(self, user_id: str) -> None:
        """Delete a user's journal."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM trading_journal WHERE user_id = ?", (user_id,))
            conn.commit()
        finally:
            conn.close()

    def get_user_ids(self) -> list[str]:
        """Get the ids of all users with a stored journal."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT user_id FROM trading_journal ORDER BY user_id")
            return [row["user_id"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Stats ====================

    def get_stats(self) -> dict:
        """Get database statistics.

        Returns:
            Dictionary with table record counts.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            stats = {}
            for table in self.REQUIRED_TABLES:
                cursor.execute(f"SELECT COUNT(*) as count FROM {table}")
                stats[table] = cursor.fetchone()["count"]
            return stats
        finally:
            conn.close()
