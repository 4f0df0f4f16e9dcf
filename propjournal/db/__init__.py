"""Persistence for PropJournal journals."""

from propjournal.db.mirror import JournalMirror, storage_key
from propjournal.db.store import JournalStore

__all__ = ["JournalMirror", "JournalStore", "storage_key"]
