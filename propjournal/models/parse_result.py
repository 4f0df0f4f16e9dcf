"""ParseResult data model."""

from enum import Enum

from pydantic import BaseModel, Field

from propjournal.models.journal import DailyJournalEntry


class ImportFormat(str, Enum):
    """Supported CSV import formats."""

    STANDARD = "standard"
    BROKER_EXPORT = "broker_export"


class ParseResult(BaseModel):
    """Outcome of parsing one CSV batch."""

    format: ImportFormat = Field(..., description="Detected or requested format")
    entries: list[DailyJournalEntry] = Field(default_factory=list, description="Daily entries, ascending")
    skipped_rows: int = Field(default=0, ge=0, description="Malformed rows that were dropped")

    model_config = {"frozen": True}

    @property
    def trade_count(self) -> int:
        return sum(entry.trades_count for entry in self.entries)
