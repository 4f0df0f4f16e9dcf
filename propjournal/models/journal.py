"""Journal data models."""

from datetime import date as date_type
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from propjournal.models.trade import TradeEntry


class DailyJournalEntry(BaseModel):
    """All trades closed on one calendar day.

    Totals are derived from ``trades`` on every access and cannot be set.
    """

    date: date_type = Field(..., description="Journal entry date")
    trades: list[TradeEntry] = Field(default_factory=list, description="Trades for the day")
    notes: Optional[str] = Field(default=None, description="User notes")

    model_config = {"frozen": True}

    @computed_field
    @property
    def total_pnl(self) -> float:
        return sum(trade.pnl for trade in self.trades)

    @computed_field
    @property
    def winning_trades(self) -> int:
        return sum(1 for trade in self.trades if trade.pnl > 0)

    @computed_field
    @property
    def losing_trades(self) -> int:
        return sum(1 for trade in self.trades if trade.pnl < 0)

    @property
    def trades_count(self) -> int:
        return len(self.trades)

    @property
    def win_rate(self) -> float:
        """Winning percentage of trades that were not flat."""
        decided = self.winning_trades + self.losing_trades
        return self.winning_trades / decided * 100 if decided else 0.0


class TradingJournalData(BaseModel):
    """A user's full journal: daily entries unique by date, ascending."""

    entries: list[DailyJournalEntry] = Field(default_factory=list, description="Daily entries")
    last_updated: datetime = Field(default_factory=datetime.now, description="Last modification time")

    model_config = {"frozen": True}

    def get_entry(self, day: date_type) -> Optional[DailyJournalEntry]:
        for entry in self.entries:
            if entry.date == day:
                return entry
        return None
