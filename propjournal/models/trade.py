"""TradeEntry data model."""

from datetime import date, datetime
from typing import Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

Direction = Literal["Long", "Short"]


class TradeEntry(BaseModel):
    """Represents a completed round-trip trade."""

    id: str = Field(default_factory=lambda: str(uuid4()), description="Trade identifier")
    timestamp: datetime = Field(..., description="Entry fill date and time")
    symbol: str = Field(..., min_length=1, description="Instrument symbol")
    contract: Optional[str] = Field(default=None, description="Contract code (expiry)")
    direction: Direction = Field(..., description="Trade direction (Long/Short)")
    entry_price: float = Field(..., description="Entry price")
    exit_price: float = Field(..., description="Exit price")
    quantity: float = Field(..., gt=0, description="Traded quantity")
    pnl: float = Field(..., description="Realized P&L")
    fees: Optional[float] = Field(default=None, ge=0, description="Fees paid")
    notes: Optional[str] = Field(default=None, description="User notes")

    model_config = {"frozen": True}

    @property
    def trade_date(self) -> date:
        """Calendar day the trade belongs to."""
        return self.timestamp.date()

    def price_pnl(self) -> float:
        """P&L implied by the prices and quantity, without a multiplier."""
        return price_pnl(self.direction, self.entry_price, self.exit_price, self.quantity)


def price_pnl(direction: Direction, entry_price: float, exit_price: float, quantity: float) -> float:
    """Price difference in the trade's favour times quantity."""
    if direction == "Long":
        return (exit_price - entry_price) * quantity
    return (entry_price - exit_price) * quantity
