"""Transaction and PerformanceSummary data models."""

from datetime import date as date_type
from typing import Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

TransactionType = Literal["evaluationFee", "activationFee", "payout"]


class Transaction(BaseModel):
    """A fee paid for, or payout received from, a prop account."""

    id: str = Field(default_factory=lambda: str(uuid4()), description="Transaction identifier")
    account_id: str = Field(..., min_length=1, description="Owning account")
    type: TransactionType = Field(..., description="Transaction type")
    amount: float = Field(..., ge=0, description="Amount in currency units")
    date: date_type = Field(..., description="Transaction date")
    description: Optional[str] = Field(default=None, description="Free-text description")

    model_config = {"frozen": True}


class PerformanceSummary(BaseModel):
    """Payout/fee totals and return on fees."""

    total_payouts: float = Field(..., ge=0, description="Sum of payouts")
    total_fees: float = Field(..., ge=0, description="Sum of evaluation and activation fees")
    net_profit: float = Field(..., description="Payouts minus fees")
    roi: Optional[float] = Field(default=None, description="Net profit as % of fees, None without fees")

    model_config = {"frozen": True}
