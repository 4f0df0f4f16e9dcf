"""Payout and fee performance for prop accounts."""

import logging
from typing import Iterable, Optional

from pydantic import ValidationError

from propjournal.models import PerformanceSummary, Transaction
from propjournal.parsers.common import parse_datetime, parse_float, read_rows

logger = logging.getLogger(__name__)

FEE_TYPES = ("evaluationFee", "activationFee")

_TYPE_ALIASES = {
    "evaluationfee": "evaluationFee",
    "evaluation": "evaluationFee",
    "activationfee": "activationFee",
    "activation": "activationFee",
    "payout": "payout",
}


def _transaction_type(raw: str) -> Optional[str]:
    key = raw.lower().replace(" ", "").replace("_", "")
    return _TYPE_ALIASES.get(key)


def parse_transactions(text: str) -> list[Transaction]:
    """Parse ``date,account,type,amount[,description]`` rows.

    A header row, rows with an unknown type and rows with an unparseable
    date or amount are skipped.
    """
    transactions = []
    for row in read_rows(text):
        if len(row) < 4:
            logger.debug("Skipping short transaction row: %s", row)
            continue
        parsed = parse_datetime(row[0])
        tx_type = _transaction_type(row[2])
        amount = parse_float(row[3])
        if parsed is None or tx_type is None or amount is None:
            logger.debug("Skipping transaction row: %s", row)
            continue
        try:
            transactions.append(Transaction(
                account_id=row[1],
                type=tx_type,
                amount=abs(amount),
                date=parsed.date(),
                description=row[4] if len(row) > 4 and row[4] else None,
            ))
        except ValidationError as e:
            logger.debug("Skipping invalid transaction row %s: %s", row, e)
    return transactions


def summarize_performance(
    transactions: Iterable[Transaction], account_id: Optional[str] = None
) -> PerformanceSummary:
    """Total payouts against fees paid, with ROI on fees.

    Args:
        transactions: Transactions to summarise.
        account_id: Restrict the summary to one account.

    Returns:
        PerformanceSummary; ``roi`` is None when no fees were paid.
    """
    if account_id is not None:
        transactions = [tx for tx in transactions if tx.account_id == account_id]

    total_payouts = 0.0
    total_fees = 0.0
    for tx in transactions:
        if tx.type == "payout":
            total_payouts += tx.amount
        elif tx.type in FEE_TYPES:
            total_fees += tx.amount

    net_profit = total_payouts - total_fees
    roi = net_profit / total_fees * 100 if total_fees > 0 else None

    return PerformanceSummary(
        total_payouts=total_payouts,
        total_fees=total_fees,
        net_profit=net_profit,
        roi=roi,
    )
