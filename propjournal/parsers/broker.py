"""Parser for broker order-execution exports (Tradovate ``Orders`` CSV).

Each row is one order. Filled orders are matched into round-trip trades
per contract with FIFO position matching:

- fills are walked in fill-time order;
- a fill on the same side as the open position adds a new open lot;
- a fill on the opposite side closes open lots oldest-first, one trade per
  matched lot, and any remainder opens a position on the new side;
- lots still open at the end of the file produce no trade.
"""

import logging
from collections import defaultdict, deque
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from propjournal.journal.aggregator import group_trades_by_day
from propjournal.models import ImportFormat, ParseResult, TradeEntry
from propjournal.models.trade import price_pnl
from propjournal.parsers.common import make_trade_id, parse_float, read_rows
from propjournal.parsers.contracts import get_point_value

logger = logging.getLogger(__name__)

BROKER_HEADER_SIGNATURE = "orderId,Account,Order ID,B/S,Contract"

FILL_TIME_FORMAT = "%m/%d/%Y %H:%M:%S"

# Column positions in the export.
COL_ORDER_ID = 0
COL_ACCOUNT = 1
COL_SIDE = 3
COL_CONTRACT = 4
COL_PRODUCT = 5
COL_PRODUCT_DESC = 6
COL_AVG_PRICE = 7
COL_FILLED_QTY = 8
COL_FILL_TIME = 9
COL_STATUS = 11
MIN_COLUMNS = COL_STATUS + 1


@dataclass(frozen=True)
class BrokerFill:
    """A filled order from the export."""

    order_id: str
    account: str
    side: str
    contract: str
    product: str
    product_desc: str
    avg_price: float
    filled_qty: float
    fill_time: datetime


@dataclass
class _OpenLot:
    fill: BrokerFill
    remaining: float


def is_broker_export(text: str) -> bool:
    """Check whether the first non-blank line carries the export header."""
    for line in text.lstrip("\ufeff").splitlines():
        if line.strip():
            return line.strip().startswith(BROKER_HEADER_SIGNATURE)
    return False


def _side(raw: str) -> Optional[str]:
    value = raw.strip().lower()
    if "buy" in value:
        return "Buy"
    if "sell" in value:
        return "Sell"
    return None


def _parse_fill(row: list[str]) -> tuple[Optional[BrokerFill], bool]:
    """Parse one export row.

    Returns:
        ``(fill, malformed)``. ``fill`` is None for rows that are not usable
        fills; ``malformed`` tells apart broken rows from unfilled orders.
    """
    if len(row) < MIN_COLUMNS:
        return None, True

    status = row[COL_STATUS]
    avg_price = parse_float(row[COL_AVG_PRICE])
    filled_qty = parse_float(row[COL_FILLED_QTY])
    if "Filled" not in status:
        return None, False
    if avg_price is None or filled_qty is None:
        return None, True
    if not avg_price or not filled_qty:
        return None, False
    if avg_price < 0 or filled_qty < 0:
        return None, False

    side = _side(row[COL_SIDE])
    contract = row[COL_CONTRACT]
    try:
        fill_time = datetime.strptime(row[COL_FILL_TIME], FILL_TIME_FORMAT)
    except ValueError:
        return None, True
    if side is None or not contract:
        return None, True

    return BrokerFill(
        order_id=row[COL_ORDER_ID],
        account=row[COL_ACCOUNT],
        side=side,
        contract=contract,
        product=row[COL_PRODUCT],
        product_desc=row[COL_PRODUCT_DESC],
        avg_price=avg_price,
        filled_qty=filled_qty,
        fill_time=fill_time,
    ), False


def _make_trade(
    opening: BrokerFill, closing: BrokerFill, quantity: float, sequence: int
) -> TradeEntry:
    direction = "Long" if opening.side == "Buy" else "Short"
    point_value = get_point_value(opening.product, opening.contract)
    points = price_pnl(direction, opening.avg_price, closing.avg_price, 1)
    pnl = round(points * point_value * quantity, 2)
    desc = f"{opening.product_desc} " if opening.product_desc else ""

    return TradeEntry(
        id=make_trade_id(
            "broker", opening.contract, opening.order_id, closing.order_id, sequence
        ),
        timestamp=opening.fill_time,
        symbol=opening.product or opening.contract,
        contract=opening.contract,
        direction=direction,
        entry_price=opening.avg_price,
        exit_price=closing.avg_price,
        quantity=quantity,
        pnl=pnl,
        notes=f"{desc}{direction} - Price diff: {abs(points):.2f} points",
    )


def pair_fills(fills: list[BrokerFill]) -> list[TradeEntry]:
    """Match fills of a single contract into round-trip trades (FIFO).

    Args:
        fills: Fills for one contract, in any order.

    Returns:
        Closed trades in the order they were closed.
    """
    ordered = sorted(fills, key=lambda fill: fill.fill_time)
    open_lots: deque[_OpenLot] = deque()
    trades = []
    sequence = 0

    for fill in ordered:
        remaining = fill.filled_qty
        while remaining > 0 and open_lots and open_lots[0].fill.side != fill.side:
            lot = open_lots[0]
            matched = min(lot.remaining, remaining)
            trades.append(_make_trade(lot.fill, fill, matched, sequence))
            sequence += 1
            lot.remaining -= matched
            remaining -= matched
            if lot.remaining <= 0:
                open_lots.popleft()
        if remaining > 0:
            open_lots.append(_OpenLot(fill=fill, remaining=remaining))

    if open_lots:
        logger.debug(
            "%s: %s open lot(s) left unmatched",
            ordered[0].contract,
            len(open_lots),
        )
    return trades


def parse_broker_csv(text: str) -> ParseResult:
    """Parse a broker order export into daily journal entries.

    Args:
        text: CSV content including the header row.

    Returns:
        ParseResult with entries ascending by date.
    """
    rows = read_rows(text.lstrip("\ufeff"))[1:]

    by_contract: dict[str, list[BrokerFill]] = defaultdict(list)
    skipped = 0
    for row_no, row in enumerate(rows, start=2):
        fill, malformed = _parse_fill(row)
        if malformed:
            skipped += 1
            logger.debug("Skipping malformed order row %d", row_no)
        if fill is not None:
            by_contract[fill.contract].append(fill)

    trades = []
    for contract_fills in by_contract.values():
        trades.extend(pair_fills(contract_fills))

    entries = group_trades_by_day(trades)
    logger.info(
        "Paired %d trades across %d contracts (%d rows skipped)",
        len(trades),
        len(by_contract),
        skipped,
    )
    return ParseResult(format=ImportFormat.BROKER_EXPORT, entries=entries, skipped_rows=skipped)
