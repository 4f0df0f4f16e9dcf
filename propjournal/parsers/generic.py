"""Parser for the standard column-mapped trade CSV.

Each data row holds one completed trade:

    Date,Symbol,Contract,Direction,EntryPrice,ExitPrice,Quantity,PnL,Fees,Notes

Column positions can be remapped through :class:`CSVParseOptions`.
"""

import logging
from collections import Counter
from typing import Optional

from pydantic import BaseModel, Field

from propjournal.journal.aggregator import group_trades_by_day
from propjournal.models import ImportFormat, ParseResult, TradeEntry
from propjournal.models.trade import price_pnl
from propjournal.parsers.common import make_trade_id, parse_datetime, parse_float, read_rows

logger = logging.getLogger(__name__)

MIN_COLUMNS = 8


class CSVParseOptions(BaseModel):
    """Column mapping for the standard CSV format (zero-based positions)."""

    has_header: bool = Field(default=True, description="Skip the first row")
    date_column: int = Field(default=0, ge=0)
    symbol_column: int = Field(default=1, ge=0)
    contract_column: Optional[int] = Field(default=2, ge=0)
    direction_column: int = Field(default=3, ge=0)
    entry_price_column: int = Field(default=4, ge=0)
    exit_price_column: int = Field(default=5, ge=0)
    quantity_column: int = Field(default=6, ge=0)
    pnl_column: Optional[int] = Field(default=7, ge=0)
    fees_column: Optional[int] = Field(default=8, ge=0)
    notes_column: Optional[int] = Field(default=9, ge=0)

    model_config = {"frozen": True}


def _cell(row: list[str], index: Optional[int]) -> str:
    if index is None or index >= len(row):
        return ""
    return row[index]


def normalize_direction(raw: str) -> str:
    """Map a direction cell to Long or Short.

    Anything containing "long" or equal to "buy" is Long, the rest Short.
    """
    value = raw.strip().lower()
    if "long" in value or value == "buy":
        return "Long"
    return "Short"


def _is_recognized_direction(raw: str) -> bool:
    value = raw.strip().lower()
    return "long" in value or "short" in value or value in ("buy", "sell")


def _parse_row(row: list[str], options: CSVParseOptions, row_id: str) -> Optional[TradeEntry]:
    """Build a trade from one row, or None if the row is malformed."""
    if len(row) < MIN_COLUMNS:
        return None

    timestamp = parse_datetime(_cell(row, options.date_column))
    if timestamp is None:
        return None

    entry_price = parse_float(_cell(row, options.entry_price_column))
    exit_price = parse_float(_cell(row, options.exit_price_column))
    quantity = parse_float(_cell(row, options.quantity_column))
    if entry_price is None or exit_price is None or quantity is None or quantity <= 0:
        return None

    symbol = _cell(row, options.symbol_column)
    if not symbol:
        return None

    raw_direction = _cell(row, options.direction_column)
    direction = normalize_direction(raw_direction)

    pnl = parse_float(_cell(row, options.pnl_column))
    if pnl is None:
        if not _is_recognized_direction(raw_direction):
            return None
        pnl = price_pnl(direction, entry_price, exit_price, quantity)

    fees = parse_float(_cell(row, options.fees_column))
    if fees is None or fees < 0:
        fees = 0.0

    return TradeEntry(
        id=row_id,
        timestamp=timestamp,
        symbol=symbol,
        contract=_cell(row, options.contract_column) or None,
        direction=direction,
        entry_price=entry_price,
        exit_price=exit_price,
        quantity=quantity,
        pnl=pnl,
        fees=fees,
        notes=_cell(row, options.notes_column) or None,
    )


def parse_standard_csv(text: str, options: Optional[CSVParseOptions] = None) -> ParseResult:
    """Parse standard-format CSV text into daily journal entries.

    Malformed rows are skipped and counted rather than raised.

    Args:
        text: CSV content.
        options: Column mapping; defaults to the standard layout.

    Returns:
        ParseResult with entries ascending by date.
    """
    options = options or CSVParseOptions()
    rows = read_rows(text)
    if options.has_header:
        rows = rows[1:]

    trades = []
    skipped = 0
    occurrences: Counter = Counter()

    for row_no, row in enumerate(rows, start=2 if options.has_header else 1):
        fingerprint = ",".join(row)
        occurrences[fingerprint] += 1
        row_id = make_trade_id("standard", fingerprint, occurrences[fingerprint])

        trade = _parse_row(row, options, row_id)
        if trade is None:
            skipped += 1
            logger.debug("Skipping malformed row %d: %r", row_no, fingerprint)
            continue
        trades.append(trade)

    entries = group_trades_by_day(trades)
    logger.info(
        "Parsed %d trades over %d days (%d rows skipped)", len(trades), len(entries), skipped
    )
    return ParseResult(format=ImportFormat.STANDARD, entries=entries, skipped_rows=skipped)
