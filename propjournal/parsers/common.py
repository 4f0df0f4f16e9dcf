"""Helpers shared by the CSV parsers."""

import csv
import io
import math
import uuid
from datetime import datetime, timezone
from typing import Optional

# Fixed namespace so the same row always yields the same trade id.
TRADE_ID_NAMESPACE = uuid.UUID("6f1c2b9e-3d4a-5b8c-9e7f-0a1b2c3d4e5f")

_DATETIME_FORMATS = [
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
    "%m/%d/%y %H:%M:%S",
    "%m/%d/%y",
    "%Y/%m/%d",
]


def parse_datetime(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 or US-style date/time string.

    Timezone-aware values are converted to naive UTC.

    Returns:
        The parsed datetime, or None if no known format matches.
    """
    value = (value or "").strip()
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        parsed = None
    if parsed is None:
        for fmt in _DATETIME_FORMATS:
            try:
                parsed = datetime.strptime(value, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_float(value: Optional[str]) -> Optional[float]:
    """Parse a numeric cell, returning None for blank or non-numeric values."""
    if value is None:
        return None
    value = value.strip().replace("$", "").replace(",", "")
    if not value:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def read_rows(text: str) -> list[list[str]]:
    """Split CSV text into stripped rows, dropping blank lines."""
    reader = csv.reader(io.StringIO(text))
    return [
        [cell.strip() for cell in row]
        for row in reader
        if row and any(cell.strip() for cell in row)
    ]


def make_trade_id(*parts: object) -> str:
    """Build a deterministic trade id from identifying parts."""
    key = "|".join(str(part) for part in parts)
    return str(uuid.uuid5(TRADE_ID_NAMESPACE, key))
