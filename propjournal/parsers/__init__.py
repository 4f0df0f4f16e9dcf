"""CSV import parsers.

The import format is decided once, up front, by :func:`detect_format`;
:func:`parse` then hands the text to the matching parser.
"""

from typing import Optional

from propjournal.errors import ParseError
from propjournal.models import ImportFormat, ParseResult
from propjournal.parsers.broker import is_broker_export, parse_broker_csv
from propjournal.parsers.generic import CSVParseOptions, parse_standard_csv


def detect_format(text: str) -> ImportFormat:
    """Detect the import format from the header row."""
    if is_broker_export(text):
        return ImportFormat.BROKER_EXPORT
    return ImportFormat.STANDARD


def parse(
    text: str,
    fmt: Optional[ImportFormat] = None,
    options: Optional[CSVParseOptions] = None,
) -> ParseResult:
    """Parse CSV text into daily journal entries.

    Args:
        text: CSV content.
        fmt: Format to use; detected from the header when None.
        options: Column mapping for the standard format.

    Returns:
        ParseResult tagged with the format that was used.

    Raises:
        ParseError: If the input is empty, or a broker export was requested
            but the header does not match.
    """
    if not text or not text.strip():
        raise ParseError("No CSV content to import")

    if fmt is None:
        fmt = detect_format(text)

    if fmt == ImportFormat.BROKER_EXPORT:
        if not is_broker_export(text):
            raise ParseError("Header does not match the broker order export format")
        return parse_broker_csv(text)
    return parse_standard_csv(text, options)


__all__ = [
    "CSVParseOptions",
    "ImportFormat",
    "ParseResult",
    "detect_format",
    "parse",
    "parse_broker_csv",
    "parse_standard_csv",
]
