"""Exception types raised by PropJournal."""


class PropJournalError(Exception):
    """Base class for all PropJournal errors."""


class ParseError(PropJournalError, ValueError):
    """Raised when an import cannot be parsed as a whole."""


class CalculationError(PropJournalError, ValueError):
    """Raised when calculator inputs are invalid."""


class ConfigError(PropJournalError):
    """Raised when the configuration file cannot be read."""


class StoreError(PropJournalError):
    """Raised when the journal store cannot be read or written."""
