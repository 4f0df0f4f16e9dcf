"""PropJournal - trading journal and consistency tools for prop trading accounts."""

__version__ = "0.1.0"
