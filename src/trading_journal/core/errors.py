"""Custom exception hierarchy for the trading journal.

The analytics engine itself never raises: unknown values propagate as
``None`` and aggregates fall back to zero.  These exceptions belong to the
outer boundary (configuration, trade file loading, CLI).
"""


class JournalError(Exception):
    """Base exception for all trading journal errors."""


# --- Configuration ---
class ConfigError(JournalError):
    """Invalid or missing configuration."""


# --- Data ---
class DataError(JournalError):
    """Trade data ingestion error."""


class TradeLoadError(DataError):
    """A trade file could not be read or a row could not be normalised."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot load trades from {source}: {reason}")
