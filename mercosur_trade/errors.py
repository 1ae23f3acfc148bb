"""
Error kinds raised by the trade data services.

Absence of a relation is NOT an error - lookups return a normal envelope
with found=False. These exceptions cover requests that cannot be answered
at all.
"""


class TradeDataError(Exception):
    """Base class for trade data service errors."""


class InvalidInputError(TradeDataError, ValueError):
    """A structurally invalid request (empty required list, malformed code, bad FTS syntax)."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.message = message
        self.field = field


class StoreUnavailableError(TradeDataError):
    """The relation store could not be opened."""
