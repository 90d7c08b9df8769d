"""Custom exceptions for the perpdash backtester.

Kept in one module so the data, signal and backtest layers can share
them without circular imports.
"""


class PerpDashError(Exception):
    """Base exception for all perpdash errors."""


class InvalidInputError(PerpDashError):
    """Raised when the backtest core is handed input it cannot work with.

    Covers an empty candle sequence, an empty EMA input, a strategy config
    outside its valid range, and an EMA series that does not line up with
    its candles.
    """


class MarketDataError(PerpDashError):
    """Raised when the candle fetcher cannot produce a price history."""
