"""Data models for daily OHLC candle history.

Prices are floats: the backtest compares and compounds them as IEEE-754
doubles, and its outputs must match bar-for-bar across runs.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class DailyCandle:
    """A single trading day's price bar.

    ``low <= open, close <= high`` is expected but not enforced; malformed
    bars simply produce odd signals downstream.
    """

    timestamp_ms: int
    open: float
    high: float
    low: float
    close: float

    @staticmethod
    def from_ohlcv(row: Sequence[Any]) -> DailyCandle:
        """Build a candle from a ccxt / Binance kline row.

        Rows look like ``[ts, open, high, low, close, volume, ...]``. Binance
        returns prices as strings, so every price is coerced to float.
        """
        return DailyCandle(
            timestamp_ms=int(row[0]),
            open=float(row[1]),
            high=float(row[2]),
            low=float(row[3]),
            close=float(row[4]),
        )

    @staticmethod
    def from_dict(data: dict[str, Any]) -> DailyCandle:
        """Build a candle from a JSON object.

        Accepts either ``timestamp`` (the dashboard wire key) or
        ``timestamp_ms``.
        """
        ts = data["timestamp_ms"] if "timestamp_ms" in data else data["timestamp"]
        return DailyCandle(
            timestamp_ms=int(ts),
            open=float(data["open"]),
            high=float(data["high"]),
            low=float(data["low"]),
            close=float(data["close"]),
        )

    def to_dict(self) -> dict:
        """Serialize to the dashboard wire shape."""
        return {
            "timestamp": self.timestamp_ms,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
        }
