"""Candle history package: models, 5-day aggregation, and the ccxt fetcher."""

from perpdash.data.aggregate import aggregate_to_five_day_candles
from perpdash.data.fetcher import DailyCandleFetcher
from perpdash.data.models import DailyCandle

__all__ = [
    "DailyCandle",
    "DailyCandleFetcher",
    "aggregate_to_five_day_candles",
]
