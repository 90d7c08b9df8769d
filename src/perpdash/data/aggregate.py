"""Fold daily candles into synthetic 5-day bars."""

from perpdash.data.models import DailyCandle

FIVE_DAY_BLOCK = 5


def aggregate_to_five_day_candles(candles: list[DailyCandle]) -> list[DailyCandle]:
    """Aggregate daily candles into consecutive 5-day bars.

    Input is sorted by timestamp first. Each complete block of five dailies
    becomes one bar: first open, highest high, lowest low, last close, and
    the timestamp of the last day in the block. A trailing partial block is
    dropped.

    Args:
        candles: Daily candles in any order.

    Returns:
        5-day bars, oldest first. Empty list when fewer than five dailies.
    """
    if len(candles) < FIVE_DAY_BLOCK:
        return []

    ordered = sorted(candles, key=lambda c: c.timestamp_ms)
    bars: list[DailyCandle] = []

    for i in range(0, len(ordered) - FIVE_DAY_BLOCK + 1, FIVE_DAY_BLOCK):
        chunk = ordered[i : i + FIVE_DAY_BLOCK]
        bars.append(
            DailyCandle(
                timestamp_ms=chunk[-1].timestamp_ms,
                open=chunk[0].open,
                high=max(c.high for c in chunk),
                low=min(c.low for c in chunk),
                close=chunk[-1].close,
            )
        )

    return bars
