"""Exponential moving average and crossover detection on closing prices.

Plain float arithmetic: the backtest's crossover comparisons run on
IEEE-754 doubles with no tolerance band, so a close exactly equal to its
EMA never counts as a cross.
"""

from collections.abc import Sequence

from perpdash.exceptions import InvalidInputError

DEFAULT_EMA_PERIOD = 5


def _check_period(period: int) -> None:
    if period < 1:
        raise InvalidInputError(f"EMA period must be at least 1, got {period}")


def compute_ema(values: Sequence[float], period: int = DEFAULT_EMA_PERIOD) -> list[float]:
    """Compute an EMA aligned 1:1 with ``values``.

    Uses the standard recursive formula:
        k = 2 / (period + 1)
        EMA_0 = value_0
        EMA_t = value_t * k + EMA_{t-1} * (1 - k)

    The first EMA equals the first raw close rather than an SMA warm-up, so
    the first ``period`` entries are less accurate. Inputs shorter than
    ``period`` are fine.

    Args:
        values: Closing prices, oldest first.
        period: Smoothing period.

    Returns:
        List of EMA values, same length as input.

    Raises:
        InvalidInputError: If ``values`` is empty or ``period`` is below 1.
    """
    if not values:
        raise InvalidInputError("empty input")
    _check_period(period)

    k = 2 / (period + 1)
    out = [float(values[0])]
    for v in values[1:]:
        out.append(v * k + out[-1] * (1 - k))
    return out


def compute_sma_seeded_ema(values: Sequence[float], period: int) -> list[float]:
    """Compute an EMA seeded with the SMA of the first ``period`` values.

    Output is NOT aligned with the input: element 0 corresponds to input
    index ``period - 1``, so the result has ``len(values) - period + 1``
    entries.

    Not used by the backtest, whose crossover signal needs an EMA value on
    every bar; kept for callers that want a warmed-up series.

    Returns:
        EMA values, or an empty list when there are fewer than ``period``
        inputs.

    Raises:
        InvalidInputError: If ``period`` is below 1.
    """
    _check_period(period)
    if len(values) < period:
        return []

    k = 2 / (period + 1)
    emas = [sum(values[:period]) / period]
    for v in values[period:]:
        emas.append(v * k + emas[-1] * (1 - k))
    return emas


def crossed_above(prev_close: float, prev_ema: float, close: float, ema: float) -> bool:
    """True when price moves from at-or-below its EMA to strictly above it."""
    return prev_close <= prev_ema and close > ema


def crossed_below(prev_close: float, prev_ema: float, close: float, ema: float) -> bool:
    """True when price moves from at-or-above its EMA to strictly below it."""
    return prev_close >= prev_ema and close < ema
