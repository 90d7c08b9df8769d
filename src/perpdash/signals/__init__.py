"""Signal analysis: EMA computation and crossover predicates."""

from perpdash.signals.ema import (
    DEFAULT_EMA_PERIOD,
    compute_ema,
    compute_sma_seeded_ema,
    crossed_above,
    crossed_below,
)

__all__ = [
    "DEFAULT_EMA_PERIOD",
    "compute_ema",
    "compute_sma_seeded_ema",
    "crossed_above",
    "crossed_below",
]
