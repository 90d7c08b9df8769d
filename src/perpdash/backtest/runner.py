"""High-level entry point for running the strategy set.

run_strategies() computes the EMA once and simulates every configuration
against the same read-only candle history. Short histories are not an
error: each run simply comes back with zero trades.
"""

import time
from collections.abc import Sequence

from perpdash.backtest.engine import BacktestEngine
from perpdash.backtest.models import StrategyConfig, StrategyRun
from perpdash.backtest.presets import DEFAULT_STRATEGIES, check_unique_run_ids
from perpdash.data.models import DailyCandle
from perpdash.exceptions import InvalidInputError
from perpdash.logging import get_logger
from perpdash.signals.ema import DEFAULT_EMA_PERIOD, compute_ema

logger = get_logger(__name__)


def run_strategies(
    candles: Sequence[DailyCandle],
    strategies: Sequence[StrategyConfig] = DEFAULT_STRATEGIES,
    ema_period: int = DEFAULT_EMA_PERIOD,
) -> list[StrategyRun]:
    """Simulate each strategy over the same candle history.

    Args:
        candles: Daily candles, ascending by timestamp, no duplicates.
        strategies: Configurations to simulate, in output order.
        ema_period: EMA smoothing period shared by every run.

    Returns:
        One StrategyRun per config, in the same order as ``strategies``.

    Raises:
        InvalidInputError: If ``candles`` is empty or two strategies share
            a run id.
    """
    if not candles:
        raise InvalidInputError("no candles")
    check_unique_run_ids(strategies)

    start_time = time.monotonic()
    ema = compute_ema([c.close for c in candles], ema_period)

    runs = [
        BacktestEngine(config, ema_period=ema_period).run(candles, ema=ema)
        for config in strategies
    ]

    logger.info(
        "run_strategies_complete",
        candles=len(candles),
        ema_period=ema_period,
        runs={run.id: len(run.trades) for run in runs},
        final_equity={run.id: round(run.final_equity, 4) for run in runs},
        elapsed_seconds=round(time.monotonic() - start_time, 3),
    )

    return runs
