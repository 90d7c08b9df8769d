"""Strategy configurations for the dashboard's three equity curves.

- BASE_1x: unlevered EMA crossover, no stop-loss
- LEV3_SL63: 3x leverage with a 6.3% stop below entry
- LEV5_SL63: 5x leverage with the same 6.3% stop

Override through BacktestSettings (BACKTEST_LEVERAGES /
BACKTEST_STOP_LOSS_PCTS) rather than editing these values.
"""

from collections.abc import Iterable

from perpdash.backtest.models import StrategyConfig
from perpdash.config import BacktestSettings
from perpdash.exceptions import InvalidInputError

DEFAULT_STRATEGIES: tuple[StrategyConfig, ...] = (
    StrategyConfig(leverage=1, stop_loss_pct=0.0),
    StrategyConfig(leverage=3, stop_loss_pct=0.063),
    StrategyConfig(leverage=5, stop_loss_pct=0.063),
)

#: Chart series label per run id.
STRATEGY_LABELS: dict[str, str] = {
    "BASE_1x": "Base Strategy (1x)",
    "LEV3_SL63": "Leveraged 3x + Stop Loss",
    "LEV5_SL63": "Leveraged 5x + Stop Loss",
}


def strategy_label(run_id: str) -> str:
    """Human-readable series label, falling back to the run id."""
    return STRATEGY_LABELS.get(run_id, run_id)


def check_unique_run_ids(strategies: Iterable[StrategyConfig]) -> None:
    """Raise InvalidInputError if two strategies share a run id.

    Run ids key the chart series and summaries, so a repeated
    (leverage, stop) pair would shadow the other run.
    """
    seen: set[str] = set()
    for config in strategies:
        if config.run_id in seen:
            raise InvalidInputError(f"duplicate strategy: {config.run_id}")
        seen.add(config.run_id)


def strategies_from_settings(settings: BacktestSettings) -> list[StrategyConfig]:
    """Pair configured leverages with stop-loss percentages.

    Raises:
        InvalidInputError: If the two lists differ in length, any pair is
            not a valid StrategyConfig, or two pairs share a run id.
    """
    if len(settings.leverages) != len(settings.stop_loss_pcts):
        raise InvalidInputError(
            f"{len(settings.leverages)} leverages but "
            f"{len(settings.stop_loss_pcts)} stop-loss values"
        )
    strategies = [
        StrategyConfig(leverage=lev, stop_loss_pct=stop)
        for lev, stop in zip(settings.leverages, settings.stop_loss_pcts)
    ]
    check_unique_run_ids(strategies)
    return strategies
