"""Backtest engine package.

Simulates a long-only EMA crossover strategy over daily candles at
several leverage / stop-loss settings and packages each result as a
StrategyRun for the dashboard.
"""

from perpdash.backtest.engine import BacktestEngine, backtest
from perpdash.backtest.models import (
    EquityPoint,
    ExitReason,
    StrategyConfig,
    StrategyRun,
    Trade,
)
from perpdash.backtest.presets import (
    DEFAULT_STRATEGIES,
    STRATEGY_LABELS,
    strategies_from_settings,
)
from perpdash.backtest.runner import run_strategies

__all__ = [
    "BacktestEngine",
    "DEFAULT_STRATEGIES",
    "EquityPoint",
    "ExitReason",
    "STRATEGY_LABELS",
    "StrategyConfig",
    "StrategyRun",
    "Trade",
    "backtest",
    "run_strategies",
    "strategies_from_settings",
]
