"""Merge per-run equity curves into one chart series.

Each run only has points where it closed a trade, so the runs' curves do
not share timestamps. The chart needs one row per timestamp with a value
for every run: missing values carry forward the run's last known equity.
"""

from collections.abc import Mapping, Sequence
from datetime import datetime, timezone

from perpdash.backtest.models import StrategyRun
from perpdash.backtest.presets import STRATEGY_LABELS


def _ms_to_date(ts_ms: int) -> str:
    return datetime.fromtimestamp(ts_ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d")


def merge_equity_curves(
    runs: Sequence[StrategyRun],
    initial_capital: float = 10000.0,
    labels: Mapping[str, str] = STRATEGY_LABELS,
) -> list[dict]:
    """Build a forward-filled dollar equity series across runs.

    Args:
        runs: Strategy runs to merge.
        initial_capital: Dollar value of an equity multiple of 1.0.
        labels: Series label per run id; unknown ids use the id itself.

    Returns:
        Rows sorted by timestamp, each ``{"ts", "date", <label>: dollars}``.
        Every series starts at ``initial_capital`` on the earliest
        timestamp. Empty list when no run has a curve point.
    """
    timestamps = sorted({p.timestamp_ms for run in runs for p in run.equity_curve})
    if not timestamps:
        return []

    series = [(labels.get(run.id, run.id), run) for run in runs]
    by_ts: dict[str, dict[int, float]] = {
        label: {p.timestamp_ms: p.equity * initial_capital for p in run.equity_curve}
        for label, run in series
    }

    last = {label: initial_capital for label, _ in series}
    rows: list[dict] = []
    for ts in timestamps:
        row: dict = {"ts": ts, "date": _ms_to_date(ts)}
        for label, _ in series:
            if ts in by_ts[label]:
                last[label] = by_ts[label][ts]
            row[label] = last[label]
        rows.append(row)

    return rows
