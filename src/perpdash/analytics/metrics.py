"""Performance analytics for backtest runs.

Pure functions over StrategyRun trades and equity curves: max_drawdown,
win_rate, and a per-run summary for the dashboard.
"""

from collections.abc import Sequence

from perpdash.backtest.models import EquityPoint, ExitReason, StrategyRun, Trade


def max_drawdown(equity_curve: Sequence[EquityPoint]) -> float | None:
    """Compute max peak-to-trough decline of the equity multiple.

    Args:
        equity_curve: Equity points in chronological order.

    Returns:
        Max drawdown as a positive fraction of the peak (0.25 = 25%), or
        None for an empty curve.
    """
    if not equity_curve:
        return None

    peak = equity_curve[0].equity
    max_dd = 0.0

    for point in equity_curve:
        if point.equity > peak:
            peak = point.equity
        if peak > 0:
            dd = (peak - point.equity) / peak
            if dd > max_dd:
                max_dd = dd

    return max_dd


def win_rate(trades: Sequence[Trade]) -> float | None:
    """Fraction of trades with a positive equity return, rounded to 3 places.

    Returns:
        Win rate, or None if there are no trades.
    """
    if not trades:
        return None

    wins = sum(1 for t in trades if t.is_win)
    return round(wins / len(trades), 3)


def summarize_run(run: StrategyRun) -> dict:
    """Aggregate statistics for one run, JSON-ready."""
    stop_exits = sum(1 for t in run.trades if t.exit_reason is ExitReason.STOP)
    return {
        "id": run.id,
        "total_trades": len(run.trades),
        "winning_trades": sum(1 for t in run.trades if t.is_win),
        "stop_exits": stop_exits,
        "ema_exits": len(run.trades) - stop_exits,
        "final_equity": run.final_equity,
        "total_return_pct": run.final_equity - 1.0,
        "max_drawdown": max_drawdown(run.equity_curve),
        "win_rate": win_rate(run.trades),
    }
