"""Tests for run analytics: drawdown, win rate, summaries and chart merging."""

import pytest

from perpdash.analytics.chart import merge_equity_curves
from perpdash.analytics.metrics import max_drawdown, summarize_run, win_rate
from perpdash.backtest.models import EquityPoint, ExitReason, StrategyRun, Trade
from perpdash.backtest.runner import run_strategies

DAY_MS = 86_400_000
T0 = 1_704_067_200_000  # 2024-01-01 UTC


def _trade(equity_return: float, reason: ExitReason = ExitReason.EMA) -> Trade:
    return Trade(
        entry_ts=T0,
        exit_ts=T0 + DAY_MS,
        entry_price=100.0,
        exit_price=100.0 * (1 + equity_return),
        leverage=1,
        stop_loss_pct=0.0,
        exit_reason=reason,
        price_return_pct=equity_return,
        equity_return_pct=equity_return,
    )


def _curve(*values: float) -> tuple[EquityPoint, ...]:
    return tuple(EquityPoint(T0 + i * DAY_MS, v) for i, v in enumerate(values))


class TestMaxDrawdown:
    def test_empty_curve_returns_none(self) -> None:
        assert max_drawdown(()) is None

    def test_monotonic_curve_has_no_drawdown(self) -> None:
        assert max_drawdown(_curve(1.0, 1.1, 1.2)) == 0.0

    def test_peak_to_trough(self) -> None:
        # peak 2.0, trough 1.0 -> 50%
        assert max_drawdown(_curve(1.0, 2.0, 1.5, 1.0, 1.8)) == pytest.approx(0.5)

    def test_largest_of_several_drawdowns(self) -> None:
        assert max_drawdown(_curve(1.0, 1.2, 1.08, 1.5, 1.2)) == pytest.approx(0.2)


class TestWinRate:
    def test_no_trades_returns_none(self) -> None:
        assert win_rate([]) is None

    def test_rounds_to_three_places(self) -> None:
        trades = [_trade(0.1), _trade(-0.05), _trade(0.02)]
        assert win_rate(trades) == 0.667

    def test_zero_return_is_not_a_win(self) -> None:
        assert win_rate([_trade(0.0)]) == 0.0


class TestSummarizeRun:
    def test_summary_fields(self) -> None:
        run = StrategyRun(
            id="LEV3_SL63",
            trades=(_trade(0.2), _trade(-0.189, ExitReason.STOP)),
            equity_curve=_curve(1.0, 1.2, 1.2 * (1 - 0.189)),
        )
        summary = summarize_run(run)

        assert summary["id"] == "LEV3_SL63"
        assert summary["total_trades"] == 2
        assert summary["winning_trades"] == 1
        assert summary["stop_exits"] == 1
        assert summary["ema_exits"] == 1
        assert summary["final_equity"] == pytest.approx(0.9732)
        assert summary["total_return_pct"] == pytest.approx(-0.0268)
        assert summary["max_drawdown"] == pytest.approx(0.189)
        assert summary["win_rate"] == 0.5

    def test_empty_run(self) -> None:
        summary = summarize_run(StrategyRun(id="BASE_1x", trades=(), equity_curve=_curve(1.0)))
        assert summary["total_trades"] == 0
        assert summary["win_rate"] is None
        assert summary["max_drawdown"] == 0.0
        assert summary["total_return_pct"] == 0.0


class TestMergeEquityCurves:
    def test_empty_runs(self) -> None:
        assert merge_equity_curves([]) == []

    def test_forward_fills_missing_points(self) -> None:
        runs = [
            StrategyRun(id="BASE_1x", trades=(), equity_curve=_curve(1.0, 1.1)),
            StrategyRun(
                id="LEV3_SL63",
                trades=(),
                equity_curve=(EquityPoint(T0, 1.0), EquityPoint(T0 + 2 * DAY_MS, 0.9)),
            ),
        ]
        rows = merge_equity_curves(runs, initial_capital=1000.0)

        assert [r["ts"] for r in rows] == [T0, T0 + DAY_MS, T0 + 2 * DAY_MS]
        assert rows[0]["date"] == "2024-01-01"
        assert rows[0]["Base Strategy (1x)"] == 1000.0
        assert rows[0]["Leveraged 3x + Stop Loss"] == 1000.0
        assert rows[1]["Base Strategy (1x)"] == pytest.approx(1100.0)
        assert rows[1]["Leveraged 3x + Stop Loss"] == 1000.0
        assert rows[2]["Base Strategy (1x)"] == pytest.approx(1100.0)
        assert rows[2]["Leveraged 3x + Stop Loss"] == pytest.approx(900.0)

    def test_unknown_run_id_uses_id_as_label(self) -> None:
        rows = merge_equity_curves([StrategyRun(id="LEV2", trades=(), equity_curve=_curve(1.0))])
        assert rows == [{"ts": T0, "date": "2024-01-01", "LEV2": 10000.0}]

    def test_every_row_has_every_series(self, crossover_candles) -> None:
        rows = merge_equity_curves(run_strategies(crossover_candles))
        labels = {"Base Strategy (1x)", "Leveraged 3x + Stop Loss", "Leveraged 5x + Stop Loss"}
        for row in rows:
            assert labels <= set(row)
