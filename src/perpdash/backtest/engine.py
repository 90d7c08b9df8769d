"""EMA crossover backtest engine.

Walks a daily candle history once with a flat/long state machine:

- Entry: close crosses above its EMA on bar i. Fill at bar i+1's open
  (one-bar execution lag). The signal bar is not checked for exit.
- Exit, in precedence order while long:
    1. Stop-loss (only when stop_loss_pct > 0): bar low at or below
       entry * (1 - stop). Fills at exactly the stop level.
    2. EMA: close crosses below its EMA. Fills at bar i+1's open.

Only bars 1..N-2 are signal bars; the last bar is reserved as the
look-ahead fill bar. A position still open when the loop ends is NOT
closed or marked to market, so it never shows up in trades or equity.

All numbers are floats with no tolerance band on comparisons. The fill
conventions above are part of the contract: changing them changes every
backtest output.
"""

from collections.abc import Sequence

from perpdash.backtest.models import (
    EquityPoint,
    ExitReason,
    StrategyConfig,
    StrategyRun,
    Trade,
)
from perpdash.data.models import DailyCandle
from perpdash.exceptions import InvalidInputError
from perpdash.logging import get_logger
from perpdash.signals.ema import (
    DEFAULT_EMA_PERIOD,
    compute_ema,
    crossed_above,
    crossed_below,
)

logger = get_logger(__name__)


class BacktestEngine:
    """Simulates one StrategyConfig over a candle history.

    The engine holds no state between runs; ``run()`` can be called any
    number of times, concurrently, on different candle sequences.

    Args:
        config: Leverage and stop-loss to simulate.
        ema_period: EMA smoothing period for the crossover signal.
    """

    def __init__(
        self,
        config: StrategyConfig,
        ema_period: int = DEFAULT_EMA_PERIOD,
    ) -> None:
        self._config = config
        self._ema_period = ema_period

    @property
    def config(self) -> StrategyConfig:
        return self._config

    def run(
        self,
        candles: Sequence[DailyCandle],
        ema: Sequence[float] | None = None,
    ) -> StrategyRun:
        """Replay the candles and return the resulting StrategyRun.

        Args:
            candles: Daily candles, ascending by timestamp, no duplicates.
            ema: Precomputed EMA of the candle closes. Computed here when
                omitted; must be the same length as ``candles`` otherwise.

        Returns:
            StrategyRun with the closed trades and the equity curve.

        Raises:
            InvalidInputError: If ``candles`` is empty or ``ema`` does not
                line up with it.
        """
        if not candles:
            raise InvalidInputError("no candles")

        if ema is None:
            ema = compute_ema([c.close for c in candles], self._ema_period)
        elif len(ema) != len(candles):
            raise InvalidInputError(
                f"ema length {len(ema)} does not match {len(candles)} candles"
            )

        leverage = self._config.leverage
        stop_pct = self._config.stop_loss_pct

        equity = 1.0
        in_position = False
        entry_price = 0.0
        trades: list[Trade] = []
        equity_curve = [EquityPoint(timestamp_ms=candles[0].timestamp_ms, equity=1.0)]

        for i in range(1, len(candles) - 1):
            prev = candles[i - 1]
            bar = candles[i]
            next_open = candles[i + 1].open

            if not in_position:
                if crossed_above(prev.close, ema[i - 1], bar.close, ema[i]):
                    in_position = True
                    entry_price = next_open
                continue

            stop_price = entry_price * (1 - stop_pct)
            hit_stop = stop_pct > 0 and bar.low <= stop_price
            if hit_stop:
                exit_price = stop_price
                reason = ExitReason.STOP
            elif crossed_below(prev.close, ema[i - 1], bar.close, ema[i]):
                exit_price = next_open
                reason = ExitReason.EMA
            else:
                continue

            price_return = (exit_price - entry_price) / entry_price
            equity_return = price_return * leverage
            equity *= 1 + equity_return

            trades.append(
                Trade(
                    entry_ts=prev.timestamp_ms,
                    exit_ts=bar.timestamp_ms,
                    entry_price=entry_price,
                    exit_price=exit_price,
                    leverage=leverage,
                    stop_loss_pct=stop_pct,
                    exit_reason=reason,
                    price_return_pct=price_return,
                    equity_return_pct=equity_return,
                )
            )
            equity_curve.append(EquityPoint(timestamp_ms=bar.timestamp_ms, equity=equity))
            in_position = False

        if in_position:
            logger.debug(
                "open_position_unrealized",
                run_id=self._config.run_id,
                entry_price=entry_price,
                last_ms=candles[-1].timestamp_ms,
            )

        return StrategyRun(
            id=self._config.run_id,
            trades=tuple(trades),
            equity_curve=tuple(equity_curve),
        )


def backtest(
    candles: Sequence[DailyCandle],
    leverage: int,
    stop_loss_pct: float = 0.0,
    ema_period: int = DEFAULT_EMA_PERIOD,
) -> StrategyRun:
    """Run a single backtest without building an engine by hand."""
    config = StrategyConfig(leverage=leverage, stop_loss_pct=stop_loss_pct)
    return BacktestEngine(config, ema_period=ema_period).run(candles)
