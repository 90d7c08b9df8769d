"""Data models for the EMA crossover backtest.

Defines the strategy configuration, per-trade records, equity curve points
and the per-configuration run result. Every model is frozen: a run is
built once by the engine and is read-only for charting and the API.

``to_dict()`` methods emit the dashboard's camelCase wire shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from perpdash.exceptions import InvalidInputError


class ExitReason(str, Enum):
    """Which exit condition closed a trade."""

    EMA = "ema"
    STOP = "stop"


@dataclass(frozen=True)
class StrategyConfig:
    """Leverage and stop-loss for one simulated strategy.

    Attributes:
        leverage: Multiplier applied to each trade's price return.
        stop_loss_pct: Stop distance below entry as a fraction in [0, 1).
            0 disables the stop-loss.
    """

    leverage: int
    stop_loss_pct: float = 0.0

    def __post_init__(self) -> None:
        if self.leverage <= 0:
            raise InvalidInputError(f"leverage must be positive, got {self.leverage}")
        if not 0 <= self.stop_loss_pct < 1:
            raise InvalidInputError(
                f"stop_loss_pct must be in [0, 1), got {self.stop_loss_pct}"
            )

    @property
    def run_id(self) -> str:
        """Identifier for runs of this config, e.g. BASE_1x or LEV3_SL63."""
        if self.stop_loss_pct > 0:
            return f"LEV{self.leverage}_SL{round(self.stop_loss_pct * 1000)}"
        if self.leverage == 1:
            return "BASE_1x"
        return f"LEV{self.leverage}"

    def to_dict(self) -> dict:
        return {
            "id": self.run_id,
            "leverage": self.leverage,
            "stopPct": self.stop_loss_pct,
        }


@dataclass(frozen=True)
class Trade:
    """One completed long round trip.

    Attributes:
        entry_ts: Timestamp of the bar before the exit bar.
        exit_ts: Timestamp of the bar the exit fired on.
        entry_price: Open of the bar after the entry signal.
        exit_price: Stop level for stop exits, next-bar open for EMA exits.
        leverage: Leverage of the run that produced the trade.
        stop_loss_pct: Stop distance of the run (0 if none).
        exit_reason: Which exit condition fired.
        price_return_pct: (exit_price - entry_price) / entry_price.
        equity_return_pct: price_return_pct * leverage.
    """

    entry_ts: int
    exit_ts: int
    entry_price: float
    exit_price: float
    leverage: int
    stop_loss_pct: float
    exit_reason: ExitReason
    price_return_pct: float
    equity_return_pct: float

    @property
    def is_win(self) -> bool:
        return self.equity_return_pct > 0

    def to_dict(self) -> dict:
        """Serialize to the dashboard wire shape."""
        return {
            "entryTs": self.entry_ts,
            "exitTs": self.exit_ts,
            "entryPx": self.entry_price,
            "exitPx": self.exit_price,
            "leverage": self.leverage,
            "stopPct": self.stop_loss_pct,
            "reason": self.exit_reason.value,
            "pnlPct": self.price_return_pct,
            "pnlOnEquity": self.equity_return_pct,
        }


@dataclass(frozen=True)
class EquityPoint:
    """A single point on the equity curve.

    Attributes:
        timestamp_ms: Timestamp in milliseconds.
        equity: Equity multiple (starts at 1.0).
    """

    timestamp_ms: int
    equity: float

    def to_dict(self) -> dict:
        return {"ts": self.timestamp_ms, "eq": self.equity}


@dataclass(frozen=True)
class StrategyRun:
    """Result of simulating one StrategyConfig over a candle history.

    The equity curve starts at (first candle timestamp, 1.0) and gains one
    point per closed trade, so it always has ``len(trades) + 1`` points.
    """

    id: str
    trades: tuple[Trade, ...]
    equity_curve: tuple[EquityPoint, ...]

    @property
    def final_equity(self) -> float:
        """Equity multiple after the last closed trade."""
        return self.equity_curve[-1].equity

    def to_dict(self) -> dict:
        """Serialize to the dashboard wire shape."""
        return {
            "id": self.id,
            "trades": [t.to_dict() for t in self.trades],
            "equityCurve": [p.to_dict() for p in self.equity_curve],
        }
