"""Shared test fixtures for the perpdash backtester."""

from collections.abc import Callable

import pytest

from perpdash.config import AppSettings, BacktestSettings, DashboardSettings, MarketDataSettings
from perpdash.data.models import DailyCandle

DAY_MS = 86_400_000
T0 = 1_704_067_200_000  # 2024-01-01 00:00 UTC

#: (open, high, low, close) per day. With a 5-period EMA the close crosses
#: above its EMA on day 2 (fill at day 3 open = 115) and back below on
#: day 5 (fill at day 6 open = 125). Day 5's low of 89 also pierces a
#: 6.3% stop under 115.
CROSSOVER_BARS: list[tuple[float, float, float, float]] = [
    (100, 101, 99, 100),
    (100, 101, 99, 100),
    (100, 111, 99, 110),
    (115, 121, 114, 120),
    (125, 131, 124, 130),
    (128, 129, 89, 90),
    (125, 126, 79, 80),
    (80, 81, 79, 80),
]


def _build(bars: list[tuple[float, float, float, float]]) -> list[DailyCandle]:
    return [
        DailyCandle(timestamp_ms=T0 + i * DAY_MS, open=o, high=h, low=lo, close=c)
        for i, (o, h, lo, c) in enumerate(bars)
    ]


@pytest.fixture
def make_candles() -> Callable[[list[tuple[float, float, float, float]]], list[DailyCandle]]:
    """Factory turning (open, high, low, close) tuples into daily candles."""
    return _build


@pytest.fixture
def crossover_bars() -> list[tuple[float, float, float, float]]:
    """A mutable copy of CROSSOVER_BARS for tests that tweak single days."""
    return list(CROSSOVER_BARS)


@pytest.fixture
def crossover_candles() -> list[DailyCandle]:
    """Eight days with one up-cross and one down-cross of the 5-period EMA."""
    return _build(CROSSOVER_BARS)


@pytest.fixture
def flat_candles() -> list[DailyCandle]:
    """Five days closing at 100: the close never crosses its EMA."""
    return _build([(100, 100, 100, 100)] * 5)


@pytest.fixture
def app_settings() -> AppSettings:
    """AppSettings with defaults for the backtest and a small fetch page."""
    return AppSettings(
        log_level="DEBUG",
        market=MarketDataSettings(symbol="BTC/USDT", since_ms=T0, page_limit=3),
        backtest=BacktestSettings(),
        dashboard=DashboardSettings(cache_ttl_seconds=3600),
    )
