"""Configuration system using pydantic-settings with environment variable loading."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MarketDataSettings(BaseSettings):
    """Where the daily candle history comes from."""

    model_config = SettingsConfigDict(env_prefix="MARKET_")

    exchange_id: str = "binance"  # any ccxt exchange id
    symbol: str = "BTC/USDT"
    timeframe: str = "1d"
    since_ms: int = 1483228800000  # 2017-01-01 00:00 UTC
    page_limit: int = 1000  # Binance kline max per request


class BacktestSettings(BaseSettings):
    """EMA crossover backtest configuration.

    ``leverages`` and ``stop_loss_pcts`` are paired by position: the i-th
    leverage runs with the i-th stop. A stop of 0 disables the stop-loss.
    All fields configurable via BACKTEST_ environment variable prefix
    (list fields as JSON, e.g. BACKTEST_LEVERAGES='[1, 3, 5]').
    """

    model_config = SettingsConfigDict(env_prefix="BACKTEST_")

    ema_period: int = Field(default=5, ge=1)
    initial_capital: float = 10000.0  # dollar scale for the chart series
    leverages: list[int] = [1, 3, 5]
    stop_loss_pcts: list[float] = [0.0, 0.063, 0.063]


class DashboardSettings(BaseSettings):
    """Dashboard server configuration."""

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_")

    host: str = "0.0.0.0"
    port: int = 8080
    cache_ttl_seconds: int = 6 * 60 * 60  # recompute /api/pnl every 6h


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"  # LOG_FORMAT
    market: MarketDataSettings = MarketDataSettings()
    backtest: BacktestSettings = BacktestSettings()
    dashboard: DashboardSettings = DashboardSettings()
