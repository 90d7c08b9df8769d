"""Daily candle history fetch via ccxt async.

Walks FORWARD from ``since_ms`` in pages of ``page_limit`` klines until the
exchange returns a short page. Binance klines come back oldest-first, but
each page is still keyed by timestamp so overlapping pages never produce
duplicate bars.

No retry or fallback: a failed request surfaces as MarketDataError and the
caller decides what to do.
"""

from __future__ import annotations

import time

import ccxt.async_support as ccxt_async

from perpdash.config import MarketDataSettings
from perpdash.data.models import DailyCandle
from perpdash.exceptions import MarketDataError
from perpdash.logging import get_logger

logger = get_logger(__name__)


class DailyCandleFetcher:
    """Fetches an ascending daily candle history from a ccxt exchange.

    Usage:
        fetcher = DailyCandleFetcher(settings)
        candles = await fetcher.fetch_daily_candles()
        await fetcher.close()

    Args:
        settings: Exchange id, symbol, timeframe and paging parameters.
        exchange: Pre-built ccxt async exchange. Built from
            ``settings.exchange_id`` when omitted.
    """

    def __init__(
        self,
        settings: MarketDataSettings,
        exchange: ccxt_async.Exchange | None = None,
    ) -> None:
        self._settings = settings
        if exchange is None:
            exchange_cls = getattr(ccxt_async, settings.exchange_id)
            exchange = exchange_cls({"enableRateLimit": True})
        self._exchange = exchange

    @property
    def exchange(self) -> ccxt_async.Exchange:
        """Access the underlying ccxt exchange instance."""
        return self._exchange

    async def close(self) -> None:
        """Release the ccxt HTTP session (required for ccxt async)."""
        await self._exchange.close()

    async def fetch_daily_candles(
        self,
        symbol: str | None = None,
        since_ms: int | None = None,
    ) -> list[DailyCandle]:
        """Fetch every candle from ``since_ms`` up to now.

        Args:
            symbol: ccxt unified symbol. Defaults to the configured symbol.
            since_ms: Start timestamp in milliseconds. Defaults to the
                configured start.

        Returns:
            Candles sorted ascending by timestamp, no duplicates.

        Raises:
            MarketDataError: If the exchange errors or returns no candles.
        """
        symbol = symbol or self._settings.symbol
        start_ms = self._settings.since_ms if since_ms is None else since_ms
        limit = self._settings.page_limit
        started = time.monotonic()

        by_ts: dict[int, DailyCandle] = {}
        cursor = start_ms
        pages = 0

        while True:
            try:
                batch = await self._exchange.fetch_ohlcv(
                    symbol,
                    timeframe=self._settings.timeframe,
                    since=cursor,
                    limit=limit,
                )
            except ccxt_async.BaseError as e:
                logger.error(
                    "candle_fetch_failed",
                    symbol=symbol,
                    since_ms=cursor,
                    error=str(e),
                )
                raise MarketDataError(f"failed to fetch candles for {symbol}: {e}") from e

            pages += 1
            if not batch:
                break

            for row in batch:
                if row[0] >= start_ms:
                    by_ts[int(row[0])] = DailyCandle.from_ohlcv(row)

            newest_ts = max(int(row[0]) for row in batch)
            if len(batch) < limit or newest_ts < cursor:
                break
            cursor = newest_ts + 1

        if not by_ts:
            raise MarketDataError(f"no candles returned for {symbol}")

        candles = [by_ts[ts] for ts in sorted(by_ts)]
        logger.info(
            "candles_fetched",
            symbol=symbol,
            timeframe=self._settings.timeframe,
            candles=len(candles),
            pages=pages,
            first_ms=candles[0].timestamp_ms,
            last_ms=candles[-1].timestamp_ms,
            elapsed_seconds=round(time.monotonic() - started, 2),
        )
        return candles
