"""JSON API endpoints for the strategy equity dashboard.

/api/pnl fetches the configured daily history, runs the strategy set and
caches the runs on app.state for DASHBOARD_CACHE_TTL_SECONDS. The chart
and summary endpoints reuse the same cached runs. /api/backtest runs the
strategy set on candles supplied in the request body instead.
"""

from __future__ import annotations

import time

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from perpdash.analytics.chart import merge_equity_curves
from perpdash.analytics.metrics import summarize_run
from perpdash.backtest.models import StrategyRun
from perpdash.backtest.presets import strategies_from_settings, strategy_label
from perpdash.backtest.runner import run_strategies
from perpdash.data.aggregate import aggregate_to_five_day_candles
from perpdash.data.models import DailyCandle
from perpdash.exceptions import InvalidInputError

log = structlog.get_logger(__name__)

BACKTEST_TIMEFRAMES = ("1d", "5d")

router = APIRouter()


async def _get_runs(request: Request) -> list[StrategyRun]:
    """Return cached runs, recomputing from fresh candles once the TTL lapses."""
    state = request.app.state
    settings = state.settings
    ttl = settings.dashboard.cache_ttl_seconds

    def fresh_runs() -> list[StrategyRun] | None:
        cache = state.pnl_cache
        if cache is not None and time.monotonic() - cache["computed_at"] < ttl:
            return cache["runs"]
        return None

    runs = fresh_runs()
    if runs is not None:
        return runs

    async with state.pnl_lock:
        # Another request may have refreshed while we waited
        runs = fresh_runs()
        if runs is not None:
            return runs

        candles = await state.fetcher.fetch_daily_candles()
        runs = run_strategies(
            candles,
            strategies_from_settings(settings.backtest),
            ema_period=settings.backtest.ema_period,
        )
        state.pnl_cache = {"computed_at": time.monotonic(), "runs": runs}
        log.info("pnl_cache_refreshed", candles=len(candles), ttl_seconds=ttl)
        return runs


def _error_response(endpoint: str, e: Exception) -> JSONResponse:
    log.error("dashboard_endpoint_error", endpoint=endpoint, error=str(e))
    return JSONResponse(content={"error": str(e)}, status_code=500)


@router.get("/pnl")
async def get_pnl(request: Request) -> JSONResponse:
    """Return the three strategy runs: {id, trades, equityCurve} each."""
    try:
        runs = await _get_runs(request)
    except Exception as e:
        return _error_response("pnl", e)
    return JSONResponse(content=[run.to_dict() for run in runs])


@router.get("/equity-chart")
async def get_equity_chart(request: Request) -> JSONResponse:
    """Return the merged, forward-filled dollar equity series."""
    try:
        runs = await _get_runs(request)
    except Exception as e:
        return _error_response("equity-chart", e)
    capital = request.app.state.settings.backtest.initial_capital
    return JSONResponse(content=merge_equity_curves(runs, initial_capital=capital))


@router.get("/summary")
async def get_summary(request: Request) -> JSONResponse:
    """Return per-run trade counts, returns, drawdown and win rate."""
    try:
        runs = await _get_runs(request)
    except Exception as e:
        return _error_response("summary", e)
    return JSONResponse(content=[summarize_run(run) for run in runs])


@router.get("/strategies")
async def get_strategies(request: Request) -> JSONResponse:
    """Return the configured strategies with their run ids and chart labels."""
    settings = request.app.state.settings
    try:
        strategies = strategies_from_settings(settings.backtest)
    except InvalidInputError as e:
        return JSONResponse(content={"error": str(e)}, status_code=400)

    result = []
    for config in strategies:
        item = config.to_dict()
        item["label"] = strategy_label(config.run_id)
        result.append(item)
    return JSONResponse(content=result)


@router.post("/backtest")
async def run_backtest_endpoint(request: Request) -> JSONResponse:
    """Run the strategy set on caller-supplied candles.

    Expects JSON body with: candles (list of {timestamp, open, high, low,
    close}), an optional ema_period, and an optional timeframe: "1d"
    (default) runs on the candles as given, "5d" first folds them into
    5-day bars.

    Returns:
        JSON list of strategy runs, same shape as /api/pnl.
    """
    try:
        body = await request.json()
    except Exception:
        return JSONResponse(content={"error": "Invalid JSON body"}, status_code=400)

    if not isinstance(body, dict) or "candles" not in body:
        return JSONResponse(
            content={"error": "Missing required field: candles"}, status_code=400
        )

    settings = request.app.state.settings
    try:
        ema_period = int(body.get("ema_period", settings.backtest.ema_period))
        candles = [DailyCandle.from_dict(c) for c in body["candles"]]
    except (KeyError, TypeError, ValueError) as e:
        return JSONResponse(content={"error": f"Invalid request: {e}"}, status_code=400)

    timeframe = body.get("timeframe", "1d")
    if timeframe not in BACKTEST_TIMEFRAMES:
        return JSONResponse(
            content={"error": f"Unsupported timeframe: {timeframe!r}"},
            status_code=400,
        )
    if timeframe == "5d":
        candles = aggregate_to_five_day_candles(candles)

    try:
        runs = run_strategies(
            candles,
            strategies_from_settings(settings.backtest),
            ema_period=ema_period,
        )
    except InvalidInputError as e:
        return JSONResponse(content={"error": str(e)}, status_code=400)

    return JSONResponse(content=[run.to_dict() for run in runs])
