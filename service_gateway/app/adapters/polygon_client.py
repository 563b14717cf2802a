"""
Polygon market-data adapter for the Gateway.

Request builders return raw payloads (what the gateway caches); the
``shape_*`` functions turn them into normalized results and never modify
their input.
"""

from datetime import date, datetime, timezone
from typing import Any, List, Optional, Tuple

from shared.errors import ErrorKind

from ..domain.results import StockDataPoint, StockQuote, StockSymbol, TrendingStock
from ..gateway.client import ProviderGateway


TRENDING_LIMIT = 5
SEARCH_LIMIT = 10
TIME_SERIES_LIMIT = 50

_OK_STATUSES = ("OK", "DELAYED")


def detect_polygon_error(payload: Any) -> Optional[Tuple[ErrorKind, str]]:
    if not isinstance(payload, dict):
        return None

    status = payload.get("status")
    if status in _OK_STATUSES:
        return None
    if status == "NOT_AUTHORIZED":
        return ErrorKind.KEY_INVALID, payload.get("message") or "Polygon rejected the API key"
    if payload.get("error"):
        return ErrorKind.UNKNOWN, str(payload["error"])
    if status == "ERROR":
        return ErrorKind.UNKNOWN, payload.get("message") or "Unknown error from Polygon"
    return None


def compute_change(price: float, previous_close: float) -> Tuple[float, float]:
    """Absolute and percent change of ``price`` against ``previous_close``."""
    change = price - previous_close
    if not previous_close:
        return change, 0.0
    return change, change / previous_close * 100


def shape_company_name(payload: Any) -> Optional[str]:
    results = payload.get("results") if isinstance(payload, dict) else None
    if isinstance(results, dict):
        return results.get("name")
    return None


def _number(value: Any) -> Optional[float]:
    """``value`` as a float, or None when it is missing or not numeric."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        return float(value)
    except ValueError:
        return None


def shape_quote(payload: Any, symbol: str) -> Optional[StockQuote]:
    """Quote from the previous-day aggregate (``/prev``).

    The bar's close is the price and its open is the reference price the
    change is measured against. A bar without both is treated as no data.
    """
    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, list) or not results or not isinstance(results[0], dict):
        return None

    bar = results[0]
    price = _number(bar.get("c"))
    previous_close = _number(bar.get("o"))
    if price is None or previous_close is None:
        return None

    change, change_percent = compute_change(price, previous_close)
    return StockQuote(
        symbol=symbol,
        price=price,
        previous_close=previous_close,
        change=change,
        change_percent=change_percent,
        volume=_number(bar.get("v")),
    )


def _bar_point(bar: Any) -> Optional[StockDataPoint]:
    if not isinstance(bar, dict):
        return None
    timestamp = _number(bar.get("t"))
    values = [_number(bar.get(field)) for field in ("o", "h", "l", "c")]
    if timestamp is None or None in values:
        return None

    open_, high, low, close = values
    return StockDataPoint(
        date=datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc).date().isoformat(),
        open=open_,
        high=high,
        low=low,
        close=close,
        volume=_number(bar.get("v")) or 0.0,
    )


def shape_time_series(payload: Any) -> List[StockDataPoint]:
    """Daily bars as points sorted ascending by date; incomplete bars are skipped."""
    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, list):
        return []

    points = [point for point in map(_bar_point, results) if point is not None]
    return sorted(points, key=lambda point: point.date)


def shape_trending(payload: Any, limit: int = TRENDING_LIMIT) -> List[TrendingStock]:
    tickers = payload.get("tickers") if isinstance(payload, dict) else None
    if not isinstance(tickers, list):
        return []

    trending: List[TrendingStock] = []
    for ticker in tickers:
        if len(trending) == limit:
            break
        if not isinstance(ticker, dict) or not ticker.get("ticker"):
            continue
        day = ticker.get("day") if isinstance(ticker.get("day"), dict) else {}
        price = _number(day.get("c")) or 0.0
        change, change_percent = compute_change(price, _number(day.get("o")) or 0.0)
        trending.append(
            TrendingStock(
                symbol=ticker["ticker"],
                # the snapshot endpoint carries no company names
                name=ticker["ticker"],
                price=price,
                change=change,
                change_percent=change_percent,
            )
        )
    return trending


def shape_ticker_search(payload: Any, limit: int = SEARCH_LIMIT) -> List[StockSymbol]:
    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, list):
        return []

    symbols = [
        StockSymbol(symbol=result["ticker"], name=result.get("name") or result["ticker"])
        for result in results
        if isinstance(result, dict) and result.get("ticker")
    ]
    return symbols[:limit]


class PolygonClient:
    """Request builders for the Polygon endpoints the dashboard uses."""

    def __init__(self, gateway: ProviderGateway):
        self.gateway = gateway

    async def get_ticker_details(self, symbol: str) -> Any:
        request = self.gateway.build_request(f"/v3/reference/tickers/{symbol.upper()}")
        return await self.gateway.fetch_endpoint(request, "company details")

    async def get_previous_close(self, symbol: str) -> Any:
        request = self.gateway.build_request(f"/v2/aggs/ticker/{symbol.upper()}/prev")
        return await self.gateway.fetch_endpoint(request, "stock quote")

    async def get_daily_bars(self, symbol: str, start: date, end: date, *, limit: int = TIME_SERIES_LIMIT) -> Any:
        request = self.gateway.build_request(
            f"/v2/aggs/ticker/{symbol.upper()}/range/1/day/{start.isoformat()}/{end.isoformat()}",
            {"limit": limit},
        )
        return await self.gateway.fetch_endpoint(request, "time series")

    async def get_gainers(self) -> Any:
        request = self.gateway.build_request("/v2/snapshot/locale/us/markets/stocks/gainers")
        return await self.gateway.fetch_endpoint(request, "trending stocks")

    async def search_tickers(self, query: str) -> Any:
        request = self.gateway.build_request(
            "/v3/reference/tickers",
            {"search": query, "market": "stocks", "active": "true"},
        )
        return await self.gateway.fetch_endpoint(request, "stock search")
