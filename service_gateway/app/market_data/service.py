"""
Market data service responsible for stock quotes, history and trending tickers.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from typing import Callable, List, Optional

from shared.errors import ClassifiedError
from shared.logging import get_logger

from service_gateway.app.adapters.polygon_client import (
    PolygonClient,
    shape_company_name,
    shape_quote,
    shape_ticker_search,
    shape_time_series,
    shape_trending,
)
from service_gateway.app.domain.results import (
    StockData,
    StockDataPoint,
    StockQuote,
    StockSymbol,
    TrendingStock,
)
from service_gateway.app.gateway.aggregate import SubQuery, gather_tolerant


_SYMBOL_PATTERN = re.compile(r"^[A-Z0-9.\-]{1,12}$")

HISTORY_DAYS = 30


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def is_valid_symbol(symbol: str) -> bool:
    return bool(_SYMBOL_PATTERN.match(symbol))


def normalize_symbol(symbol: Optional[str]) -> str:
    return (symbol or "").strip().upper()


class MarketDataService:
    """Combines Polygon quote, history and reference lookups per symbol."""

    def __init__(
        self,
        polygon: PolygonClient,
        *,
        today: Callable[[], date] = utc_today,
        history_days: int = HISTORY_DAYS,
    ) -> None:
        self.polygon = polygon
        self._today = today
        self.history_days = history_days
        self.logger = get_logger("gateway.market_data")

    async def get_company_name(self, symbol: str) -> Optional[str]:
        payload = await self.polygon.get_ticker_details(symbol)
        return shape_company_name(payload)

    async def get_stock_quote(self, symbol: str) -> Optional[StockQuote]:
        payload = await self.polygon.get_previous_close(symbol)
        return shape_quote(payload, symbol)

    async def get_stock_time_series(self, symbol: str) -> List[StockDataPoint]:
        end = self._today()
        start = end - timedelta(days=self.history_days)
        payload = await self.polygon.get_daily_bars(symbol, start, end)
        return shape_time_series(payload)

    async def get_stock_data(self, symbol: Optional[str]) -> StockData:
        """
        Quote, daily history and company name for one symbol.

        The three lookups run concurrently; history and name degrade to
        empty values on failure. Problems are reported through
        ``StockData.error`` rather than raised.
        """
        formatted = normalize_symbol(symbol)
        if not formatted:
            return StockData(symbol="", error="Stock symbol is required")
        if not is_valid_symbol(formatted):
            return StockData(symbol=formatted, error=f"Invalid stock symbol: {formatted}")

        quote, time_series, name = await gather_tolerant(
            SubQuery("stock quote", self.get_stock_quote(formatted), fallback=None),
            SubQuery("time series", self.get_stock_time_series(formatted), fallback=[]),
            SubQuery("company details", self.get_company_name(formatted), fallback=None),
        )

        if quote is None:
            return StockData(symbol=formatted, error="No data available for this symbol")

        return StockData(
            symbol=formatted,
            name=name or formatted,
            price=quote.price,
            change=quote.change,
            change_percent=quote.change_percent,
            time_series=time_series,
        )

    async def get_trending_stocks(self) -> List[TrendingStock]:
        """Top gainers; an unavailable provider yields an empty list."""
        try:
            payload = await self.polygon.get_gainers()
        except ClassifiedError as exc:
            self.logger.warning("Trending stocks unavailable", kind=exc.kind.value, error=exc.message)
            return []
        return shape_trending(payload)

    async def search_stocks(self, query: Optional[str]) -> List[StockSymbol]:
        if not query or not query.strip():
            return []
        try:
            payload = await self.polygon.search_tickers(query.strip())
        except ClassifiedError as exc:
            self.logger.warning("Stock search unavailable", kind=exc.kind.value, error=exc.message)
            return []
        return shape_ticker_search(payload)
