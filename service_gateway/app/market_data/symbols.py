"""
Stock symbol suggestions backed by Alpha Vantage with a built-in fallback list.
"""

from typing import List, Optional

from shared.errors import ClassifiedError
from shared.logging import get_logger

from service_gateway.app.adapters.alpha_vantage_client import AlphaVantageClient, shape_symbol_matches
from service_gateway.app.domain.results import StockSymbol


DEFAULT_STOCK_SYMBOLS: List[StockSymbol] = [
    StockSymbol("AAPL", "Apple Inc."),
    StockSymbol("MSFT", "Microsoft Corporation"),
    StockSymbol("GOOGL", "Alphabet Inc."),
    StockSymbol("AMZN", "Amazon.com Inc."),
    StockSymbol("META", "Meta Platforms Inc."),
    StockSymbol("TSLA", "Tesla Inc."),
    StockSymbol("NVDA", "NVIDIA Corporation"),
    StockSymbol("JPM", "JPMorgan Chase & Co."),
    StockSymbol("NFLX", "Netflix Inc."),
    StockSymbol("DIS", "The Walt Disney Company"),
    StockSymbol("PYPL", "PayPal Holdings Inc."),
    StockSymbol("INTC", "Intel Corporation"),
    StockSymbol("CSCO", "Cisco Systems Inc."),
    StockSymbol("ADBE", "Adobe Inc."),
    StockSymbol("PEP", "PepsiCo Inc."),
    StockSymbol("CMCSA", "Comcast Corporation"),
    StockSymbol("AMD", "Advanced Micro Devices Inc."),
    StockSymbol("T", "AT&T Inc."),
    StockSymbol("VZ", "Verizon Communications Inc."),
    StockSymbol("CRM", "Salesforce Inc."),
]


def filter_default_symbols(query: str) -> List[StockSymbol]:
    needle = query.strip().lower()
    return [
        stock for stock in DEFAULT_STOCK_SYMBOLS
        if needle in stock.symbol.lower() or needle in stock.name.lower()
    ]


def company_name(symbol: str) -> str:
    for stock in DEFAULT_STOCK_SYMBOLS:
        if stock.symbol == symbol:
            return stock.name
    return f"{symbol} Inc."


class SymbolSearchService:
    """Symbol suggestions that never fail: any provider problem falls back to the default list."""

    def __init__(self, client: AlphaVantageClient):
        self.client = client
        self.logger = get_logger("gateway.symbol_search")

    async def search(self, query: Optional[str]) -> List[StockSymbol]:
        if not query or not query.strip():
            return list(DEFAULT_STOCK_SYMBOLS)

        try:
            payload = await self.client.symbol_search(query.strip())
        except ClassifiedError as exc:
            self.logger.warning(
                "Symbol search unavailable, using default list",
                kind=exc.kind.value,
                error=exc.message,
            )
            return filter_default_symbols(query)

        matches = shape_symbol_matches(payload)
        if matches is None:
            self.logger.warning("Unexpected symbol search response, using default list")
            return filter_default_symbols(query)
        return matches
