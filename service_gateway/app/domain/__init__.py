"""
Domain layer for the Gateway Service.

Holds the normalized result types shared by adapters, services and routes.
"""

from .results import (
    ChatMessage,
    NewsArticle,
    StockData,
    StockDataPoint,
    StockQuote,
    StockSymbol,
    TrendingStock,
)

__all__ = [
    "ChatMessage",
    "NewsArticle",
    "StockData",
    "StockDataPoint",
    "StockQuote",
    "StockSymbol",
    "TrendingStock",
]
