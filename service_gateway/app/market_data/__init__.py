"""
Market data service layer for the Access Gateway.
"""

from .mock_data import get_mock_stock_data
from .service import MarketDataService
from .symbols import DEFAULT_STOCK_SYMBOLS, SymbolSearchService

__all__ = [
    "DEFAULT_STOCK_SYMBOLS",
    "MarketDataService",
    "SymbolSearchService",
    "get_mock_stock_data",
]
