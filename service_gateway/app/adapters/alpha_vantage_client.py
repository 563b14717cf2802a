"""
Alpha Vantage symbol-search adapter for the Gateway.
"""

from typing import Any, List, Optional, Tuple

from shared.errors import ErrorKind

from ..domain.results import StockSymbol
from ..gateway.client import ProviderGateway


def detect_alpha_vantage_error(payload: Any) -> Optional[Tuple[ErrorKind, str]]:
    """Alpha Vantage answers 200 and names the failure by field."""
    if not isinstance(payload, dict):
        return None
    if "Error Message" in payload:
        return ErrorKind.BAD_PARAMETERS, str(payload["Error Message"])
    for field in ("Note", "Information"):
        if field in payload:
            return ErrorKind.RATE_LIMITED, str(payload[field])
    return None


def shape_symbol_matches(payload: Any) -> Optional[List[StockSymbol]]:
    """Symbols from ``bestMatches``, or None when the body is not a search result."""
    matches = payload.get("bestMatches") if isinstance(payload, dict) else None
    if not isinstance(matches, list):
        return None

    return [
        StockSymbol(symbol=match["1. symbol"], name=match.get("2. name", ""))
        for match in matches
        if isinstance(match, dict) and match.get("1. symbol")
    ]


class AlphaVantageClient:
    def __init__(self, gateway: ProviderGateway):
        self.gateway = gateway

    async def symbol_search(self, keywords: str) -> Any:
        request = self.gateway.build_request(
            "/query",
            {"function": "SYMBOL_SEARCH", "keywords": keywords},
        )
        return await self.gateway.fetch_endpoint(request, "symbol search")
