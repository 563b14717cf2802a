"""
Normalized result types returned to route handlers.

Serialized field names follow the camelCase the web client already reads.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class NewsArticle:
    """A news article reduced to the fields the dashboard renders."""

    title: str
    description: str
    source: str
    url: str
    published_at: str
    content: Optional[str] = None
    image_url: Optional[str] = None
    category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "source": self.source,
            "url": self.url,
            "publishedAt": self.published_at,
            "content": self.content,
            "imageUrl": self.image_url,
            "category": self.category,
        }


@dataclass(frozen=True)
class StockDataPoint:
    """One daily bar."""

    date: str
    open: float
    high: float
    low: float
    close: float
    volume: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }


@dataclass(frozen=True)
class StockQuote:
    """Latest price with its change against the reference price."""

    symbol: str
    price: float
    previous_close: float
    change: float
    change_percent: float
    volume: Optional[float] = None


@dataclass(frozen=True)
class StockData:
    """Combined quote, history and company name for one symbol.

    ``error`` is set instead of raising when the symbol cannot be served.
    """

    symbol: str
    currency: str = "USD"
    name: Optional[str] = None
    price: Optional[float] = None
    change: Optional[float] = None
    change_percent: Optional[float] = None
    time_series: List[StockDataPoint] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"symbol": self.symbol, "currency": self.currency}
        if self.error is not None:
            payload["error"] = self.error
            return payload

        payload.update({
            "name": self.name,
            "price": self.price,
            "change": self.change,
            "changePercent": self.change_percent,
            "timeSeries": [point.to_dict() for point in self.time_series],
        })
        return payload


@dataclass(frozen=True)
class TrendingStock:
    symbol: str
    name: str
    price: float
    change: float
    change_percent: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "name": self.name,
            "price": self.price,
            "change": self.change,
            "changePercent": self.change_percent,
        }


@dataclass(frozen=True)
class StockSymbol:
    symbol: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"symbol": self.symbol, "name": self.name}


@dataclass(frozen=True)
class ChatMessage:
    role: str
    content: str
