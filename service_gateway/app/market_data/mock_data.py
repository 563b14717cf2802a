"""
Synthetic stock data served when live market data is unavailable.
"""

import random
from datetime import date, timedelta
from typing import Dict, List, Optional

from service_gateway.app.domain.results import StockData, StockDataPoint
from service_gateway.app.market_data.service import utc_today
from service_gateway.app.market_data.symbols import company_name


KNOWN_BASE_PRICES: Dict[str, float] = {
    "AAPL": 180,
    "MSFT": 350,
    "GOOGL": 140,
    "AMZN": 160,
    "META": 480,
    "TSLA": 170,
    "NVDA": 850,
}

VOLATILITY = 0.02


def _symbol_seed(symbol: str) -> int:
    return sum(ord(char) for char in symbol)


def generate_mock_time_series(symbol: str, *, days: int = 30, today: Optional[date] = None) -> List[StockDataPoint]:
    """``days + 1`` daily points ending today; identical for repeated calls with the same symbol."""
    seed = _symbol_seed(symbol)
    rng = random.Random(seed)
    end = today or utc_today()

    base_price = KNOWN_BASE_PRICES.get(symbol, 50 + seed % 200)
    last_digit = seed % 10
    trend = -0.001 if last_digit < 3 else 0.001 if last_digit > 7 else 0.0

    points: List[StockDataPoint] = []
    for offset in range(days, -1, -1):
        base_price *= 1 + (rng.random() - 0.5) * VOLATILITY + trend
        close = base_price
        open_ = close * (1 + (rng.random() - 0.5) * 0.01)
        high = max(open_, close) * (1 + rng.random() * 0.01)
        low = min(open_, close) * (1 - rng.random() * 0.01)
        points.append(
            StockDataPoint(
                date=(end - timedelta(days=offset)).isoformat(),
                open=round(open_, 2),
                high=round(high, 2),
                low=round(low, 2),
                close=round(close, 2),
                volume=rng.randint(1_000_000, 11_000_000),
            )
        )
    return points


def get_mock_stock_data(symbol: str, *, today: Optional[date] = None) -> StockData:
    formatted = symbol.strip().upper()
    series = generate_mock_time_series(formatted, today=today)

    price = series[-1].close
    previous = series[-2].close
    change = price - previous

    return StockData(
        symbol=formatted,
        name=company_name(formatted),
        price=price,
        change=change,
        change_percent=change / previous * 100 if previous else 0.0,
        time_series=series,
    )
