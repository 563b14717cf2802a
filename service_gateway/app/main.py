"""
API Gateway service for the PathWise Access Layer.
"""

from typing import Any, Dict, List, Literal, Optional

import httpx
from fastapi import Query, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config

from service_gateway.app.adapters import (
    AlphaVantageClient,
    GeminiClient,
    NewsApiClient,
    OpenAIClient,
    PolygonClient,
)
from service_gateway.app.adapters.alpha_vantage_client import detect_alpha_vantage_error
from service_gateway.app.adapters.gemini_client import detect_gemini_error
from service_gateway.app.adapters.news_client import detect_news_error
from service_gateway.app.adapters.openai_client import detect_openai_error
from service_gateway.app.adapters.polygon_client import detect_polygon_error
from service_gateway.app.chat import ChatService
from service_gateway.app.domain.results import ChatMessage
from service_gateway.app.gateway import ProviderGateway, build_provider_configs
from service_gateway.app.gateway.providers import ALPHA_VANTAGE, GEMINI, NEWS_API, OPENAI, POLYGON
from service_gateway.app.market_data import MarketDataService, SymbolSearchService, get_mock_stock_data
from service_gateway.app.market_data.service import is_valid_symbol, normalize_symbol
from service_gateway.app.news import NewsService


EMBEDDED_ERROR_HOOKS = {
    NEWS_API: detect_news_error,
    POLYGON: detect_polygon_error,
    ALPHA_VANTAGE: detect_alpha_vantage_error,
    GEMINI: detect_gemini_error,
    OPENAI: detect_openai_error,
}


class ChatMessageIn(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str = Field(min_length=1)


class ChatRequest(BaseModel):
    messages: List[ChatMessageIn] = Field(min_length=1)


class GenerateContentRequest(BaseModel):
    prompt: str = Field(min_length=1)


class GatewayService(BaseService):
    """API Gateway service implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__("gateway", 8000, config=config)

        self.providers = build_provider_configs(self.config)
        self.gateways: Dict[str, ProviderGateway] = {
            name: ProviderGateway(
                provider,
                embedded_error=EMBEDDED_ERROR_HOOKS.get(name),
                transport=transport,
                timeout=self.config.provider_timeout_seconds,
                metrics=self.metrics,
            )
            for name, provider in self.providers.items()
        }

        self.news_service = NewsService(NewsApiClient(self.gateways[NEWS_API]))
        self.market_data_service = MarketDataService(PolygonClient(self.gateways[POLYGON]))
        self.symbol_search_service = SymbolSearchService(AlphaVantageClient(self.gateways[ALPHA_VANTAGE]))
        self.chat_service = ChatService(
            GeminiClient(self.gateways[GEMINI], self.config.gemini_model),
            OpenAIClient(self.gateways[OPENAI], self.config.openai_model),
        )

        self._setup_gateway_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.gateway_service = self

    async def _check_dependencies(self) -> Dict[str, Any]:
        """Report which providers have credentials configured."""
        return {
            name: "configured" if provider.has_api_key else "missing_key"
            for name, provider in self.providers.items()
        }

    def _setup_gateway_routes(self):
        """Set up market trends, news and AI routes."""

        @self.app.get("/api/market-trends/stocks")
        async def get_stock(response: Response, symbol: Optional[str] = Query(default=None)):
            """Live stock data, or synthetic data when the live lookup fails."""
            formatted = normalize_symbol(symbol)
            if not formatted:
                return JSONResponse(
                    status_code=400,
                    content={"message": "Symbol parameter is required", "errorType": "validation_error"},
                )
            if not is_valid_symbol(formatted):
                return JSONResponse(
                    status_code=400,
                    content={"message": f"Invalid stock symbol: {formatted}", "errorType": "validation_error"},
                )

            stock_data = await self.market_data_service.get_stock_data(formatted)
            if stock_data.error:
                self.logger.info(
                    "Using mock stock data",
                    symbol=formatted,
                    reason=stock_data.error,
                )
                response.headers["X-Data-Source"] = "mock"
                return get_mock_stock_data(formatted).to_dict()

            response.headers["X-Data-Source"] = "live"
            return stock_data.to_dict()

        @self.app.get("/api/market-trends/stocks/search")
        async def search_stock_symbols(q: Optional[str] = Query(default=None)):
            """Symbol suggestions for the stock picker."""
            results = await self.symbol_search_service.search(q)
            return [symbol.to_dict() for symbol in results]

        @self.app.get("/api/market-trends/tickers")
        async def search_tickers(q: Optional[str] = Query(default=None)):
            """Ticker search against the market data provider."""
            results = await self.market_data_service.search_stocks(q)
            return [symbol.to_dict() for symbol in results]

        @self.app.get("/api/market-trends/trending")
        async def get_trending():
            stocks = await self.market_data_service.get_trending_stocks()
            return [stock.to_dict() for stock in stocks]

        @self.app.get("/api/market-trends/news")
        async def get_news(limit: int = Query(default=10, ge=1, le=20)):
            articles = await self.news_service.get_all_tech_news(limit=limit)
            return [article.to_dict() for article in articles]

        @self.app.post("/api/generate-content")
        async def generate_content(body: GenerateContentRequest):
            """Resume content generation."""
            content = await self.chat_service.generate_content(body.prompt)
            return {"content": content}

        @self.app.post("/api/chat")
        async def chat(body: ChatRequest):
            """Career-coach reply for a conversation."""
            messages = [ChatMessage(role=message.role, content=message.content) for message in body.messages]
            reply = await self.chat_service.generate_chat_response(messages)
            return {"reply": reply}


def create_app(
    config: Optional[ServiceConfig] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
):
    """Create FastAPI application."""
    service = GatewayService(config, transport=transport)
    return service.app


if __name__ == "__main__":
    service = GatewayService(get_config("gateway", 8000))
    service.run()
