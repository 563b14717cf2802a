"""
Adapters package for the Gateway Service.

One module per upstream provider. Each adapter owns:

- Request shapes (paths, query parameters, JSON bodies)
- Detection of errors a provider reports inside a 2xx body
- Pure shaping functions from raw payloads to normalized results

Keep adapters thin; caching, auth and status classification belong to
``gateway.ProviderGateway``.
"""

from .alpha_vantage_client import AlphaVantageClient
from .gemini_client import GeminiClient
from .news_client import NewsApiClient
from .openai_client import OpenAIClient
from .polygon_client import PolygonClient

__all__ = [
    "AlphaVantageClient",
    "GeminiClient",
    "NewsApiClient",
    "OpenAIClient",
    "PolygonClient",
]
