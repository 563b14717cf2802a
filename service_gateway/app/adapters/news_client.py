"""
NewsAPI adapter for the Gateway.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from shared.errors import ErrorKind

from ..domain.results import NewsArticle
from ..gateway.client import ProviderGateway


# NewsAPI reports failures as {"status": "error", "code": ..., "message": ...}
NEWS_API_ERROR_CODES: Dict[str, ErrorKind] = {
    "apiKeyDisabled": ErrorKind.KEY_INVALID,
    "apiKeyInvalid": ErrorKind.KEY_INVALID,
    "apiKeyMissing": ErrorKind.KEY_INVALID,
    "apiKeyExhausted": ErrorKind.RATE_LIMITED,
    "rateLimited": ErrorKind.RATE_LIMITED,
    "parameterInvalid": ErrorKind.BAD_PARAMETERS,
    "parametersMissing": ErrorKind.BAD_PARAMETERS,
    "sourcesTooMany": ErrorKind.BAD_PARAMETERS,
    "sourceDoesNotExist": ErrorKind.BAD_PARAMETERS,
}


def detect_news_error(payload: Any) -> Optional[Tuple[ErrorKind, str]]:
    if not isinstance(payload, dict) or payload.get("status") != "error":
        return None
    kind = NEWS_API_ERROR_CODES.get(payload.get("code") or "", ErrorKind.UNKNOWN)
    return kind, payload.get("message") or "Unknown error from News API"


def shape_articles(payload: Any, category: str, limit: Optional[int] = None) -> List[NewsArticle]:
    """Project an ``/everything`` payload into articles tagged with ``category``."""
    raw_articles = payload.get("articles") if isinstance(payload, dict) else None

    articles: List[NewsArticle] = []
    for article in raw_articles or []:
        if not isinstance(article, dict):
            continue
        source = article.get("source")
        source_name = source.get("name") if isinstance(source, dict) else source
        articles.append(
            NewsArticle(
                title=article.get("title") or "",
                description=article.get("description") or "",
                source=str(source_name or ""),
                url=article.get("url") or "",
                published_at=article.get("publishedAt") or "",
                content=article.get("content"),
                image_url=article.get("urlToImage"),
                category=category,
            )
        )

    if limit is not None:
        return articles[:limit]
    return articles


class NewsApiClient:
    """Thin request builder over the NewsAPI gateway."""

    def __init__(self, gateway: ProviderGateway):
        self.gateway = gateway

    async def search_everything(
        self,
        query: str,
        *,
        from_date: date,
        page_size: int,
        endpoint_label: str,
        language: str = "en",
        sort_by: str = "publishedAt",
    ) -> Any:
        """Raw ``/everything`` payload for a keyword query."""
        request = self.gateway.build_request(
            "/everything",
            {
                "q": query,
                "language": language,
                "sortBy": sort_by,
                "from": from_date.isoformat(),
                "pageSize": page_size,
            },
        )
        return await self.gateway.fetch_endpoint(request, endpoint_label)
