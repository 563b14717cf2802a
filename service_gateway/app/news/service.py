"""
Tech and job-market news for the market trends dashboard.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Callable, Iterable, List

from ..adapters.news_client import NewsApiClient, shape_articles
from ..domain.results import NewsArticle
from ..gateway.aggregate import SubQuery, gather_tolerant


TECH_NEWS_QUERY = "technology OR tech industry"
JOB_MARKET_QUERY = "(tech OR technology) AND (jobs OR hiring OR employment)"

TECH_NEWS_PAGE_SIZE = 10
JOB_MARKET_PAGE_SIZE = 5
ALL_NEWS_LIMIT = 10
LOOKBACK_DAYS = 7

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def published_at(article: NewsArticle) -> datetime:
    """Parse an article's publish time; unparseable values sort last."""
    try:
        parsed = datetime.fromisoformat(article.published_at.replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def newest_first(articles: Iterable[NewsArticle], limit: int) -> List[NewsArticle]:
    return sorted(articles, key=published_at, reverse=True)[:limit]


class NewsService:
    """Queries NewsAPI and shapes the results for the dashboard."""

    def __init__(
        self,
        client: NewsApiClient,
        *,
        today: Callable[[], date] = utc_today,
        lookback_days: int = LOOKBACK_DAYS,
    ):
        self.client = client
        self._today = today
        self.lookback_days = lookback_days

    def _from_date(self) -> date:
        return self._today() - timedelta(days=self.lookback_days)

    async def get_tech_news(self) -> List[NewsArticle]:
        payload = await self.client.search_everything(
            TECH_NEWS_QUERY,
            from_date=self._from_date(),
            page_size=TECH_NEWS_PAGE_SIZE,
            endpoint_label="tech news",
        )
        return shape_articles(payload, "Tech News", limit=TECH_NEWS_PAGE_SIZE)

    async def get_tech_job_market_news(self) -> List[NewsArticle]:
        payload = await self.client.search_everything(
            JOB_MARKET_QUERY,
            from_date=self._from_date(),
            page_size=JOB_MARKET_PAGE_SIZE,
            endpoint_label="tech job market news",
        )
        return shape_articles(payload, "Tech Jobs", limit=JOB_MARKET_PAGE_SIZE)

    async def get_all_tech_news(self, limit: int = ALL_NEWS_LIMIT) -> List[NewsArticle]:
        """Both feeds merged newest first; a failing feed contributes nothing."""
        tech_news, job_news = await gather_tolerant(
            SubQuery("tech news", self.get_tech_news(), fallback=[]),
            SubQuery("tech job market news", self.get_tech_job_market_news(), fallback=[]),
        )
        return newest_first([*tech_news, *job_news], limit)
