"""
Query façade used by rendering code.

Every operation returns a well-formed NewsResponse. Failures anywhere
below are contained: the worst case is a fallback article set, never an
exception reaching the caller.
"""

import logging
from typing import Optional, Union

from newsgrid.models.api import NewsResponse
from newsgrid.models.domain import Article, NewsCategory
from newsgrid.services.aggregator import Aggregator, AggregateResult

logger = logging.getLogger(__name__)

CategoryInput = Union[NewsCategory, str, None]


class NewsService:
    """Single entry point for headlines, category pages, search and article lookup"""

    def __init__(self, aggregator: Aggregator, default_page_size: int = 20):
        self.aggregator = aggregator
        self.fallback = aggregator.fallback
        self.default_page_size = default_page_size
        self.logger = logging.getLogger(__name__)

    def _to_response(self, result: AggregateResult) -> NewsResponse:
        return NewsResponse(status="ok", total_results=result.total_results, articles=result.articles)

    def _fallback_response(self, category: Optional[NewsCategory]) -> NewsResponse:
        try:
            articles = self.fallback.generate(category)[:self.default_page_size]
            return NewsResponse(status="ok", total_results=len(articles), articles=articles)
        except Exception as e:
            self.logger.error(f"Fallback generation failed: {e}")
            return NewsResponse.empty()

    async def get_top_headlines(self, category: CategoryInput = None) -> NewsResponse:
        """Headlines for a category, or general headlines when none is given"""
        parsed = NewsCategory.parse(category)
        if category and parsed is None:
            self.logger.warning(f"Unknown category '{category}', serving general headlines")

        try:
            result = await self.aggregator.aggregate(category=parsed, page_size=self.default_page_size)
            return self._to_response(result)
        except Exception as e:
            self.logger.error(f"Error getting top headlines for {parsed.value if parsed else 'general'}: {e}")
            return self._fallback_response(parsed)

    async def get_news_by_category(self, category: Union[NewsCategory, str]) -> NewsResponse:
        """Headlines for a mandatory category"""
        return await self.get_top_headlines(category)

    async def search_news(self, query: str, page: int = 1, page_size: Optional[int] = None) -> NewsResponse:
        """Articles whose title, description or content contain the query"""
        query = (query or "").strip()
        if not query:
            return NewsResponse.empty()

        page_size = page_size or self.default_page_size
        try:
            result = await self.aggregator.search(query, page=page, page_size=page_size)
            return self._to_response(result)
        except Exception as e:
            self.logger.error(f"Error searching news for '{query}': {e}")

        try:
            matches = [article for article in self.fallback.generate_mixed() if article.matches(query)]
            start = (max(1, page) - 1) * page_size
            return NewsResponse(status="ok", total_results=len(matches),
                                articles=matches[start:start + page_size])
        except Exception as e:
            self.logger.error(f"Fallback search failed: {e}")
            return NewsResponse.empty()

    async def get_article(self, article_id: str) -> Optional[Article]:
        """Look an article up among fallback articles or the current top headlines"""
        fallback_article = self.fallback.find(article_id)
        if fallback_article is not None:
            return fallback_article

        response = await self.get_top_headlines()
        for article in response.articles:
            if article.id == article_id:
                return article
        return None

    async def close(self) -> None:
        await self.aggregator.source_manager.close_all()
