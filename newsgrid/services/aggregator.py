"""
Aggregation of articles across all applicable sources.

The aggregator asks every source that covers a request for articles,
merges and orders what comes back, and substitutes fallback articles when
nothing does. It composes explicit SourceResults; it never relies on a
source raising to decide what to do next.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from newsgrid.models.domain import Article, NewsCategory
from newsgrid.services.fallback import FallbackGenerator
from newsgrid.services.normalizer import normalize_articles
from newsgrid.sources import SourceResult
from newsgrid.sources.factory import SourceManager

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


@dataclass
class AggregateResult:
    """Articles for one request plus how they were obtained"""
    articles: list[Article]
    total_results: int
    used_fallback: bool = False
    source_results: list[SourceResult] = field(default_factory=list)


def sort_by_recency(articles: list[Article]) -> list[Article]:
    """Stable sort, newest first"""
    return sorted(articles, key=lambda article: article.published_at, reverse=True)


def deduplicate(articles: list[Article]) -> list[Article]:
    """Drop repeats of an id or url, keeping the first occurrence"""
    seen_ids: set[str] = set()
    seen_urls: set[str] = set()
    unique = []
    for article in articles:
        if article.id in seen_ids or article.url in seen_urls:
            continue
        seen_ids.add(article.id)
        seen_urls.add(article.url)
        unique.append(article)
    return unique


class Aggregator:
    """Merges articles from every applicable source for a category or query"""

    def __init__(self, source_manager: SourceManager, fallback: Optional[FallbackGenerator] = None,
                 default_page_size: int = 20, rng: Optional[random.Random] = None):
        self.source_manager = source_manager
        self.fallback = fallback or FallbackGenerator()
        self.default_page_size = default_page_size
        self._rng = rng or random.Random()
        self.logger = logging.getLogger(__name__)

    def _page_size(self, page_size: Optional[int]) -> int:
        size = page_size if page_size is not None else self.default_page_size
        return max(1, min(size, MAX_PAGE_SIZE))

    def order(self, articles: list[Article]) -> list[Article]:
        """Shuffle, then sort newest first

        The shuffle only decides the order among equal timestamps, which is
        unspecified and changes from call to call.
        """
        shuffled = list(articles)
        self._rng.shuffle(shuffled)
        return sort_by_recency(shuffled)

    def merge(self, results: list[SourceResult]) -> list[Article]:
        """Normalize, de-duplicate and order everything the sources returned"""
        raws = [item for result in results for item in result.items]
        return self.order(deduplicate(normalize_articles(raws)))

    def _log_results(self, results: list[SourceResult]) -> None:
        for result in results:
            if result.error:
                self.logger.warning(f"{result.source_name}: {result.status.value} ({result.error})")
            else:
                self.logger.debug(f"{result.source_name}: {result.status.value}, {len(result.items)} items")

    async def aggregate(self, category: Optional[NewsCategory] = None,
                        page_size: Optional[int] = None) -> AggregateResult:
        """Headlines for a category (or general), newest first, truncated to page size"""
        page_size = self._page_size(page_size)

        results = await self.source_manager.fetch_all(category)
        self._log_results(results)
        merged = self.merge(results)

        if not merged:
            label = category.value if category else 'general'
            self.logger.warning(f"No live articles for {label}, using fallback articles")
            articles = self.fallback.generate(category)
            return AggregateResult(
                articles=articles[:page_size],
                total_results=len(articles),
                used_fallback=True,
                source_results=results
            )

        return AggregateResult(
            articles=merged[:page_size],
            total_results=len(merged),
            source_results=results
        )

    async def search(self, query: str, page: int = 1, page_size: Optional[int] = None) -> AggregateResult:
        """Articles matching a free-text query, paginated over the filtered set"""
        page_size = self._page_size(page_size)
        page = max(1, page)
        needle = query.strip()

        results = await self.source_manager.fetch_all(None, needle)
        self._log_results(results)
        merged = self.merge(results)

        used_fallback = False
        if not merged:
            self.logger.warning(f"No live articles for search '{needle}', searching fallback articles")
            merged = sort_by_recency(self.fallback.generate_mixed())
            used_fallback = True

        matches = [article for article in merged if article.matches(needle)]
        start = (page - 1) * page_size

        self.logger.info(f"Search '{needle}' matched {len(matches)} of {len(merged)} articles")
        return AggregateResult(
            articles=matches[start:start + page_size],
            total_results=len(matches),
            used_fallback=used_fallback,
            source_results=results
        )
