"""
Source adapters for transforming different upstream formats into RawArticles.

This module implements the SourceAdapter classes for the headline API,
the rss-to-json feed bridge and the HackerNews item API.
"""

import html
import logging
import re
from typing import Any, Optional

from pydantic import ValidationError

from newsgrid.sources import SourceAdapter, SourceRequest, DataFetcher, UpstreamError
from newsgrid.sources.payloads import (
    NewsAPIArticle, NewsAPIResponse, FeedBridgeItem, FeedBridgeResponse, HackerNewsItem
)
from newsgrid.models.domain import NewsCategory, RawArticle
from newsgrid.utils.hashing import url_digest

logger = logging.getLogger(__name__)

# Value shipped in sample configs in place of a real key
PLACEHOLDER_API_KEY = "YOUR_API_KEY_HERE"

_TAG_RE = re.compile(r'<[^>]+>')
_SPACE_RE = re.compile(r'\s+')


def strip_html(value: Optional[str]) -> Optional[str]:
    """Reduce an HTML fragment to plain text"""
    if not value:
        return None
    text = _SPACE_RE.sub(' ', html.unescape(_TAG_RE.sub(' ', value))).strip()
    return text or None


class HeadlineAPIAdapter(SourceAdapter):
    """Adapter for the paid headline API (newsapi.org v2)"""

    # Categories the upstream understands; world and politics are not among them
    SUPPORTED_CATEGORIES = frozenset({
        NewsCategory.GENERAL, NewsCategory.BUSINESS, NewsCategory.ENTERTAINMENT,
        NewsCategory.HEALTH, NewsCategory.SCIENCE, NewsCategory.SPORTS,
        NewsCategory.TECHNOLOGY
    })

    def __init__(self, api_key: Optional[str], base_url: str = "https://newsapi.org/v2",
                 country: str = "us", page_size: int = 20, search_page_size: int = 100,
                 source_name: str = "NewsAPI"):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.country = country
        self.page_size = page_size
        self.search_page_size = search_page_size
        self.source_name = source_name

    def is_available(self) -> bool:
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY

    def supports(self, category: Optional[NewsCategory]) -> bool:
        return category is None or category in self.SUPPORTED_CATEGORIES

    def build_request(self, category: Optional[NewsCategory],
                      query: Optional[str] = None) -> Optional[SourceRequest]:
        if query:
            return SourceRequest(
                url=f"{self.base_url}/everything",
                params={
                    'apiKey': self.api_key,
                    'q': query,
                    'sortBy': 'publishedAt',
                    'language': 'en',
                    'page': 1,
                    'pageSize': self.search_page_size
                }
            )

        params = {
            'apiKey': self.api_key,
            'country': self.country,
            'page': 1,
            'pageSize': self.page_size
        }
        if category and category != NewsCategory.GENERAL:
            params['category'] = category.value
        return SourceRequest(url=f"{self.base_url}/top-headlines", params=params)

    def adapt(self, raw_data: Any, category: Optional[NewsCategory] = None) -> list[RawArticle]:
        """Transform a headline API body into RawArticles"""
        try:
            response = NewsAPIResponse.model_validate(raw_data)
        except ValidationError as e:
            raise UpstreamError(f"Invalid headline API payload: {e.error_count()} errors") from e

        if response.status == "error":
            raise UpstreamError(f"Headline API error {response.code}: {response.message}")

        items = []
        for i, entry in enumerate(response.articles):
            try:
                article = NewsAPIArticle.model_validate(entry)
            except ValidationError as e:
                logger.warning(f"Skipping malformed headline API article {i}: {e.error_count()} errors")
                continue

            # Taken-down articles keep their slot but have their fields replaced
            if not article.title or not article.url or article.title == "[Removed]":
                continue

            try:
                items.append(RawArticle(
                    title=article.title,
                    url=article.url,
                    upstream_id=url_digest(article.url),
                    description=article.description,
                    content=article.content,
                    image_url=article.url_to_image,
                    published_at=article.published_at,
                    source_name=article.source.name or self.source_name,
                    source_id=article.source.id,
                    author=article.author,
                    category=category or NewsCategory.GENERAL
                ))
            except ValidationError as e:
                logger.warning(f"Skipping headline API article {i}: {e.error_count()} errors")
                continue

        return items


class FeedBridgeAdapter(SourceAdapter):
    """Adapter for RSS feeds read through an rss-to-json bridge"""

    def __init__(self, bridge_url: str, feeds: dict[str, list[str]], max_items: int = 10,
                 source_name: str = "RSS Feed"):
        self.bridge_url = bridge_url
        self.feeds = {key: list(urls) for key, urls in feeds.items() if urls}
        self.max_items = max_items
        self.source_name = source_name

    def _feed_key(self, category: Optional[NewsCategory]) -> str:
        return (category or NewsCategory.GENERAL).value

    def supports(self, category: Optional[NewsCategory]) -> bool:
        return self._feed_key(category) in self.feeds

    def feed_urls(self, category: Optional[NewsCategory]) -> list[str]:
        return self.feeds.get(self._feed_key(category), [])

    def build_request(self, category: Optional[NewsCategory],
                      query: Optional[str] = None) -> Optional[SourceRequest]:
        urls = self.feed_urls(category)
        if not urls:
            return None
        # Exactly one feed per call keeps tail latency bounded
        return SourceRequest(url=self.bridge_url, params={'rss_url': urls[0]})

    def adapt(self, raw_data: Any, category: Optional[NewsCategory] = None) -> list[RawArticle]:
        """Transform a feed bridge body into RawArticles"""
        try:
            response = FeedBridgeResponse.model_validate(raw_data)
        except ValidationError as e:
            raise UpstreamError(f"Invalid feed bridge payload: {e.error_count()} errors") from e

        if response.status != "ok":
            raise UpstreamError(f"Feed bridge error: {response.message or response.status}")

        source_name = response.feed.title or self.source_name
        items = []
        for i, entry in enumerate(response.items[:self.max_items]):
            try:
                item = FeedBridgeItem.model_validate(entry)
            except ValidationError as e:
                logger.warning(f"Skipping malformed feed item {i}: {e.error_count()} errors")
                continue

            if not item.title or not item.link:
                continue

            description = strip_html(item.description) or strip_html(item.content)
            try:
                items.append(RawArticle(
                    title=strip_html(item.title) or item.title,
                    url=item.link,
                    upstream_id=url_digest(item.guid or item.link),
                    description=description,
                    content=strip_html(item.content) or description,
                    image_url=item.image_url,
                    published_at=item.pubDate,
                    source_name=source_name,
                    author=item.author or None,
                    category=category or NewsCategory.GENERAL
                ))
            except ValidationError as e:
                logger.warning(f"Skipping feed item {i}: {e.error_count()} errors")
                continue

        return items


class HackerNewsAdapter(SourceAdapter):
    """Adapter for the HackerNews API"""

    COVERED_CATEGORIES = frozenset({NewsCategory.GENERAL, NewsCategory.TECHNOLOGY})

    def __init__(self, base_url: str = "https://hacker-news.firebaseio.com/v0", max_items: int = 10,
                 source_name: str = "Hacker News"):
        self.base_url = base_url.rstrip('/')
        self.max_items = max_items
        self.source_name = source_name

    def supports(self, category: Optional[NewsCategory]) -> bool:
        return category is None or category in self.COVERED_CATEGORIES

    def build_request(self, category: Optional[NewsCategory],
                      query: Optional[str] = None) -> Optional[SourceRequest]:
        return SourceRequest(url=f"{self.base_url}/topstories.json")

    def story_ids(self, raw_data: Any) -> list[int]:
        """Take the ranked id prefix from the top stories list"""
        if not isinstance(raw_data, list):
            raise UpstreamError(f"Invalid HackerNews data format - expected list, got {type(raw_data)}")
        return [story_id for story_id in raw_data if isinstance(story_id, int)][:self.max_items]

    def adapt(self, raw_data: Any, category: Optional[NewsCategory] = None) -> list[RawArticle]:
        """Transform already-fetched story details into RawArticles"""
        if not isinstance(raw_data, list):
            logger.warning("Invalid HackerNews story data format")
            return []

        items = []
        for story in raw_data:
            try:
                item = HackerNewsItem.model_validate(story)
            except ValidationError as e:
                logger.warning(f"Skipping malformed HackerNews story: {e.error_count()} errors")
                continue

            # Ask HN and job posts have no outbound link
            if item.deleted or item.dead or not item.title or not item.url:
                continue

            try:
                items.append(RawArticle(
                    title=item.title,
                    url=item.url,
                    upstream_id=str(item.id),
                    description=strip_html(item.text),
                    content=strip_html(item.text),
                    published_at=item.time,
                    source_name=self.source_name,
                    author=item.by,
                    category=NewsCategory.TECHNOLOGY
                ))
            except ValidationError as e:
                logger.warning(f"Skipping HackerNews story {item.id}: {e.error_count()} errors")
                continue

        return items

    async def adapt_async(self, raw_data: Any, fetcher: DataFetcher,
                          category: Optional[NewsCategory] = None) -> list[RawArticle]:
        """Resolve the ranked ids into stories, then transform them"""
        story_ids = self.story_ids(raw_data)
        if not story_ids:
            return []

        fetch_details = getattr(fetcher, 'fetch_story_details', None)
        if fetch_details is None:
            raise UpstreamError(f"{type(fetcher).__name__} cannot fetch story details")

        stories = await fetch_details(story_ids)
        return self.adapt(stories, category)
