"""
Source factory and manager for creating and managing news sources.

This module provides the factory pattern for creating UniversalNewsSource
instances and a manager for coordinating all sources.
"""

import asyncio
import logging
from typing import Type, Any, Optional

from newsgrid.config.settings import Settings
from newsgrid.models.domain import NewsCategory
from newsgrid.sources import UniversalNewsSource, SourceConfig, SourceAdapter, SourceResult, DataFetcher
from newsgrid.sources.fetchers import JSONAPIFetcher, HackerNewsFetcher, MockFetcher
from newsgrid.sources.adapters import HeadlineAPIAdapter, FeedBridgeAdapter, HackerNewsAdapter

logger = logging.getLogger(__name__)


class SourceFactory:
    """Factory for creating UniversalNewsSource instances"""

    def __init__(self, settings: Optional[Settings] = None, feeds: Optional[dict[str, list[str]]] = None):
        self.settings = settings or Settings()
        self.feeds = feeds or {}

        self._fetcher_registry: dict[str, Type[DataFetcher]] = {
            'json_api': JSONAPIFetcher,
            'hackernews': HackerNewsFetcher,
            'mock': MockFetcher
        }

        self._adapter_registry: dict[str, Type[SourceAdapter]] = {
            'HeadlineAPIAdapter': HeadlineAPIAdapter,
            'FeedBridgeAdapter': FeedBridgeAdapter,
            'HackerNewsAdapter': HackerNewsAdapter
        }

    @property
    def adapter_names(self) -> set[str]:
        return set(self._adapter_registry)

    def create_source(self, config: SourceConfig) -> UniversalNewsSource:
        """Create a UniversalNewsSource from configuration"""
        try:
            fetcher = self._create_fetcher(config)
            adapter = self._create_adapter(config)
            return UniversalNewsSource(config, fetcher, adapter)

        except Exception as e:
            logger.error(f"Error creating source {config.name}: {e}")
            raise

    def _create_fetcher(self, config: SourceConfig) -> DataFetcher:
        fetcher_class = self._fetcher_registry.get(config.source_type)
        if not fetcher_class:
            raise ValueError(f"Unknown source type: {config.source_type}")

        # Handle special cases for fetcher initialization
        if fetcher_class is MockFetcher:
            return MockFetcher(
                config.adapter_config.get('mock_data', {}),
                by_url=config.adapter_config.get('mock_by_url', False)
            )
        if fetcher_class is HackerNewsFetcher:
            return HackerNewsFetcher(timeout=self.settings.request_timeout, base_url=config.url)
        return fetcher_class(timeout=self.settings.request_timeout)

    def _create_adapter(self, config: SourceConfig) -> SourceAdapter:
        adapter_class = self._adapter_registry.get(config.adapter_class)
        if not adapter_class:
            raise ValueError(f"Unknown adapter class: {config.adapter_class}")

        options = config.adapter_config
        if adapter_class is HeadlineAPIAdapter:
            return HeadlineAPIAdapter(
                api_key=options.get('api_key', self.settings.newsapi_key),
                base_url=config.url or "https://newsapi.org/v2",
                country=options.get('country', self.settings.country),
                page_size=self.settings.default_page_size
            )
        if adapter_class is FeedBridgeAdapter:
            return FeedBridgeAdapter(
                bridge_url=config.url,
                feeds=options.get('feeds', self.feeds),
                max_items=options.get('max_items', 10),
                source_name=options.get('source_name', "RSS Feed")
            )
        if adapter_class is HackerNewsAdapter:
            return HackerNewsAdapter(
                base_url=config.url or "https://hacker-news.firebaseio.com/v0",
                max_items=options.get('max_items', 10)
            )
        return adapter_class(**options)

    def register_fetcher(self, name: str, fetcher_class: Type[DataFetcher]):
        """Register a custom fetcher class"""
        self._fetcher_registry[name] = fetcher_class

    def register_adapter(self, name: str, adapter_class: Type[SourceAdapter]):
        """Register a custom adapter class"""
        self._adapter_registry[name] = adapter_class


class SourceManager:
    """Manager for coordinating all news sources"""

    def __init__(self, factory: SourceFactory = None):
        self.factory = factory or SourceFactory()
        self.sources: dict[str, UniversalNewsSource] = {}
        self.logger = logging.getLogger(__name__)

    def add_source(self, config: SourceConfig) -> bool:
        """Add a source to the manager"""
        try:
            if config.name in self.sources:
                self.logger.warning(f"Source {config.name} already exists, replacing")

            source = self.factory.create_source(config)
            self.sources[config.name] = source
            self.logger.info(f"Added source: {config.name}")
            return True

        except Exception as e:
            self.logger.error(f"Failed to add source {config.name}: {e}")
            return False

    def add_news_source(self, source: UniversalNewsSource) -> None:
        """Add an already-built source"""
        self.sources[source.config.name] = source

    def get_source(self, name: str) -> Optional[UniversalNewsSource]:
        """Get a source by name"""
        return self.sources.get(name)

    def get_enabled_sources(self) -> list[UniversalNewsSource]:
        """Get all enabled sources"""
        return [source for source in self.sources.values() if source.is_enabled()]

    def get_all_sources(self) -> list[UniversalNewsSource]:
        """Get all sources (enabled and disabled)"""
        return list(self.sources.values())

    def get_applicable_sources(self, category: Optional[NewsCategory]) -> list[UniversalNewsSource]:
        """Get enabled sources that cover the category"""
        return [source for source in self.sources.values() if source.applies_to(category)]

    async def fetch_all(self, category: Optional[NewsCategory] = None,
                        query: Optional[str] = None) -> list[SourceResult]:
        """Ask every applicable source concurrently; one source never blocks another"""
        sources = self.get_applicable_sources(category)
        if not sources:
            self.logger.info(f"No sources cover category {category.value if category else 'general'}")
            return []

        results = await asyncio.gather(*(source.get_articles(category, query) for source in sources))

        total = sum(len(result.items) for result in results)
        self.logger.info(f"Fetched {total} articles from {len(sources)} sources")
        return list(results)

    async def close_all(self) -> None:
        """Close every source's fetcher"""
        for name, source in self.sources.items():
            try:
                await source.close()
            except Exception as cleanup_error:
                self.logger.warning(f"Error closing fetcher for {name}: {cleanup_error}")

    def get_source_status(self) -> dict[str, dict[str, Any]]:
        """Get status information for all sources"""
        status = {}

        for name, source in self.sources.items():
            status[name] = {
                'enabled': source.is_enabled(),
                'available': source.adapter.is_available(),
                'url': source.config.url,
                'adapter_class': source.config.adapter_class,
                'source_type': source.config.source_type
            }

        return status
