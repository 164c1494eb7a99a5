"""
News source framework implementing Strategy + Adapter patterns.

This module provides the core abstractions for fetching and transforming
news data from various upstreams in a unified way.
"""

from abc import ABC, abstractmethod
from typing import Protocol, Any, Optional
from enum import Enum
import logging
from dataclasses import dataclass, field

from newsgrid.models.domain import NewsCategory, RawArticle

logger = logging.getLogger(__name__)


# Strategy Pattern: How to fetch data
#
# Any class with async 'fetch' and 'close' methods matching these signatures
# can be plugged into a UniversalNewsSource (JSON APIs, mocks, ...).
class DataFetcher(Protocol):
    """Protocol defining how to fetch data from a source"""

    async def fetch(self, url: str, **kwargs) -> Any:
        """Fetch raw data from the given URL"""
        ...

    async def close(self) -> None:
        """Release any open connections"""
        ...


@dataclass
class SourceRequest:
    """A single outbound call an adapter wants made"""
    url: str
    params: dict[str, Any] = field(default_factory=dict)


class FetchStatus(str, Enum):
    """Outcome of asking one source for articles"""
    SUCCESS = "success"
    EMPTY = "empty"
    FAILURE = "failure"
    UNAVAILABLE = "unavailable"  # not configured, no call attempted
    SKIPPED = "skipped"  # does not cover the requested category


@dataclass
class SourceResult:
    """Explicit result of one source call, composed by the aggregator"""
    source_name: str
    status: FetchStatus
    items: list[RawArticle] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == FetchStatus.SUCCESS

    @classmethod
    def from_items(cls, source_name: str, items: list[RawArticle]) -> "SourceResult":
        status = FetchStatus.SUCCESS if items else FetchStatus.EMPTY
        return cls(source_name=source_name, status=status, items=items)


class UpstreamError(Exception):
    """Raised by an adapter when the upstream reports its own error status"""


# Adapter Pattern: How to transform source-specific data
class SourceAdapter(ABC):
    """Abstract base class for turning source-specific data into RawArticles"""

    def is_available(self) -> bool:
        """Whether the adapter is configured well enough to make a call"""
        return True

    def supports(self, category: Optional[NewsCategory]) -> bool:
        """Whether this source covers the given category (None means any/general)"""
        return True

    @abstractmethod
    def build_request(self, category: Optional[NewsCategory],
                      query: Optional[str] = None) -> Optional[SourceRequest]:
        """Build the outbound request for a category or free-text query"""
        pass

    @abstractmethod
    def adapt(self, raw_data: Any, category: Optional[NewsCategory] = None) -> list[RawArticle]:
        """Transform raw source data into a list of RawArticles"""
        pass

    async def adapt_async(self, raw_data: Any, fetcher: DataFetcher,
                          category: Optional[NewsCategory] = None) -> list[RawArticle]:
        """Transform raw data, making follow-up calls where the upstream needs them"""
        return self.adapt(raw_data, category)

    def get_source_name(self) -> str:
        """Get the human-readable name of this source"""
        return self.__class__.__name__.replace('Adapter', '')


@dataclass
class SourceConfig:
    """Configuration for a news source"""
    name: str
    enabled: bool = True
    source_type: str = "json_api"
    adapter_class: str = "FeedBridgeAdapter"
    url: str = ""
    headers: Optional[dict[str, str]] = None
    adapter_config: Optional[dict[str, Any]] = None

    def __post_init__(self):
        if self.headers is None:
            self.headers = {}
        if self.adapter_config is None:
            self.adapter_config = {}


class UniversalNewsSource:
    """
    Orchestrator that combines a DataFetcher strategy with a SourceAdapter
    to create a unified news source.
    """

    def __init__(self, config: SourceConfig, fetcher: DataFetcher, adapter: SourceAdapter):
        self.config = config
        self.fetcher = fetcher
        self.adapter = adapter
        self.logger = logging.getLogger(f"{__name__}.{config.name}")

    def applies_to(self, category: Optional[NewsCategory]) -> bool:
        """Check whether this source should run for the category"""
        return self.is_enabled() and self.adapter.supports(category)

    async def get_articles(self, category: Optional[NewsCategory] = None,
                           query: Optional[str] = None) -> SourceResult:
        """Fetch and transform articles from this source; never raises"""
        name = self.config.name

        if not self.adapter.is_available():
            self.logger.debug(f"{name} is not configured, skipping")
            return SourceResult(source_name=name, status=FetchStatus.UNAVAILABLE)

        if not self.adapter.supports(category):
            return SourceResult(source_name=name, status=FetchStatus.SKIPPED)

        try:
            request = self.adapter.build_request(category, query)
            if request is None:
                return SourceResult(source_name=name, status=FetchStatus.SKIPPED)

            self.logger.debug(f"Fetching articles from {name}: {request.url}")

            # Use strategy to fetch data
            raw_data = await self.fetcher.fetch(
                request.url,
                params=request.params,
                headers=dict(self.config.headers)
            )

            # Use adapter to transform data
            items = await self.adapter.adapt_async(raw_data, self.fetcher, category)

            self.logger.info(f"Retrieved {len(items)} articles from {name}")
            return SourceResult.from_items(name, items)

        except Exception as e:
            self.logger.error(f"Error fetching articles from {name}: {e}")
            return SourceResult(source_name=name, status=FetchStatus.FAILURE, error=str(e))

    def is_enabled(self) -> bool:
        """Check if this source is enabled"""
        return self.config.enabled

    async def close(self) -> None:
        await self.fetcher.close()
