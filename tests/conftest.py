"""
Test configuration and fixtures for the news aggregator.

Sources are built from the real adapters on top of MockFetcher, so no test
ever reaches the network.
"""

import random
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from newsgrid.main import app
from newsgrid.config import ConfigManager, Settings
from newsgrid.services import Aggregator, FallbackGenerator, NewsService
from newsgrid.sources import SourceConfig, UniversalNewsSource
from newsgrid.sources.adapters import HeadlineAPIAdapter, FeedBridgeAdapter, HackerNewsAdapter
from newsgrid.sources.factory import SourceFactory, SourceManager
from newsgrid.sources.fetchers import MockFetcher

BRIDGE_URL = "https://bridge.example.com/api.json"
HN_BASE_URL = "https://hn.example.com/v0"
NEWSAPI_BASE_URL = "https://newsapi.example.com/v2"
BASE_TIME = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def settings():
    """Settings with no headline API key"""
    return Settings(newsapi_key=None, config_file="does-not-exist.yaml")


@pytest.fixture
def fallback():
    return FallbackGenerator()


@pytest.fixture
def feed_item():
    """Build one feed bridge item published `hours_ago` hours before BASE_TIME"""
    def _make(n: int, title: str = None, description: str = None, hours_ago: int = None, **extra):
        published = BASE_TIME - timedelta(hours=n if hours_ago is None else hours_ago)
        item = {
            "title": f"Feed story {n}" if title is None else title,
            "pubDate": published.strftime('%Y-%m-%d %H:%M:%S'),
            "link": f"https://feed.example.com/story-{n}",
            "guid": f"https://feed.example.com/story-{n}",
            "author": "",
            "thumbnail": "",
            "description": description or f"<p>Summary of feed story {n}</p>",
            "content": description or f"<p>Summary of feed story {n}</p>",
            "enclosure": {},
        }
        item.update(extra)
        return item
    return _make


@pytest.fixture
def feed_payload():
    def _make(items, title="Example Feed"):
        return {
            "status": "ok",
            "feed": {"url": "https://feed.example.com/rss.xml", "title": title},
            "items": items,
        }
    return _make


@pytest.fixture
def hn_story():
    def _make(story_id: int, hours_ago: int = 0, **overrides):
        story = {
            "id": story_id,
            "type": "story",
            "title": f"HN story {story_id}",
            "url": f"https://hn-link.example.com/{story_id}",
            "time": int((BASE_TIME - timedelta(hours=hours_ago)).timestamp()),
            "by": f"user{story_id}",
            "score": 100,
        }
        story.update(overrides)
        return story
    return _make


@pytest.fixture
def newsapi_payload():
    return {
        "status": "ok",
        "totalResults": 3,
        "articles": [
            {
                "source": {"id": "bbc-news", "name": "BBC News"},
                "author": "Jane Doe",
                "title": "Markets rally as technology shares climb",
                "description": "Stocks rose across the board on Monday.",
                "url": "https://bbc.example.com/markets-rally",
                "urlToImage": "https://bbc.example.com/markets.jpg",
                "publishedAt": "2024-01-15T10:30:00Z",
                "content": "Stocks rose across the board on Monday as technology shares led the way..."
            },
            {
                "source": {"id": None, "name": "Reuters"},
                "author": None,
                "title": "Central bank holds rates steady",
                "description": None,
                "url": "https://reuters.example.com/rates",
                "urlToImage": None,
                "publishedAt": "2024-01-15T09:00:00Z",
                "content": None
            },
            {
                "source": {"id": None, "name": "[Removed]"},
                "author": None,
                "title": "[Removed]",
                "description": "[Removed]",
                "url": "https://removed.com",
                "urlToImage": None,
                "publishedAt": "1970-01-01T00:00:00Z",
                "content": "[Removed]"
            }
        ]
    }


@pytest.fixture
def make_feed_source():
    """Feed bridge source over canned data for the given categories"""
    def _make(payload, categories=("general",), name="feed_bridge", max_items=10):
        feeds = {category: [f"https://feed.example.com/{category}.xml"] for category in categories}
        config = SourceConfig(name=name, adapter_class="FeedBridgeAdapter", url=BRIDGE_URL)
        adapter = FeedBridgeAdapter(BRIDGE_URL, feeds, max_items=max_items)
        return UniversalNewsSource(config, MockFetcher(payload), adapter)
    return _make


@pytest.fixture
def make_hn_source():
    """HackerNews source resolving ids and items from a URL-keyed mock"""
    def _make(stories, name="hackernews"):
        data = {f"{HN_BASE_URL}/topstories.json": [story["id"] for story in stories]}
        data.update({f"item/{story['id']}": story for story in stories})
        config = SourceConfig(name=name, source_type="hackernews",
                              adapter_class="HackerNewsAdapter", url=HN_BASE_URL)
        return UniversalNewsSource(config, MockFetcher(data, by_url=True), HackerNewsAdapter(HN_BASE_URL))
    return _make


@pytest.fixture
def make_headline_source():
    def _make(payload, api_key="test-key", name="headline_api"):
        config = SourceConfig(name=name, adapter_class="HeadlineAPIAdapter", url=NEWSAPI_BASE_URL)
        adapter = HeadlineAPIAdapter(api_key, base_url=NEWSAPI_BASE_URL)
        return UniversalNewsSource(config, MockFetcher(payload), adapter)
    return _make


@pytest.fixture
def make_aggregator(settings, fallback):
    """Aggregator over already-built sources, with a seeded shuffle"""
    def _make(*sources, page_size=20, seed=7):
        manager = SourceManager(SourceFactory(settings))
        for source in sources:
            manager.add_news_source(source)
        return Aggregator(manager, fallback, default_page_size=page_size, rng=random.Random(seed))
    return _make


@pytest.fixture
def make_service(make_aggregator):
    def _make(*sources, page_size=20):
        return NewsService(make_aggregator(*sources, page_size=page_size), default_page_size=page_size)
    return _make


@pytest.fixture
def config_manager():
    """Create a config manager for testing"""
    return ConfigManager()


@pytest.fixture
def news_service(make_service, make_feed_source, make_hn_source, feed_payload, feed_item, hn_story):
    """Service over a general feed and HackerNews"""
    feed = make_feed_source(
        feed_payload([feed_item(n) for n in range(1, 6)]),
        categories=("general", "business")
    )
    hn = make_hn_source([hn_story(100 + n, hours_ago=10 + n) for n in range(3)])
    return make_service(feed, hn)


@pytest.fixture
def test_app(news_service, settings):
    """Create a test app with all components initialized"""
    app.state.settings = settings
    app.state.news_service = news_service
    app.state.source_manager = news_service.aggregator.source_manager
    return app


@pytest.fixture
def client(test_app):
    """Create a test client with the test app"""
    return TestClient(test_app)
