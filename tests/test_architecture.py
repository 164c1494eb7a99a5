"""
Test the source architecture components.
"""

import copy

import aiohttp
import pytest
from unittest.mock import AsyncMock, patch

from newsgrid.config import DEFAULT_CONFIG, Settings
from newsgrid.models.domain import NewsCategory, RawArticle
from newsgrid.sources import SourceAdapter, SourceConfig, SourceRequest, UniversalNewsSource, FetchStatus, SourceResult
from newsgrid.sources.adapters import HeadlineAPIAdapter, FeedBridgeAdapter, HackerNewsAdapter
from newsgrid.sources.factory import SourceFactory, SourceManager
from newsgrid.sources.fetchers import MockFetcher, HackerNewsFetcher, JSONAPIFetcher


class TestUniversalNewsSource:
    """Test the fetcher + adapter orchestration and its explicit results"""

    @pytest.mark.asyncio
    async def test_success(self, make_feed_source, feed_payload, feed_item):
        source = make_feed_source(feed_payload([feed_item(1), feed_item(2)]))

        result = await source.get_articles(NewsCategory.GENERAL)

        assert result.status == FetchStatus.SUCCESS
        assert result.ok is True
        assert result.source_name == "feed_bridge"
        assert [item.title for item in result.items] == ["Feed story 1", "Feed story 2"]

    @pytest.mark.asyncio
    async def test_empty(self, make_feed_source, feed_payload):
        source = make_feed_source(feed_payload([]))

        result = await source.get_articles(None)

        assert result.status == FetchStatus.EMPTY
        assert result.items == []

    @pytest.mark.asyncio
    async def test_network_error_becomes_failure(self, make_feed_source):
        source = make_feed_source(aiohttp.ClientError("connection refused"))

        result = await source.get_articles(NewsCategory.GENERAL)

        assert result.status == FetchStatus.FAILURE
        assert "connection refused" in result.error
        assert result.items == []

    @pytest.mark.asyncio
    async def test_upstream_error_payload_becomes_failure(self, make_headline_source):
        source = make_headline_source({
            "status": "error",
            "code": "apiKeyInvalid",
            "message": "Your API key is invalid or incorrect."
        })

        result = await source.get_articles(NewsCategory.BUSINESS)

        assert result.status == FetchStatus.FAILURE
        assert "apiKeyInvalid" in result.error

    @pytest.mark.asyncio
    async def test_missing_key_skips_network_call(self, make_headline_source, newsapi_payload):
        source = make_headline_source(newsapi_payload, api_key=None)

        result = await source.get_articles(NewsCategory.TECHNOLOGY)

        assert result.status == FetchStatus.UNAVAILABLE
        assert source.fetcher.calls == []

    @pytest.mark.asyncio
    async def test_placeholder_key_skips_network_call(self, make_headline_source, newsapi_payload):
        source = make_headline_source(newsapi_payload, api_key="YOUR_API_KEY_HERE")

        result = await source.get_articles(None)

        assert result.status == FetchStatus.UNAVAILABLE
        assert source.fetcher.calls == []

    @pytest.mark.asyncio
    async def test_uncovered_category_is_skipped(self, make_hn_source, hn_story):
        source = make_hn_source([hn_story(1)])

        result = await source.get_articles(NewsCategory.SPORTS)

        assert result.status == FetchStatus.SKIPPED
        assert source.fetcher.calls == []

    @pytest.mark.asyncio
    async def test_request_params_reach_fetcher(self, make_feed_source, feed_payload):
        source = make_feed_source(feed_payload([]), categories=("science",))

        await source.get_articles(NewsCategory.SCIENCE)

        assert source.fetcher.calls == [
            ("https://bridge.example.com/api.json", {"rss_url": "https://feed.example.com/science.xml"})
        ]

    def test_applies_to_respects_enabled_flag(self, make_feed_source, feed_payload):
        source = make_feed_source(feed_payload([]))
        assert source.applies_to(NewsCategory.GENERAL) is True

        source.config.enabled = False
        assert source.applies_to(NewsCategory.GENERAL) is False


class TestSourceFactory:
    """Test building sources from configuration"""

    def test_create_default_sources(self):
        settings = Settings(newsapi_key="abc123", country="gb")
        config = copy.deepcopy(DEFAULT_CONFIG)
        factory = SourceFactory(settings, feeds=config['feeds'])

        sources = {
            name: factory.create_source(SourceConfig(name=name, **data))
            for name, data in config['sources'].items()
        }

        headline = sources['headline_api']
        assert isinstance(headline, UniversalNewsSource)
        assert isinstance(headline.adapter, HeadlineAPIAdapter)
        assert isinstance(headline.fetcher, JSONAPIFetcher)
        assert headline.adapter.api_key == "abc123"
        assert headline.adapter.country == "gb"
        assert headline.adapter.is_available() is True

        feed = sources['feed_bridge']
        assert isinstance(feed.adapter, FeedBridgeAdapter)
        assert feed.adapter.bridge_url == "https://api.rss2json.com/v1/api.json"
        assert feed.adapter.supports(NewsCategory.POLITICS) is True

        hn = sources['hackernews']
        assert isinstance(hn.adapter, HackerNewsAdapter)
        assert isinstance(hn.fetcher, HackerNewsFetcher)
        assert hn.fetcher.base_url == "https://hacker-news.firebaseio.com/v0"

    def test_create_mock_source(self):
        factory = SourceFactory(Settings(newsapi_key=None))
        config = SourceConfig(
            name="offline",
            source_type="mock",
            adapter_class="FeedBridgeAdapter",
            url="https://bridge.example.com",
            adapter_config={"mock_data": {"status": "ok", "items": []}, "feeds": {"general": ["x"]}}
        )

        source = factory.create_source(config)

        assert isinstance(source.fetcher, MockFetcher)
        assert source.fetcher.mock_data == {"status": "ok", "items": []}

    def test_unknown_adapter_raises(self):
        factory = SourceFactory(Settings(newsapi_key=None))
        config = SourceConfig(name="bad", adapter_class="NoSuchAdapter", url="https://x")

        with pytest.raises(ValueError, match="Unknown adapter class"):
            factory.create_source(config)

    def test_unknown_source_type_raises(self):
        factory = SourceFactory(Settings(newsapi_key=None))
        config = SourceConfig(name="bad", source_type="ftp", url="https://x")

        with pytest.raises(ValueError, match="Unknown source type"):
            factory.create_source(config)

    def test_headline_key_from_adapter_config_wins(self):
        factory = SourceFactory(Settings(newsapi_key="from-env"))
        config = SourceConfig(name="headline_api", adapter_class="HeadlineAPIAdapter",
                              url="https://newsapi.org/v2", adapter_config={"api_key": "from-file"})

        source = factory.create_source(config)

        assert source.adapter.api_key == "from-file"

    @pytest.mark.asyncio
    async def test_registered_custom_fetcher_and_adapter(self):
        """Test that registered classes are used to build and run a source"""

        class StaticFetcher:
            def __init__(self, timeout=10):
                self.timeout = timeout
                self.calls = []

            async def fetch(self, url, **kwargs):
                self.calls.append(url)
                return [{"headline": "Local council opens new library", "link": "https://town.example.com/1"}]

            async def close(self):
                pass

        class TownAdapter(SourceAdapter):
            def __init__(self, endpoint, source_name="Town Gazette"):
                self.endpoint = endpoint
                self.source_name = source_name

            def build_request(self, category, query=None):
                return SourceRequest(url=self.endpoint)

            def adapt(self, raw_data, category=None):
                return [RawArticle(title=entry["headline"], url=entry["link"], source_name=self.source_name)
                        for entry in raw_data]

        factory = SourceFactory(Settings(newsapi_key=None, request_timeout=5))
        factory.register_fetcher("static", StaticFetcher)
        factory.register_adapter("TownAdapter", TownAdapter)
        config = SourceConfig(name="town", source_type="static", adapter_class="TownAdapter",
                              adapter_config={"endpoint": "https://town.example.com/feed"})

        source = factory.create_source(config)
        result = await source.get_articles(NewsCategory.GENERAL)

        assert "TownAdapter" in factory.adapter_names
        assert isinstance(source.fetcher, StaticFetcher)
        assert source.fetcher.timeout == 5
        assert isinstance(source.adapter, TownAdapter)
        assert source.fetcher.calls == ["https://town.example.com/feed"]
        assert result.status == FetchStatus.SUCCESS
        assert [item.title for item in result.items] == ["Local council opens new library"]
        assert result.items[0].source_name == "Town Gazette"


class TestSourceManager:
    """Test coordinating several sources"""

    def test_add_source_from_config(self, settings):
        manager = SourceManager(SourceFactory(settings, feeds={"general": ["https://feed"]}))

        assert manager.add_source(SourceConfig(name="feed_bridge", url="https://bridge")) is True
        assert manager.add_source(SourceConfig(name="broken", adapter_class="Nope")) is False

        assert manager.get_source("feed_bridge") is not None
        assert manager.get_source("broken") is None
        assert len(manager.get_enabled_sources()) == 1

    def test_applicable_sources(self, make_aggregator, make_feed_source, make_hn_source,
                                feed_payload, hn_story):
        feed = make_feed_source(feed_payload([]), categories=("general", "sports"))
        hn = make_hn_source([hn_story(1)])
        manager = make_aggregator(feed, hn).source_manager

        assert {s.config.name for s in manager.get_applicable_sources(None)} == {"feed_bridge", "hackernews"}
        assert {s.config.name for s in manager.get_applicable_sources(NewsCategory.TECHNOLOGY)} == {"hackernews"}
        assert {s.config.name for s in manager.get_applicable_sources(NewsCategory.SPORTS)} == {"feed_bridge"}
        assert manager.get_applicable_sources(NewsCategory.POLITICS) == []

    @pytest.mark.asyncio
    async def test_fetch_all_isolates_failures(self, make_aggregator, make_feed_source, make_hn_source, hn_story):
        failing = make_feed_source(aiohttp.ClientError("timeout"))
        hn = make_hn_source([hn_story(1), hn_story(2)])
        manager = make_aggregator(failing, hn).source_manager

        results = await manager.fetch_all(NewsCategory.GENERAL)

        by_name = {result.source_name: result for result in results}
        assert by_name["feed_bridge"].status == FetchStatus.FAILURE
        assert by_name["hackernews"].status == FetchStatus.SUCCESS
        assert len(by_name["hackernews"].items) == 2

    @pytest.mark.asyncio
    async def test_fetch_all_without_sources(self, make_aggregator):
        manager = make_aggregator().source_manager
        assert await manager.fetch_all(NewsCategory.WORLD) == []

    @pytest.mark.asyncio
    async def test_close_all_tolerates_errors(self, make_aggregator, make_feed_source, feed_payload):
        source = make_feed_source(feed_payload([]))
        source.fetcher.close = AsyncMock(side_effect=RuntimeError("already closed"))
        manager = make_aggregator(source).source_manager

        await manager.close_all()

        source.fetcher.close.assert_awaited_once()

    def test_source_status(self, make_aggregator, make_headline_source, newsapi_payload):
        manager = make_aggregator(make_headline_source(newsapi_payload, api_key=None)).source_manager

        status = manager.get_source_status()

        assert status["headline_api"]["enabled"] is True
        assert status["headline_api"]["available"] is False
        assert status["headline_api"]["adapter_class"] == "HeadlineAPIAdapter"


class TestHackerNewsFetcher:
    """Test concurrent story detail fetching"""

    @pytest.mark.asyncio
    async def test_failed_items_are_discarded(self):
        fetcher = HackerNewsFetcher(base_url="https://hn.example.com/v0")

        async def fake_fetch(url, **kwargs):
            if url.endswith("/2.json"):
                raise aiohttp.ClientError("boom")
            story_id = int(url.rsplit("/", 1)[1].split(".")[0])
            return {"id": story_id, "title": f"Story {story_id}"}

        with patch.object(fetcher, "fetch", side_effect=fake_fetch) as mock_fetch:
            stories = await fetcher.fetch_story_details([1, 2, 3])

        assert [story["id"] for story in stories] == [1, 3]
        assert mock_fetch.call_count == 3
        await fetcher.close()

    @pytest.mark.asyncio
    async def test_null_items_are_discarded(self):
        fetcher = HackerNewsFetcher(base_url="https://hn.example.com/v0")

        with patch.object(fetcher, "fetch", AsyncMock(side_effect=[{"id": 1}, None])):
            stories = await fetcher.fetch_story_details([1, 2])

        assert stories == [{"id": 1}]


class TestSourceResult:
    def test_from_items(self):
        assert SourceResult.from_items("x", []).status == FetchStatus.EMPTY
        assert SourceResult.from_items("x", []).ok is False
