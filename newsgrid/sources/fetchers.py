"""
Data fetcher strategies for different transport protocols.

This module implements the DataFetcher strategies used to reach the
upstream JSON APIs (headline API, feed bridge, discussion site).
"""

import aiohttp
import logging
from typing import Any, Optional
import json
import asyncio


logger = logging.getLogger(__name__)

USER_AGENT = 'Newsgrid/1.0'


class JSONAPIFetcher:
    """Fetcher for JSON API endpoints"""

    def __init__(self, timeout: int = 10):
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session"""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self.session

    async def fetch(self, url: str, **kwargs) -> Any:
        """Fetch JSON data from the given URL"""
        session = await self._get_session()

        headers = kwargs.get('headers') or {}
        headers.setdefault('User-Agent', USER_AGENT)
        params = {k: str(v) for k, v in (kwargs.get('params') or {}).items() if v not in (None, '')}

        try:
            async with session.get(url, params=params, headers=headers) as response:
                # The headline API reports its own errors in a JSON body with a 4xx status,
                # so hand that body to the adapter instead of failing on the status alone
                if response.status >= 400 and response.content_type == 'application/json':
                    return await response.json()
                response.raise_for_status()
                return await response.json(content_type=None)

        except aiohttp.ClientError as e:
            logger.error(f"HTTP error fetching {url}: {e}")
            raise
        except json.JSONDecodeError as e:
            logger.error(f"JSON decode error for {url}: {e}")
            raise

    async def close(self):
        """Close the HTTP session"""
        if self.session and not self.session.closed:
            await self.session.close()
            self.session = None


class HackerNewsFetcher(JSONAPIFetcher):
    """Specialized fetcher for the HackerNews API that can fetch individual story details"""

    def __init__(self, timeout: int = 10, base_url: str = "https://hacker-news.firebaseio.com/v0"):
        super().__init__(timeout)
        self.base_url = base_url.rstrip('/')

    async def fetch_story_details(self, story_ids: list[int]) -> list[dict[str, Any]]:
        """Fetch details for multiple stories concurrently"""

        async def fetch_story(story_id: int) -> Optional[dict[str, Any]]:
            """Fetch a single story by ID"""
            url = f"{self.base_url}/item/{story_id}.json"
            try:
                return await self.fetch(url)
            except Exception as e:
                logger.error(f"Error fetching story {story_id}: {e}")
                return None

        # Fetch all stories concurrently; every call settles before we continue
        tasks = [fetch_story(story_id) for story_id in story_ids]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        # Filter out None results and exceptions
        return [result for result in results if isinstance(result, dict)]


class MockFetcher:
    """Mock fetcher for testing and offline use

    ``mock_data`` is either a single payload returned for every URL, or a
    dict keyed by URL when ``by_url`` is set. A payload that is an exception
    instance is raised instead of returned.
    """

    def __init__(self, mock_data: Any, by_url: bool = False):
        self.mock_data = mock_data
        self.by_url = by_url
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def fetch(self, url: str, **kwargs) -> Any:
        """Return mock data for testing"""
        self.calls.append((url, dict(kwargs.get('params') or {})))
        payload = self.mock_data.get(url) if self.by_url else self.mock_data
        if isinstance(payload, Exception):
            raise payload
        return payload

    async def fetch_story_details(self, story_ids: list[int]) -> list[dict[str, Any]]:
        """Resolve story ids against the mock payload, mimicking HackerNewsFetcher"""
        stories = []
        for story_id in story_ids:
            try:
                story = await self.fetch(f"item/{story_id}")
            except Exception as e:
                logger.error(f"Error fetching story {story_id}: {e}")
                continue
            if isinstance(story, dict):
                stories.append(story)
        return stories

    async def close(self):
        pass
