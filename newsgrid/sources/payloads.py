"""
Typed views of the upstream payloads.

Each upstream sends loosely-typed JSON. These models are the parse/validate
step at the adapter boundary: adapters validate raw JSON into one of these
before building RawArticles, so untyped dicts never travel further.
"""

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from newsgrid.models.domain import CamelModel


class NewsAPISource(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None


class NewsAPIArticle(CamelModel):
    """One entry of the headline API's articles[]"""
    source: NewsAPISource = Field(default_factory=NewsAPISource)
    author: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    url_to_image: Optional[str] = None
    published_at: Optional[str] = None
    content: Optional[str] = None


class NewsAPIResponse(CamelModel):
    """Body of /top-headlines and /everything"""
    status: Literal["ok", "error"]
    total_results: int = 0
    articles: list[Any] = Field(default_factory=list)  # entries validated one by one
    code: Optional[str] = None
    message: Optional[str] = None


class FeedBridgeEnclosure(BaseModel):
    model_config = ConfigDict(extra='ignore')

    link: Optional[str] = None
    type: Optional[str] = None


class FeedBridgeItem(BaseModel):
    """One entry of the rss-to-json bridge's items[]"""
    model_config = ConfigDict(extra='ignore')

    title: Optional[str] = None
    pubDate: Optional[str] = None
    link: Optional[str] = None
    guid: Optional[str] = None
    author: Optional[str] = None
    thumbnail: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    enclosure: Optional[Union[FeedBridgeEnclosure, list]] = None

    @property
    def image_url(self) -> Optional[str]:
        if self.thumbnail:
            return self.thumbnail
        if isinstance(self.enclosure, FeedBridgeEnclosure):
            return self.enclosure.link or None
        return None


class FeedBridgeFeed(BaseModel):
    model_config = ConfigDict(extra='ignore')

    url: Optional[str] = None
    title: Optional[str] = None
    link: Optional[str] = None


class FeedBridgeResponse(BaseModel):
    """Body returned by the rss-to-json bridge"""
    model_config = ConfigDict(extra='ignore')

    status: str
    feed: FeedBridgeFeed = Field(default_factory=FeedBridgeFeed)
    items: list[Any] = Field(default_factory=list)
    message: Optional[str] = None


class HackerNewsItem(BaseModel):
    """Item returned by the discussion site's per-item endpoint"""
    model_config = ConfigDict(extra='ignore')

    id: int
    type: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None
    text: Optional[str] = None
    time: Optional[int] = None  # unix seconds
    by: Optional[str] = None
    score: Optional[int] = None
    descendants: Optional[int] = None
    deleted: bool = False
    dead: bool = False
