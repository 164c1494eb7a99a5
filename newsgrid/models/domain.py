from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime, timezone
from typing import Optional, Union
from enum import Enum


class NewsCategory(str, Enum):
    """Closed set of categories an article can belong to"""
    GENERAL = "general"
    BUSINESS = "business"
    ENTERTAINMENT = "entertainment"
    HEALTH = "health"
    SCIENCE = "science"
    SPORTS = "sports"
    TECHNOLOGY = "technology"
    WORLD = "world"
    POLITICS = "politics"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: Union[str, "NewsCategory", None]) -> Optional["NewsCategory"]:
        """Turn a raw category string into a member, None if blank or unknown"""
        if value is None or isinstance(value, cls):
            return value
        value = str(value).strip().lower()
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ArticleSource(CamelModel):
    """Display information about the outlet an article came from"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: Optional[str] = None
    name: str


class Article(CamelModel):
    """Canonical, adapter-independent news article"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    title: str = Field(min_length=1)
    description: str
    content: Optional[str] = None
    url: str = Field(min_length=1)
    image_url: Optional[str] = None
    published_at: datetime
    source: ArticleSource
    author: Optional[str] = None
    category: NewsCategory = NewsCategory.GENERAL

    @field_serializer('published_at')
    def serialize_published_at(self, value: datetime) -> str:
        return value.isoformat()

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match against title, description and content"""
        needle = query.lower()
        haystacks = (self.title, self.description, self.content or "")
        return any(needle in text.lower() for text in haystacks)


class RawArticle(CamelModel):
    """Partial article fields as emitted by a source adapter"""

    title: str
    url: str
    id: Optional[str] = None
    upstream_id: Optional[str] = None  # id of the item at its origin (story id, guid, ...)
    description: Optional[str] = None
    content: Optional[str] = None
    image_url: Optional[str] = None
    published_at: Optional[Union[datetime, str, int, float]] = None
    source_name: Optional[str] = None
    source_id: Optional[str] = None
    author: Optional[str] = None
    category: Optional[NewsCategory] = None

    @field_validator('title', 'url')
    @classmethod
    def require_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @classmethod
    def from_article(cls, article: Article) -> "RawArticle":
        """Rebuild the partial shape of an already-normalized article"""
        return cls(
            id=article.id,
            title=article.title,
            url=article.url,
            description=article.description,
            content=article.content,
            image_url=article.image_url,
            published_at=article.published_at,
            source_name=article.source.name,
            source_id=article.source.id,
            author=article.author,
            category=article.category
        )


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
