"""
Normalization of adapter output into canonical Articles.

Every optional field gets a default here, so the rest of the pipeline can
rely on a complete record. The mapping is pure: same input, same output,
and an already-normalized Article comes back unchanged.
"""

from datetime import datetime
from typing import Optional, Union

from newsgrid.models.domain import Article, ArticleSource, NewsCategory, RawArticle, utc_now
from newsgrid.utils.datetime import parse_datetime
from newsgrid.utils.hashing import slugify

DEFAULT_DESCRIPTION = "No description available."
DEFAULT_SOURCE_NAME = "Unknown Source"

PLACEHOLDER_IMAGES: dict[NewsCategory, str] = {
    NewsCategory.GENERAL: "https://images.unsplash.com/photo-1504711434969-e33886168f5c?w=800",
    NewsCategory.BUSINESS: "https://images.unsplash.com/photo-1611974789855-9c2a0a7236a3?w=800",
    NewsCategory.ENTERTAINMENT: "https://images.unsplash.com/photo-1489599558687-33b4b1ca7ac1?w=800",
    NewsCategory.HEALTH: "https://images.unsplash.com/photo-1559757148-5c350d0d3c56?w=800",
    NewsCategory.SCIENCE: "https://images.unsplash.com/photo-1532094349884-543bc11b234d?w=800",
    NewsCategory.SPORTS: "https://images.unsplash.com/photo-1461896836934-ffe607ba8211?w=800",
    NewsCategory.TECHNOLOGY: "https://images.unsplash.com/photo-1518709268805-4e9042af2176?w=800",
    NewsCategory.WORLD: "https://images.unsplash.com/photo-1569163139394-de4e4f43e4e3?w=800",
    NewsCategory.POLITICS: "https://images.unsplash.com/photo-1529107386315-e1a2ed48a620?w=800",
}


def placeholder_image(category: Optional[NewsCategory]) -> str:
    return PLACEHOLDER_IMAGES[category or NewsCategory.GENERAL]


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def derive_article_id(raw: RawArticle, category: NewsCategory, index: int, now: datetime) -> str:
    """Explicit id, else source + upstream id, else category + index + timestamp"""
    if _clean(raw.id):
        return raw.id.strip()
    if _clean(raw.upstream_id):
        return f"{slugify(raw.source_name or DEFAULT_SOURCE_NAME)}-{raw.upstream_id.strip()}"
    return f"{category.value}-{index}-{int(now.timestamp() * 1000)}"


def normalize_article(raw: Union[RawArticle, Article], index: int = 0,
                      now: Optional[datetime] = None) -> Article:
    """Fill every optional field of an adapter item to build a complete Article"""
    if isinstance(raw, Article):
        raw = RawArticle.from_article(raw)

    now = now or utc_now()
    category = raw.category or NewsCategory.GENERAL
    source_name = _clean(raw.source_name) or DEFAULT_SOURCE_NAME
    description = _clean(raw.description) or DEFAULT_DESCRIPTION

    return Article(
        id=derive_article_id(raw, category, index, now),
        title=raw.title,
        description=description,
        content=_clean(raw.content) or _clean(raw.description) or raw.title,
        url=raw.url,
        image_url=_clean(raw.image_url) or placeholder_image(category),
        published_at=parse_datetime(raw.published_at, default=now),
        source=ArticleSource(id=_clean(raw.source_id), name=source_name),
        author=_clean(raw.author) or source_name,
        category=category
    )


def normalize_articles(raws: list[Union[RawArticle, Article]],
                       now: Optional[datetime] = None) -> list[Article]:
    """Normalize a batch, sharing one reference time"""
    now = now or utc_now()
    return [normalize_article(raw, index=i, now=now) for i, raw in enumerate(raws)]
