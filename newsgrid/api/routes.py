from fastapi import APIRouter, HTTPException, Request, Response, Depends, Query
from typing import Optional
import logging

from newsgrid.config.settings import Settings
from newsgrid.models.api import NewsResponse, CategoryInfo
from newsgrid.models.domain import Article, NewsCategory
from newsgrid.services import NewsService
from newsgrid.sources.factory import SourceManager

logger = logging.getLogger(__name__)

# Create router
router = APIRouter()


def get_news_service(request: Request) -> NewsService:
    """Get the news service instance from FastAPI app state"""
    if not hasattr(request.app.state, 'news_service'):
        raise HTTPException(status_code=500, detail="News service not initialized")
    return request.app.state.news_service


def get_source_manager(request: Request) -> SourceManager:
    """Get the source manager instance from FastAPI app state"""
    if not hasattr(request.app.state, 'source_manager'):
        raise HTTPException(status_code=500, detail="Source manager not initialized")
    return request.app.state.source_manager


def get_settings(request: Request) -> Settings:
    """Get the settings from FastAPI app state, or defaults"""
    return getattr(request.app.state, 'settings', None) or Settings()


def set_revalidate(response: Response, settings: Settings) -> None:
    """Let the host cache news responses for the revalidate window"""
    response.headers["Cache-Control"] = f"public, max-age={settings.revalidate_seconds}"


@router.get("/categories", response_model=list[CategoryInfo])
async def list_categories():
    """Return the closed set of categories with display names"""
    return [CategoryInfo(slug=category.value, name=category.display_name) for category in NewsCategory]


@router.get("/news/headlines", response_model=NewsResponse)
async def top_headlines(
    response: Response,
    category: Optional[str] = None,
    news_service: NewsService = Depends(get_news_service),
    settings: Settings = Depends(get_settings)
):
    """Top headlines, optionally scoped to a category"""
    result = await news_service.get_top_headlines(category)
    logger.info(f"Served {len(result.articles)} headlines for {category or 'general'}")
    set_revalidate(response, settings)
    return result


@router.get("/news/category/{category}", response_model=NewsResponse)
async def news_by_category(
    category: str,
    response: Response,
    news_service: NewsService = Depends(get_news_service),
    settings: Settings = Depends(get_settings)
):
    """Headlines for one category; unknown categories are a 404"""
    parsed = NewsCategory.parse(category)
    if parsed is None:
        raise HTTPException(status_code=404, detail=f"Unknown category: {category}")

    result = await news_service.get_news_by_category(parsed)
    set_revalidate(response, settings)
    return result


@router.get("/news/search", response_model=NewsResponse)
async def search_news(
    response: Response,
    q: str = "",
    page: int = Query(default=1, ge=1),
    page_size: Optional[int] = Query(default=None, ge=1, le=100),
    news_service: NewsService = Depends(get_news_service),
    settings: Settings = Depends(get_settings)
):
    """Free-text search over title, description and content"""
    result = await news_service.search_news(q, page=page, page_size=page_size)
    logger.info(f"Search '{q}' page {page}: {len(result.articles)} of {result.total_results} results")
    set_revalidate(response, settings)
    return result


@router.get("/news/articles/{article_id}", response_model=Article)
async def get_article(
    article_id: str,
    response: Response,
    news_service: NewsService = Depends(get_news_service),
    settings: Settings = Depends(get_settings)
):
    """Single article from the current headlines"""
    article = await news_service.get_article(article_id)
    if article is None:
        raise HTTPException(status_code=404, detail=f"Article not found: {article_id}")

    set_revalidate(response, settings)
    return article


@router.get("/admin/sources")
async def get_sources_status(
    source_manager: SourceManager = Depends(get_source_manager)
):
    """Get status of all sources"""
    try:
        return {
            "sources": source_manager.get_source_status(),
            "enabled_count": len(source_manager.get_enabled_sources()),
            "total_count": len(source_manager.get_all_sources())
        }
    except Exception as e:
        logger.error(f"Error getting sources status: {e}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to get sources status: {str(e)}"
        )
