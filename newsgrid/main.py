from fastapi import FastAPI, Request
from contextlib import asynccontextmanager
import logging
import os

from newsgrid.api.routes import router
from newsgrid.config import ConfigManager, Settings
from newsgrid.services import Aggregator, FallbackGenerator, NewsService
from newsgrid.sources.factory import SourceFactory, SourceManager

SERVICE_NAME = "Newsgrid"


def configure_logging(settings: Settings) -> None:
    """Configure root logging once for the process"""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        log_dir = os.path.dirname(settings.log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(settings.log_file))

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


settings = Settings()
configure_logging(settings)
logger = logging.getLogger(__name__)


def load_config(settings: Settings) -> ConfigManager:
    """Load source and feed configuration, falling back to the built-in defaults"""
    config_manager = ConfigManager()
    if os.path.exists(settings.config_file):
        logger.info(f"Loading configuration from {settings.config_file}")
        if config_manager.load_from_file(settings.config_file):
            return config_manager
        logger.warning("Failed to load configuration file, using defaults")
    else:
        logger.warning(f"Configuration file {settings.config_file} not found, using defaults")

    config_manager.load_defaults()
    return config_manager


def build_news_service(settings: Settings, config_manager: ConfigManager) -> NewsService:
    """Wire sources, aggregator and façade together once per process"""
    factory = SourceFactory(settings, feeds=config_manager.get_feed_map())
    source_manager = SourceManager(factory)

    for error in config_manager.validate_configs(factory.adapter_names):
        logger.warning(f"Configuration problem: {error}")

    for config in config_manager.get_enabled_source_configs():
        if not source_manager.add_source(config):
            logger.error(f"Failed to add source: {config.name}")

    aggregator = Aggregator(
        source_manager,
        FallbackGenerator(),
        default_page_size=settings.default_page_size
    )
    return NewsService(aggregator, default_page_size=settings.default_page_size)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events"""
    logger.info(f"Starting {SERVICE_NAME}...")

    try:
        config_manager = load_config(settings)
        news_service = build_news_service(settings, config_manager)

        # Make components available to routes
        app.state.settings = settings
        app.state.config_manager = config_manager
        app.state.news_service = news_service
        app.state.source_manager = news_service.aggregator.source_manager

        enabled = len(app.state.source_manager.get_enabled_sources())
        logger.info(f"{SERVICE_NAME} started with {enabled} enabled sources")

    except Exception as e:
        logger.error(f"Error during startup: {e}")
        raise

    yield

    logger.info(f"Shutting down {SERVICE_NAME}...")
    try:
        await app.state.news_service.close()
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


app = FastAPI(
    title=SERVICE_NAME,
    description="Multi-source news aggregation with category, search and fallback support",
    version="1.0.0",
    lifespan=lifespan
)

# Include API routes
app.include_router(router)


@app.get("/health")
async def health_check(request: Request):
    """Health check endpoint"""
    source_manager = getattr(request.app.state, 'source_manager', None)

    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "enabled_sources": len(source_manager.get_enabled_sources()) if source_manager else 0,
        "headline_api_configured": any(
            source.adapter.is_available() and source.config.adapter_class == 'HeadlineAPIAdapter'
            for source in source_manager.get_enabled_sources()
        ) if source_manager else False
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "newsgrid.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
