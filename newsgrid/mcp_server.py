"""
Simple MCP server for the news aggregator.
Exposes the headlines and search endpoints as tools.
"""

import asyncio
import logging
import os
import sys
from typing import Any, Optional

from fastmcp import FastMCP
import httpx

# Configure logging
logging.basicConfig(level=logging.INFO, stream=sys.stderr)
logger = logging.getLogger(__name__)

# Configuration
NEWSGRID_API_BASE_URL = os.getenv("NEWSGRID_API_BASE_URL", "http://localhost:8000")
MAX_LISTED = 10


# Create the MCP server
server = FastMCP("newsgrid")


def format_articles(envelope: dict[str, Any], heading: str) -> str:
    """Render a news envelope as a plain-text summary"""
    articles = envelope.get('articles') or []
    if not articles:
        return "No articles found."

    total = envelope.get('totalResults', len(articles))
    summary = f"{heading} ({len(articles)} shown, {total} total):\n\n"

    for i, article in enumerate(articles[:MAX_LISTED], 1):
        source = (article.get('source') or {}).get('name', 'Unknown')
        summary += f"{i}. {article.get('title', 'No title')}\n"
        summary += f"   Source: {source} | Published: {article.get('publishedAt', 'Unknown')}\n"
        summary += f"   Link: {article.get('url', '')}\n"
        description = article.get('description')
        if description:
            preview = description[:100] + "..." if len(description) > 100 else description
            summary += f"   Preview: {preview}\n"
        summary += "\n"

    if len(articles) > MAX_LISTED:
        summary += f"... and {len(articles) - MAX_LISTED} more articles.\n"

    return summary


async def _get_envelope(path: str, params: dict[str, Any]) -> dict[str, Any]:
    async with httpx.AsyncClient(timeout=30.0) as client:
        url = f"{NEWSGRID_API_BASE_URL}{path}"
        logger.info(f"Making request to {url} with params: {params}")
        response = await client.get(url, params=params)
        response.raise_for_status()
        return response.json()


@server.tool(
    name="get_top_headlines",
    description="Get the latest headlines, optionally for one category.",
)
async def get_top_headlines(category: Optional[str] = None) -> str:
    """
    Get the latest headlines.

    Args:
        category: One of general, business, entertainment, health, science,
            sports, technology, world, politics (default: general)

    Returns:
        Formatted list of headlines
    """
    params = {"category": category} if category else {}
    try:
        envelope = await _get_envelope("/news/headlines", params)
        return format_articles(envelope, f"Top headlines for {category or 'general'}")
    except httpx.HTTPStatusError as e:
        error_msg = f"HTTP error {e.response.status_code}: {e.response.text}"
        logger.error(error_msg)
        return f"Error retrieving headlines: {error_msg}"
    except Exception as e:
        logger.error(f"Error retrieving headlines: {e}")
        return f"Error retrieving headlines: {e}"


@server.tool(
    name="search_news",
    description="Search recent articles by keyword in title, description or content.",
)
async def search_news(query: str, page: int = 1, page_size: int = 20) -> str:
    """
    Search recent articles.

    Args:
        query: Text to look for (case-insensitive)
        page: 1-based page number (default: 1)
        page_size: Articles per page (default: 20)

    Returns:
        Formatted list of matching articles
    """
    params = {"q": query, "page": page, "page_size": page_size}
    try:
        envelope = await _get_envelope("/news/search", params)
        return format_articles(envelope, f"Results for '{query}' (page {page})")
    except httpx.HTTPStatusError as e:
        error_msg = f"HTTP error {e.response.status_code}: {e.response.text}"
        logger.error(error_msg)
        return f"Error searching news: {error_msg}"
    except Exception as e:
        logger.error(f"Error searching news: {e}")
        return f"Error searching news: {e}"


async def main():
    """Main entry point for the MCP server"""
    try:
        logger.info("Starting Newsgrid MCP Server...")
        logger.info(f"Connecting to newsgrid API at: {NEWSGRID_API_BASE_URL}")
        await server.run_stdio_async()
    except KeyboardInterrupt:
        logger.info("Shutting down MCP server...")


if __name__ == "__main__":
    asyncio.run(main())
