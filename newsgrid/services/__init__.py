"""
Services layer for business logic.

This module contains the aggregation pipeline that sits between the
sources and the API layer: normalization, fallback generation,
aggregation and the query façade.
"""

from .aggregator import Aggregator, AggregateResult
from .fallback import FallbackGenerator
from .news_service import NewsService

__all__ = ['Aggregator', 'AggregateResult', 'FallbackGenerator', 'NewsService']
