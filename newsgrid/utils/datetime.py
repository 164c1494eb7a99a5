"""Datetime utilities."""

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional, Union

logger = logging.getLogger(__name__)

# Formats seen across the headline API, the feed bridge and raw RSS dates
DATETIME_FORMATS = [
    '%Y-%m-%d %H:%M:%S',         # feed bridge pubDate
    '%Y-%m-%dT%H:%M:%SZ',        # ISO 8601
    '%Y-%m-%dT%H:%M:%S.%fZ',     # ISO 8601 with microseconds
    '%Y-%m-%d'
]


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_datetime(value: Union[datetime, str, int, float, None],
                   default: Optional[datetime] = None) -> datetime:
    """Parse a datetime from the shapes upstreams send, falling back to default (or now)"""
    fallback = default or datetime.now(timezone.utc)
    if value is None or value == "":
        return fallback

    if isinstance(value, datetime):
        return ensure_utc(value)

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.warning(f"Could not parse unix timestamp: {value}")
            return fallback

    text = str(value).strip()

    try:
        return ensure_utc(datetime.fromisoformat(text.replace('Z', '+00:00')))
    except ValueError:
        pass

    for fmt in DATETIME_FORMATS:
        try:
            return ensure_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue

    # RFC 822, as used by RSS pubDate
    try:
        return ensure_utc(parsedate_to_datetime(text))
    except (TypeError, ValueError, IndexError):
        logger.warning(f"Could not parse datetime: {text}")
        return fallback
