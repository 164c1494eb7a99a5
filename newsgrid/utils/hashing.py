"""Hashing utilities."""

import hashlib
import re


def url_digest(url: str) -> str:
    """Short stable digest of a URL, used as an upstream id where none exists."""
    return hashlib.sha256(url.encode()).hexdigest()[:16]


def slugify(value: str) -> str:
    """Lowercase, dash-separated form of a display name."""
    slug = re.sub(r'[^a-z0-9]+', '-', value.lower()).strip('-')
    return slug or 'source'
