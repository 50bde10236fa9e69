"""
Tolerant page URL parsing.

The legacy layout derives host, path and query from the page URL. A URL that
cannot be parsed simply yields no derived fields.
"""

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UrlParts:
    """Components of an absolute URL, shaped like a browser ``URL`` object."""

    host: str
    path: str
    search: str


def parse_page_url(url: Any) -> UrlParts | None:
    """
    Parse an absolute URL into its host, path and search components.

    Args:
        url: URL string, usually ``context.page.url``

    Returns:
        UrlParts, or None when the value is not a parseable absolute URL
    """
    if not url or not isinstance(url, str):
        return None
    try:
        parts = urlsplit(url.strip())
        host = parts.hostname
    except ValueError as e:
        logger.debug(f"Ignoring unparseable URL {url!r}: {e}")
        return None

    if not parts.scheme or not host:
        return None

    return UrlParts(
        host=host,
        path=parts.path or "/",
        search=f"?{parts.query}" if parts.query else "",
    )
