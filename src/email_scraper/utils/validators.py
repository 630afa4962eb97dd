"""URL and batch validation."""
from typing import List
from urllib.parse import urlparse

from ..config import settings
from ..errors import InvalidInputError


def validate_url(url: str) -> str:
    """Check that ``url`` is an absolute http(s) URL with a hostname.

    Returns:
        The URL, stripped of surrounding whitespace

    Raises:
        InvalidInputError: If the URL is malformed
    """
    if not url or not isinstance(url, str):
        raise InvalidInputError("URL must be a non-empty string")

    url = url.strip()
    try:
        parsed = urlparse(url)
    except ValueError:
        raise InvalidInputError(f"Invalid URL: {url} - Invalid URL format")

    if parsed.scheme not in ("http", "https"):
        raise InvalidInputError(f"Invalid URL: {url} - URL must use HTTP or HTTPS protocol")
    if not parsed.hostname or " " in parsed.netloc:
        raise InvalidInputError(f"Invalid URL: {url} - URL must have a valid hostname")

    return url


def validate_batch_size(urls: List[str]) -> None:
    """Reject an empty or oversized batch before any work starts."""
    if not isinstance(urls, list) or not urls:
        raise InvalidInputError("URLs array is required")
    if len(urls) > settings.max_batch_size:
        raise InvalidInputError(f"Maximum {settings.max_batch_size} URLs allowed per batch")
