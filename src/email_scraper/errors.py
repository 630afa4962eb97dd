"""Exception hierarchy for the email scraper."""


class ScraperError(Exception):
    """Base exception for scraper errors."""

    pass


class InvalidInputError(ScraperError):
    """Raised for a malformed seed URL or an oversized batch, before any work starts."""

    pass


class FetchError(ScraperError):
    """Raised when a page cannot be retrieved.

    Args:
        reason: One of ``timeout``, ``network`` or ``blocked``
        url: The URL that failed
    """

    TIMEOUT = "timeout"
    NETWORK = "network"
    BLOCKED = "blocked"

    def __init__(self, reason: str, url: str = "", message: str = ""):
        self.reason = reason
        self.url = url
        super().__init__(message or f"{reason} while fetching {url}")


class EnrichmentError(ScraperError):
    """Raised inside the enrichment stage; always caught there."""

    pass
