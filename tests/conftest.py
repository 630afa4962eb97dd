"""Test configuration and fixtures."""

import os
from typing import Dict, List, Union

import pytest

# Test configuration
TEST_LOG_DIR = "test_logs"
os.environ.setdefault("LOG_DIR", TEST_LOG_DIR)
os.environ.setdefault("LOG_LEVEL", "WARNING")

from email_scraper.errors import FetchError  # noqa: E402
from email_scraper.models import ScrapeOptions  # noqa: E402
from email_scraper.utils.web_crawler import FetchResult  # noqa: E402


class FakeFetcher:
    """In-memory stand-in for PageFetcher.

    ``pages`` maps URL -> HTML, or -> an exception instance to raise.
    Unknown URLs raise a network FetchError.
    """

    def __init__(self, pages: Dict[str, Union[str, Exception]]):
        self.pages = pages
        self.fetched: List[str] = []

    async def fetch(self, url: str) -> FetchResult:
        self.fetched.append(url)
        page = self.pages.get(url)
        if page is None:
            raise FetchError(FetchError.NETWORK, url, f"Not found: {url}")
        if isinstance(page, Exception):
            raise page
        return FetchResult(url=url, html=page, status_code=200)


def html_page(body: str = "", links: List[str] = (), head: str = "") -> str:
    anchors = "".join(f'<a href="{link}">link</a>' for link in links)
    return f"<html><head>{head}</head><body>{body}{anchors}</body></html>"


@pytest.fixture
def fake_fetcher():
    return FakeFetcher


@pytest.fixture
def page():
    return html_page


@pytest.fixture
def crawl_options():
    """Options for crawl tests: no delay, no robots.txt lookups."""

    def make(**overrides) -> ScrapeOptions:
        values = dict(max_depth=2, max_pages=50, delay_ms=0, respect_robots=False)
        values.update(overrides)
        return ScrapeOptions(**values)

    return make


@pytest.fixture
def site(page):
    """A small same-host site with one external link and two contact pages."""
    return {
        "https://example.com/": page(
            "Welcome. Reach us at info@example.com",
            links=[
                "https://example.com/about",
                "https://example.com/team",
                "https://other.org/page",
            ],
        ),
        "https://example.com/about": page(
            "Jane Doe, Marketing Director. Email jane@example.com",
            links=["https://example.com/about/history"],
        ),
        "https://example.com/team": page(
            "Contact: jane@example.com or bob@example.com",
            links=["https://example.com/"],
        ),
        "https://example.com/about/history": page("Founded 1999. history@example.com"),
    }
