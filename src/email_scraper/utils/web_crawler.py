"""
Web Crawler Library

Fetches the rendered HTML of one URL at a time through a single crawl4ai
browser session. Image, stylesheet, font and media requests can be aborted at
the network layer, which is where most of the page-load time goes.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional, Set

from crawl4ai import AsyncWebCrawler
from crawl4ai.async_configs import BrowserConfig, CrawlerRunConfig, CacheMode

from ..config import Settings, settings as default_settings
from ..errors import FetchError
from ..logging_config import setup_logging
from ..models import ScrapeOptions

# Create module-specific logger
logger = setup_logging("web_crawler")

ACCEPT_HEADER = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"
BLOCKED_STATUSES = (401, 403, 429)


@dataclass
class FetchResult:
    """Rendered page returned by :class:`PageFetcher`."""

    url: str
    html: str
    status_code: Optional[int] = None


def blocked_resource_types(options: ScrapeOptions) -> Set[str]:
    """Playwright resource types to abort for the given options."""
    blocked = set()
    if options.skip_images:
        blocked.add("image")
    if options.skip_css:
        blocked.add("stylesheet")
    if options.skip_fonts:
        blocked.add("font")
    if options.skip_media:
        blocked.add("media")
    return blocked


class PageFetcher:
    """One browser session, one in-flight navigation at a time.

    Usage:

        async with PageFetcher(options) as fetcher:
            page = await fetcher.fetch("https://example.com")
    """

    def __init__(self, options: ScrapeOptions, settings: Settings = None):
        self.options = options
        self.settings = settings or default_settings
        self.blocked_types = blocked_resource_types(options)
        self._routed_contexts: Set[int] = set()
        self._crawler: Optional[AsyncWebCrawler] = None

    def _browser_config(self) -> BrowserConfig:
        return BrowserConfig(
            headless=self.options.headless,
            user_agent=self.settings.user_agent,
            headers={
                "Accept": ACCEPT_HEADER,
                "Accept-Language": self.settings.accept_language,
            },
            verbose=False,
        )

    def _run_config(self) -> CrawlerRunConfig:
        return CrawlerRunConfig(
            cache_mode=CacheMode.BYPASS,
            wait_until="domcontentloaded",
            page_timeout=self.options.timeout_ms,
            delay_before_return_html=self.settings.settle_delay_ms / 1000,
            verbose=False,
        )

    async def _route_request(self, route) -> None:
        if route.request.resource_type in self.blocked_types:
            await route.abort()
        else:
            await route.continue_()

    async def _on_page_context_created(self, page, context=None, **kwargs):
        """crawl4ai hook: install the resource filter once per browser context."""
        if context is not None and self.blocked_types and id(context) not in self._routed_contexts:
            await context.route("**/*", self._route_request)
            self._routed_contexts.add(id(context))
        return page

    async def start(self) -> "PageFetcher":
        self._crawler = AsyncWebCrawler(config=self._browser_config())
        await self._crawler.start()
        self._crawler.crawler_strategy.set_hook(
            "on_page_context_created", self._on_page_context_created
        )
        logger.debug(
            "Browser session started",
            extra={"headless": self.options.headless, "blocked": sorted(self.blocked_types)},
        )
        return self

    async def close(self) -> None:
        if self._crawler is not None:
            await self._crawler.close()
            self._crawler = None
            self._routed_contexts.clear()

    async def __aenter__(self) -> "PageFetcher":
        return await self.start()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def fetch(self, url: str) -> FetchResult:
        """Navigate to ``url`` and return its rendered HTML.

        Raises:
            FetchError: On timeout, navigation/network failure or a blocking status
        """
        if self._crawler is None:
            raise RuntimeError("PageFetcher.fetch() called before start()")

        # Hard ceiling over crawl4ai's own page_timeout
        ceiling = self.options.timeout_ms / 1000 + self.settings.settle_delay_ms / 1000 + 5
        try:
            result = await asyncio.wait_for(
                self._crawler.arun(url=url, config=self._run_config()), timeout=ceiling
            )
        except asyncio.TimeoutError:
            raise FetchError(FetchError.TIMEOUT, url)
        except Exception as e:
            raise FetchError(FetchError.NETWORK, url, f"Navigation failed for {url}: {e}") from e

        if not getattr(result, "success", False):
            message = getattr(result, "error_message", "") or "Unknown error"
            reason = FetchError.TIMEOUT if "timeout" in message.lower() else FetchError.NETWORK
            raise FetchError(reason, url, f"Navigation failed for {url}: {message}")

        status = getattr(result, "status_code", None)
        if status in BLOCKED_STATUSES:
            raise FetchError(FetchError.BLOCKED, url, f"HTTP {status} for {url}")
        if status is not None and status >= 400:
            raise FetchError(FetchError.NETWORK, url, f"HTTP {status} for {url}")

        return FetchResult(url=url, html=result.html or "", status_code=status)
