#!/usr/bin/env python3
"""
Crawl Controller

Breadth-first, depth- and page-bounded crawl of one seed URL: fetch, extract,
enqueue same-host links, sleep, repeat. One fetch is in flight at a time.
"""

import asyncio
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Deque, Dict, List, Optional, Protocol, Set, Tuple
from urllib.parse import urlparse, urlsplit, urlunsplit

from ...config import Settings, settings as default_settings
from ...errors import FetchError
from ...extraction import ExtractedBundle, extract_page
from ...logging_config import setup_logging
from ...models import PersonalDataRecord, ScrapeOptions, SeedResult
from ...utils.robots import RobotsCache, RobotsGate
from ...utils.web_crawler import FetchResult, PageFetcher
from ..llm.llm_service import CategorizationService
from .events import CrawlEvent, CrawlEventChannel, CrawlEventType

# Create module-specific logger
logger = setup_logging("crawler")


class Fetcher(Protocol):
    async def fetch(self, url: str) -> FetchResult: ...


class CrawlState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class CrawlAggregate:
    """Per-job accumulation of visited pages, emails and personal data."""

    visited: Set[str] = field(default_factory=set)
    emails: Dict[str, None] = field(default_factory=dict)  # insertion-ordered set
    personal_data: Dict[str, PersonalDataRecord] = field(default_factory=dict)

    def add_page(self, bundle: ExtractedBundle, collect_personal_data: bool) -> List[str]:
        """Merge one page's bundle; returns the page's emails."""
        for email in bundle.emails:
            self.emails.setdefault(email, None)
            if not collect_personal_data:
                continue
            record = self.personal_data.get(email)
            if record is None:
                record = self.personal_data[email] = PersonalDataRecord(source_url=bundle.url)
            record.merge(
                names=bundle.names,
                addresses=bundle.addresses,
                social_media=bundle.social_media,
                job_titles=bundle.job_titles,
                companies=bundle.companies,
                keywords=bundle.keywords,
            )
        return bundle.emails


def normalize_url(url: str) -> str:
    """Frontier key: fragment dropped, scheme and host lowercased, empty path as '/'."""
    parts = urlsplit(url.strip())
    return urlunsplit(
        (parts.scheme.lower(), parts.netloc.lower(), parts.path or "/", parts.query, "")
    )


class CrawlJob:
    """One crawl of one seed URL. A job runs once.

    Args:
        seed_url: Starting URL (already validated)
        options: Crawl configuration
        fetcher: Page fetcher; a browser-backed PageFetcher is opened if omitted
        robots: robots.txt gate; built from ``options.respect_robots`` if omitted
        enricher: Categorization service used when ``use_ai_categorization`` is set
        events: Optional progress channel
        robots_cache: Cache shared with other jobs when ``robots`` is omitted
        sleep: Delay coroutine, replaceable in tests
    """

    def __init__(
        self,
        seed_url: str,
        options: ScrapeOptions = None,
        fetcher: Optional[Fetcher] = None,
        robots: Optional[RobotsGate] = None,
        enricher: Optional[CategorizationService] = None,
        events: Optional[CrawlEventChannel] = None,
        settings: Settings = None,
        robots_cache: Optional[RobotsCache] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings or default_settings
        self.url = seed_url.strip()
        self.seed_url = normalize_url(seed_url)
        self.options = options or ScrapeOptions()
        self.fetcher = fetcher
        self.robots = robots or RobotsGate(
            enabled=self.options.respect_robots,
            user_agent=self.settings.user_agent,
            timeout_s=self.settings.robots_timeout_s,
            cache=robots_cache,
        )
        self.enricher = enricher
        self.events = events
        self._sleep = sleep

        self.state = CrawlState.IDLE
        self.aggregate = CrawlAggregate()
        self.frontier: Deque[Tuple[str, int]] = deque()
        self._queued: Set[str] = set()
        self._seed_host = urlparse(self.seed_url).netloc.lower()
        prefix = self.options.restrict_to_path
        self._path_prefix = normalize_url(prefix) if prefix else None
        self._fetched_any = False

    # ---------- progress ----------

    def _emit(self, event_type: CrawlEventType, url: str, **fields) -> None:
        if self.events is None:
            return
        try:
            self.events.publish(
                CrawlEvent(
                    type=event_type,
                    url=url,
                    pages_visited=len(self.aggregate.visited),
                    total_emails=len(self.aggregate.emails),
                    **fields,
                )
            )
        except Exception as e:
            logger.warning("Progress event failed", extra={"url": url, "error": str(e)})

    # ---------- frontier ----------

    def _allowed_link(self, link: str) -> Optional[str]:
        """None if ``link`` may be followed, else the reason it is filtered."""
        if urlparse(link).netloc.lower() != self._seed_host:
            return "external"
        if self._path_prefix and not link.startswith(self._path_prefix):
            return "outside_path"
        return None

    def _enqueue_links(self, links: List[str], depth: int) -> None:
        for link in links:
            link = normalize_url(link)
            if link in self.aggregate.visited or link in self._queued:
                continue
            reason = self._allowed_link(link)
            if reason is not None:
                if reason == "outside_path":
                    self._emit(CrawlEventType.URL_FILTERED, link, reason=reason, depth=depth)
                continue
            self._queued.add(link)
            self.frontier.append((link, depth))

    def _budget_left(self) -> bool:
        return len(self.aggregate.visited) < self.options.max_pages

    # ---------- pages ----------

    async def _process_page(self, url: str, depth: int) -> None:
        self.aggregate.visited.add(url)
        self._emit(CrawlEventType.PAGE_START, url, depth=depth)

        if not await self.robots.can_fetch(url):
            logger.info("Blocked by robots.txt", extra={"url": url})
            self._emit(CrawlEventType.PAGE_BLOCKED, url, reason="robots.txt")
            return

        if self._fetched_any and self.options.delay_ms:
            await self._sleep(self.options.delay_ms / 1000)
        self._fetched_any = True

        try:
            page = await self.fetcher.fetch(url)
            bundle = extract_page(url, page.html, self.options.collect_personal_data)
        except FetchError as e:
            logger.warning("Fetch failed", extra={"url": url, "reason": e.reason, "error": str(e)})
            self._emit(CrawlEventType.PAGE_ERROR, url, error=str(e), reason=e.reason)
            return
        except Exception as e:
            logger.error("Page processing failed", extra={"url": url, "error": str(e)}, exc_info=True)
            self._emit(CrawlEventType.PAGE_ERROR, url, error=str(e))
            return

        page_emails = self.aggregate.add_page(bundle, self.options.collect_personal_data)
        if page_emails:
            self._emit(CrawlEventType.EMAILS_FOUND, url, emails=list(page_emails))
        self._emit(CrawlEventType.PAGE_COMPLETE, url, depth=depth)
        logger.info(
            "Page scraped",
            extra={"url": url, "depth": depth, "emails_found": len(page_emails)},
        )

        if depth < self.options.max_depth:
            self._enqueue_links(bundle.links, depth + 1)

    async def _crawl(self) -> None:
        self.frontier.append((self.seed_url, 0))
        self._queued.add(self.seed_url)

        while self.frontier and self._budget_left():
            url, depth = self.frontier.popleft()
            if url in self.aggregate.visited or depth > self.options.max_depth:
                continue
            await self._process_page(url, depth)

    async def _enrich(self) -> None:
        if not (self.options.use_ai_categorization and self.options.collect_personal_data):
            return
        if not self.aggregate.personal_data:
            return
        enricher = self.enricher or CategorizationService(self.settings)
        try:
            await enricher.enrich_records(self.aggregate.personal_data)
        except Exception as e:
            logger.error("Enrichment stage failed", extra={"url": self.seed_url, "error": str(e)})

    def _result(self) -> SeedResult:
        emails = list(self.aggregate.emails)
        return SeedResult(
            url=self.url,
            success=True,
            emails=emails,
            total_emails=len(emails),
            pages_visited=len(self.aggregate.visited),
            personal_data=dict(self.aggregate.personal_data)
            if self.options.collect_personal_data
            else None,
        )

    async def run(self) -> SeedResult:
        """Crawl until the frontier or a budget is exhausted.

        Raises:
            Exception: Fatal errors (e.g. the browser cannot start); the job is FAILED
        """
        if self.state is not CrawlState.IDLE:
            raise RuntimeError(f"CrawlJob already {self.state.value}")
        self.state = CrawlState.RUNNING
        logger.info(
            "Starting crawl",
            extra={
                "url": self.seed_url,
                "max_depth": self.options.max_depth,
                "max_pages": self.options.max_pages,
            },
        )

        try:
            if self.fetcher is None:
                async with PageFetcher(self.options, self.settings) as fetcher:
                    self.fetcher = fetcher
                    await self._crawl()
            else:
                await self._crawl()
            await self._enrich()
        except Exception as e:
            self.state = CrawlState.FAILED
            logger.error("Crawl failed", extra={"url": self.seed_url}, exc_info=True)
            self._emit(CrawlEventType.PAGE_ERROR, self.seed_url, error=str(e))
            raise
        finally:
            if self.events is not None:
                if self.state is not CrawlState.FAILED:
                    self._emit(CrawlEventType.CRAWL_COMPLETE, self.seed_url)
                self.events.close()

        self.state = CrawlState.COMPLETED
        result = self._result()
        logger.info(
            "Crawl completed",
            extra={
                "url": self.seed_url,
                "pages_visited": result.pages_visited,
                "total_emails": result.total_emails,
            },
        )
        return result
