#!/usr/bin/env python3
"""
Batch Orchestrator

Runs one crawl job per seed URL and aggregates the outcomes. A failing seed
is recorded in its own result entry and never affects the others.
"""

import asyncio
from typing import List, Optional

from ...config import Settings, settings as default_settings
from ...errors import InvalidInputError
from ...logging_config import setup_logging
from ...models import BatchResult, ScrapeOptions, SeedResult
from ...utils.robots import RobotsCache
from ...utils.validators import validate_batch_size, validate_url
from ..crawling.crawler import CrawlJob, Fetcher
from ..crawling.events import CrawlEventChannel
from ..llm.llm_service import CategorizationService

# Create module-specific logger
logger = setup_logging("orchestrator")


async def scrape(
    url: str,
    options: ScrapeOptions = None,
    fetcher: Optional[Fetcher] = None,
    enricher: Optional[CategorizationService] = None,
    events: Optional[CrawlEventChannel] = None,
    settings: Settings = None,
    robots_cache: Optional[RobotsCache] = None,
) -> SeedResult:
    """Crawl a single seed URL.

    Raises:
        InvalidInputError: If ``url`` is malformed; nothing is crawled

    Any other failure is returned as a ``success=False`` result.
    """
    url = validate_url(url)
    try:
        return await CrawlJob(
            url,
            options or ScrapeOptions(),
            fetcher=fetcher,
            enricher=enricher,
            events=events,
            settings=settings,
            robots_cache=robots_cache,
        ).run()
    except Exception as e:
        logger.error(
            "Seed failed",
            extra={"url": url, "error": str(e), "error_type": type(e).__name__},
        )
        return SeedResult.failure(url, e)


async def _run_seed(
    url: str,
    options: ScrapeOptions,
    robots_cache: RobotsCache,
    fetcher: Optional[Fetcher],
    enricher: Optional[CategorizationService],
    settings: Settings,
) -> SeedResult:
    try:
        return await scrape(
            url,
            options,
            fetcher=fetcher,
            enricher=enricher,
            settings=settings,
            robots_cache=robots_cache,
        )
    except InvalidInputError as e:
        logger.warning("Skipping invalid seed", extra={"url": url, "error": str(e)})
        return SeedResult.failure(url, e)


async def run_batch(
    urls: List[str],
    options: ScrapeOptions = None,
    fetcher: Optional[Fetcher] = None,
    enricher: Optional[CategorizationService] = None,
    settings: Settings = None,
    max_concurrent: Optional[int] = None,
) -> BatchResult:
    """Crawl up to ``settings.max_batch_size`` seeds.

    Results are in input order. Seeds run one after another unless
    ``max_concurrent`` (default ``settings.max_concurrent_seeds``) is above 1.

    Raises:
        InvalidInputError: If the batch is empty or too large; nothing is crawled
    """
    settings = settings or default_settings
    validate_batch_size(urls)
    options = options or ScrapeOptions()
    limit = max(1, max_concurrent or settings.max_concurrent_seeds)
    robots_cache: RobotsCache = {}

    logger.info("Starting batch", extra={"total_urls": len(urls), "max_concurrent": limit})

    if limit == 1:
        results = []
        for url in urls:
            results.append(
                await _run_seed(url, options, robots_cache, fetcher, enricher, settings)
            )
    else:
        semaphore = asyncio.Semaphore(limit)

        async def bounded(url: str) -> SeedResult:
            async with semaphore:
                return await _run_seed(url, options, robots_cache, fetcher, enricher, settings)

        results = list(await asyncio.gather(*(bounded(url) for url in urls)))

    batch = BatchResult.from_results(results)
    logger.info(
        "Batch completed",
        extra={
            "total_urls": batch.total_urls,
            "successful_urls": batch.successful_urls,
            "failed_urls": batch.failed_urls,
            "total_emails": batch.total_emails,
        },
    )
    return batch
