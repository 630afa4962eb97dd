"""Test module for the batch orchestrator."""
from unittest.mock import AsyncMock, patch

import pytest

from email_scraper.errors import InvalidInputError
from email_scraper.services.batch.orchestrator import run_batch, scrape


@pytest.fixture
def two_sites(page):
    return {
        "https://a.example.com/": page("one@a.example.com two@a.example.com"),
        "https://b.example.com/": page("three@b.example.com"),
    }


@pytest.mark.asyncio
async def test_scrape_single_seed(two_sites, fake_fetcher, crawl_options):
    result = await scrape("https://a.example.com/", crawl_options(), fetcher=fake_fetcher(two_sites))

    assert result.success is True
    assert result.url == "https://a.example.com/"
    assert result.emails == ["one@a.example.com", "two@a.example.com"]


@pytest.mark.asyncio
async def test_scrape_rejects_malformed_url(fake_fetcher, crawl_options):
    fetcher = fake_fetcher({})
    with pytest.raises(InvalidInputError):
        await scrape("not a url", crawl_options(), fetcher=fetcher)
    assert fetcher.fetched == []


@pytest.mark.asyncio
async def test_scrape_fatal_error_becomes_failed_result(crawl_options):
    with patch(
        "email_scraper.services.batch.orchestrator.CrawlJob.run",
        new=AsyncMock(side_effect=RuntimeError("browser crashed")),
    ):
        result = await scrape("https://a.example.com/", crawl_options())

    assert result.success is False
    assert result.error == "browser crashed"
    assert result.error_type == "RuntimeError"


@pytest.mark.asyncio
async def test_batch_isolates_invalid_seed(two_sites, fake_fetcher, crawl_options):
    urls = ["https://a.example.com/", "not a url", "https://b.example.com/"]

    batch = await run_batch(urls, crawl_options(), fetcher=fake_fetcher(two_sites))

    assert [r.url for r in batch.results] == urls
    assert [r.success for r in batch.results] == [True, False, True]
    assert batch.results[1].error_type == "InvalidInputError"
    assert batch.total_urls == 3
    assert batch.successful_urls == 2
    assert batch.failed_urls == 1
    assert batch.total_emails == 3


@pytest.mark.asyncio
async def test_batch_total_emails_not_deduplicated_across_seeds(page, fake_fetcher, crawl_options):
    pages = {
        "https://a.example.com/": page("shared@example.com"),
        "https://b.example.com/": page("shared@example.com"),
    }
    batch = await run_batch(list(pages), crawl_options(), fetcher=fake_fetcher(pages))

    assert batch.total_emails == 2


@pytest.mark.asyncio
async def test_batch_rejects_too_many_seeds(fake_fetcher, crawl_options):
    fetcher = fake_fetcher({})
    urls = [f"https://site{i}.example.com/" for i in range(11)]

    with pytest.raises(InvalidInputError, match="Maximum 10 URLs"):
        await run_batch(urls, crawl_options(), fetcher=fetcher)
    assert fetcher.fetched == []


@pytest.mark.asyncio
async def test_batch_rejects_empty(crawl_options):
    with pytest.raises(InvalidInputError):
        await run_batch([], crawl_options())


@pytest.mark.asyncio
async def test_concurrent_batch_keeps_input_order(two_sites, fake_fetcher, crawl_options):
    urls = ["https://b.example.com/", "https://a.example.com/"]

    batch = await run_batch(
        urls, crawl_options(), fetcher=fake_fetcher(two_sites), max_concurrent=2
    )

    assert [r.url for r in batch.results] == urls
    assert batch.results[0].emails == ["three@b.example.com"]
