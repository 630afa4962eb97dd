"""Test module for data models and progress events."""
import pytest
from pydantic import ValidationError

from email_scraper.models import BatchResult, PersonalDataRecord, ScrapeOptions, SeedResult
from email_scraper.services.crawling.events import CrawlEvent, CrawlEventChannel, CrawlEventType


def test_scrape_options_defaults_and_aliases():
    options = ScrapeOptions.model_validate(
        {"maxDepth": 0, "skipCSS": False, "useAICategorization": True, "restrictToPath": "https://a.com/x"}
    )
    assert options.max_depth == 0
    assert options.skip_css is False
    assert options.use_ai_categorization is True
    assert options.restrict_to_path == "https://a.com/x"
    assert ScrapeOptions().respect_robots is True


@pytest.mark.parametrize("field, value", [("maxDepth", 11), ("maxPages", 0), ("delayMs", -1), ("timeoutMs", 1000)])
def test_scrape_options_ranges(field, value):
    with pytest.raises(ValidationError):
        ScrapeOptions.model_validate({field: value})


def test_personal_data_merge_is_set_union():
    record = PersonalDataRecord(names=["Jane Doe"], social_media={"linkedin": ["linkedin.com/in/jd"]})
    record.merge(
        names=["Jane Doe", "John Roe"],
        social_media={"linkedin": ["linkedin.com/in/jd", "linkedin.com/in/jr"], "twitter": ["x.com/jd"]},
        keywords=["", "design"],
    )
    assert record.names == ["Jane Doe", "John Roe"]
    assert record.social_media == {
        "linkedin": ["linkedin.com/in/jd", "linkedin.com/in/jr"],
        "twitter": ["x.com/jd"],
    }
    assert record.keywords == ["design"]


def test_seed_failure_and_batch_totals():
    ok = SeedResult(url="https://a.com", success=True, emails=["a@a.com"], total_emails=1)
    bad = SeedResult.failure("https://b.com", ValueError("nope"))
    batch = BatchResult.from_results([ok, bad])

    assert bad.error == "nope"
    assert bad.error_type == "ValueError"
    assert (batch.total_urls, batch.successful_urls, batch.failed_urls, batch.total_emails) == (2, 1, 1, 1)
    assert "totalEmails" in batch.model_dump(by_alias=True)


def test_event_to_dict_camel_case_without_empty_fields():
    event = CrawlEvent(type=CrawlEventType.PAGE_COMPLETE, url="https://a.com", depth=0, pages_visited=1)
    assert event.to_dict() == {
        "type": "page_complete",
        "url": "https://a.com",
        "depth": 0,
        "pagesVisited": 1,
    }


def test_closed_channel_ignores_publish():
    channel = CrawlEventChannel()
    channel.close()
    channel.publish(CrawlEvent(type=CrawlEventType.PAGE_START, url="https://a.com"))
    assert channel.history == []
