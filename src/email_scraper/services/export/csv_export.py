"""CSV export of batch results: one row per email of each successful seed."""
import csv
import io
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from ...logging_config import setup_logging
from ...models import BatchResult, PersonalDataRecord

logger = setup_logging("csv_export")

CSV_HEADERS = [
    "Email",
    "Source URL",
    "Names",
    "Job Titles",
    "Companies",
    "Keywords",
    "Addresses",
    "Social Media",
    "Industries",
    "Seniority",
    "Departments",
    "Scraped At",
]

SEPARATOR = "; "


def _join(values: Iterable[str]) -> str:
    return SEPARATOR.join(values)


def format_social_media(social_media: Dict[str, List[str]]) -> str:
    """``{"linkedin": ["a", "b"], "twitter": ["c"]}`` -> ``linkedin: a, b; twitter: c``"""
    return SEPARATOR.join(
        f"{platform}: {', '.join(handles)}" for platform, handles in social_media.items() if handles
    )


def _row(email: str, source_url: str, record: Optional[PersonalDataRecord], scraped_at: str) -> List[str]:
    record = record or PersonalDataRecord()
    return [
        email,
        source_url,
        _join(record.names),
        _join(record.job_titles),
        _join(record.companies),
        _join(record.keywords),
        _join(record.addresses),
        format_social_media(record.social_media),
        _join(record.industries),
        _join(record.seniority),
        _join(record.departments),
        scraped_at,
    ]


def to_csv(batch: BatchResult) -> str:
    """Render a batch as CSV text with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADERS)

    rows = 0
    for result in batch.results:
        if not result.success:
            continue
        personal_data = result.personal_data or {}
        for email in result.emails:
            writer.writerow(_row(email, result.url, personal_data.get(email), batch.timestamp))
            rows += 1

    logger.info("CSV export rendered", extra={"rows": rows, "seeds": len(batch.results)})
    return buffer.getvalue()


def export_filename(timestamp: datetime = None) -> str:
    timestamp = timestamp or datetime.now()
    return f"email_scraping_results_{timestamp.strftime('%Y%m%d_%H%M%S')}.csv"
