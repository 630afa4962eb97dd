"""Test module for CSV export."""
import csv
import io
from datetime import datetime

from email_scraper.models import BatchResult, PersonalDataRecord, SeedResult
from email_scraper.services.export.csv_export import (
    CSV_HEADERS,
    export_filename,
    format_social_media,
    to_csv,
)


def rows(text):
    return list(csv.reader(io.StringIO(text)))


def make_batch():
    first = SeedResult(
        url="https://a.example.com",
        success=True,
        emails=["one@a.example.com", "two@a.example.com", "three@a.example.com"],
        total_emails=3,
        pages_visited=4,
        personal_data={
            "one@a.example.com": PersonalDataRecord(
                names=["Doe, Jane", "J. Doe"],
                job_titles=["CEO"],
                social_media={"linkedin": ["linkedin.com/in/jdoe"], "twitter": ["x.com/jd", "twitter.com/jd"]},
                industries=["Technology"],
            )
        },
    )
    second = SeedResult(
        url="https://b.example.com",
        success=True,
        emails=["four@b.example.com", "five@b.example.com"],
        total_emails=2,
        pages_visited=1,
    )
    failed = SeedResult.failure("https://c.example.com", RuntimeError("boom"))
    return BatchResult.from_results([first, second, failed])


def test_one_row_per_email_of_successful_seeds():
    parsed = rows(to_csv(make_batch()))

    assert parsed[0] == CSV_HEADERS
    assert len(parsed) == 6
    assert [row[0] for row in parsed[1:]] == [
        "one@a.example.com",
        "two@a.example.com",
        "three@a.example.com",
        "four@b.example.com",
        "five@b.example.com",
    ]
    assert all(row[1] == "https://b.example.com" for row in parsed[4:])


def test_multi_valued_fields_and_quoting():
    batch = make_batch()
    text = to_csv(batch)
    first = rows(text)[1]

    assert first[2] == "Doe, Jane; J. Doe"
    assert first[3] == "CEO"
    assert first[7] == "linkedin: linkedin.com/in/jdoe; twitter: x.com/jd, twitter.com/jd"
    assert first[8] == "Technology"
    assert first[11] == batch.timestamp
    # Comma-bearing cells are quoted
    assert '"Doe, Jane; J. Doe"' in text


def test_email_without_personal_data_has_empty_cells():
    second_seed_row = rows(to_csv(make_batch()))[4]
    assert second_seed_row[2:11] == [""] * 9


def test_empty_batch_is_header_only():
    assert rows(to_csv(BatchResult.from_results([]))) == [CSV_HEADERS]


def test_format_social_media_skips_empty_platforms():
    assert format_social_media({"facebook": [], "instagram": ["instagram.com/acme"]}) == (
        "instagram: instagram.com/acme"
    )


def test_export_filename():
    assert (
        export_filename(datetime(2024, 3, 5, 14, 7, 9))
        == "email_scraping_results_20240305_140709.csv"
    )
