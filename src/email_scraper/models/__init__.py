"""
Data models and schemas for the email scraper.
"""

from .scrape_models import (
    BatchResult,
    BatchScrapeRequest,
    ExportRequest,
    PersonalDataRecord,
    ScrapeOptions,
    ScrapeRequest,
    SeedResult,
)

__all__ = [
    "BatchResult",
    "BatchScrapeRequest",
    "ExportRequest",
    "PersonalDataRecord",
    "ScrapeOptions",
    "ScrapeRequest",
    "SeedResult",
]
