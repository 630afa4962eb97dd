"""
Data models for scrape requests, per-seed results and batch results.

JSON field names are camelCase on the wire (``totalEmails``, ``personalData``)
and snake_case in Python; both are accepted on input.
"""
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..config import settings


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _union(target: List[str], values: Iterable[str]) -> None:
    """Append values not already present, keeping first-seen order."""
    seen = set(target)
    for value in values:
        if value and value not in seen:
            seen.add(value)
            target.append(value)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScrapeOptions(CamelModel):
    """Per-job crawl configuration."""

    max_depth: int = Field(default_factory=lambda: settings.default_max_depth, ge=0, le=10)
    max_pages: int = Field(default_factory=lambda: settings.default_max_pages, ge=1, le=1000)
    delay_ms: int = Field(default_factory=lambda: settings.default_delay_ms, ge=0, le=10000)
    timeout_ms: int = Field(default_factory=lambda: settings.default_timeout_ms, ge=5000, le=120000)
    headless: bool = True
    respect_robots: bool = True
    skip_images: bool = True
    skip_css: bool = Field(default=True, alias="skipCSS")
    skip_fonts: bool = True
    skip_media: bool = True
    collect_personal_data: bool = True
    use_ai_categorization: bool = Field(default=False, alias="useAICategorization")
    restrict_to_path: Optional[str] = None

    @classmethod
    def fast(cls, **overrides) -> "ScrapeOptions":
        """Preset used by the fast endpoints: shallow, short delay, robots ignored."""
        values = dict(
            max_depth=2,
            max_pages=50,
            delay_ms=500,
            timeout_ms=15000,
            respect_robots=False,
        )
        values.update(overrides)
        return cls(**values)


class PersonalDataRecord(CamelModel):
    """Everything observed alongside one email address during a crawl."""

    names: List[str] = Field(default_factory=list)
    addresses: List[str] = Field(default_factory=list)
    social_media: Dict[str, List[str]] = Field(default_factory=dict)
    job_titles: List[str] = Field(default_factory=list)
    companies: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    industries: List[str] = Field(default_factory=list)
    seniority: List[str] = Field(default_factory=list)
    departments: List[str] = Field(default_factory=list)
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    source_url: Optional[str] = None

    def merge(
        self,
        names: Iterable[str] = (),
        addresses: Iterable[str] = (),
        social_media: Optional[Dict[str, Iterable[str]]] = None,
        job_titles: Iterable[str] = (),
        companies: Iterable[str] = (),
        keywords: Iterable[str] = (),
    ) -> None:
        """Set-union the given values into this record."""
        _union(self.names, names)
        _union(self.addresses, addresses)
        _union(self.job_titles, job_titles)
        _union(self.companies, companies)
        _union(self.keywords, keywords)
        for platform, handles in (social_media or {}).items():
            _union(self.social_media.setdefault(platform, []), handles)

    def apply_categorization(
        self,
        industries: Iterable[str],
        seniority: Iterable[str],
        departments: Iterable[str],
        confidence: Optional[float],
        names: Iterable[str] = (),
    ) -> None:
        _union(self.industries, industries)
        _union(self.seniority, seniority)
        _union(self.departments, departments)
        _union(self.names, names)
        if confidence is not None:
            self.confidence = confidence


class SeedResult(CamelModel):
    """Outcome of one crawl job. ``error`` is set only when ``success`` is False."""

    url: str
    success: bool
    emails: List[str] = Field(default_factory=list)
    total_emails: int = 0
    pages_visited: int = 0
    personal_data: Optional[Dict[str, PersonalDataRecord]] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    timestamp: str = Field(default_factory=utc_now)

    @classmethod
    def failure(cls, url: str, exc: BaseException) -> "SeedResult":
        return cls(url=url, success=False, error=str(exc), error_type=type(exc).__name__)


class BatchResult(CamelModel):
    total_urls: int = 0
    successful_urls: int = 0
    failed_urls: int = 0
    total_emails: int = 0
    results: List[SeedResult] = Field(default_factory=list)
    timestamp: str = Field(default_factory=utc_now)

    @classmethod
    def from_results(cls, results: List[SeedResult]) -> "BatchResult":
        successful = [r for r in results if r.success]
        return cls(
            total_urls=len(results),
            successful_urls=len(successful),
            failed_urls=len(results) - len(successful),
            # Not deduplicated across seeds
            total_emails=sum(r.total_emails for r in successful),
            results=results,
        )


class ScrapeRequest(CamelModel):
    url: str
    options: ScrapeOptions = Field(default_factory=ScrapeOptions)


class BatchScrapeRequest(CamelModel):
    urls: List[str]
    options: ScrapeOptions = Field(default_factory=ScrapeOptions)


class ExportRequest(CamelModel):
    data: BatchResult
