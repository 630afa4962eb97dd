"""
Extraction engine: pure functions over page text and parsed HTML.
"""

from .emails import clean_email, extract_emails, find_emails
from .extractor import ExtractedBundle, extract_links, extract_page
from .names import extract_names, is_valid_name
from .profile import (
    extract_addresses,
    extract_companies,
    extract_job_titles,
    extract_keywords,
    extract_social_media,
)

__all__ = [
    "ExtractedBundle",
    "clean_email",
    "extract_addresses",
    "extract_companies",
    "extract_emails",
    "extract_job_titles",
    "extract_keywords",
    "extract_links",
    "extract_names",
    "extract_page",
    "extract_social_media",
    "find_emails",
    "is_valid_name",
]
