"""Page-level extraction: one HTML document in, one ExtractedBundle out."""
from dataclasses import dataclass, field
from typing import Dict, List
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup

from .emails import extract_emails
from .names import extract_names
from .profile import (
    extract_addresses,
    extract_companies,
    extract_job_titles,
    extract_keywords,
    extract_social_media,
)

_SKIP_SCHEMES = ("javascript:", "mailto:", "tel:", "#")


@dataclass
class ExtractedBundle:
    """Everything found on one page. Lists are deduplicated, first-seen order."""

    url: str
    emails: List[str] = field(default_factory=list)
    names: List[str] = field(default_factory=list)
    addresses: List[str] = field(default_factory=list)
    social_media: Dict[str, List[str]] = field(default_factory=dict)
    job_titles: List[str] = field(default_factory=list)
    companies: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    links: List[str] = field(default_factory=list)


# Elements that start a new line of page text; inline tags (a, span, b) do not
BLOCK_TAGS = [
    "address", "article", "aside", "blockquote", "button", "dd", "div", "dl", "dt",
    "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4", "h5", "h6",
    "header", "li", "main", "nav", "ol", "option", "p", "pre", "section", "table",
    "td", "th", "tr", "ul",
]


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def page_text(soup: BeautifulSoup) -> str:
    """Visible text, one line per block element, whitespace collapsed within a line."""
    for element in soup(["script", "style", "noscript", "template"]):
        element.decompose()
    for element in soup.find_all(BLOCK_TAGS):
        element.insert_before("\n")
        element.append("\n")
    lines = (" ".join(line.split()) for line in soup.get_text(" ").split("\n"))
    return "\n".join(line for line in lines if line)


def extract_links(base_url: str, soup: BeautifulSoup) -> List[str]:
    """Absolute http(s) links, fragments removed, page order, deduplicated."""
    links: List[str] = []
    seen = set()
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if not href or href.lower().startswith(_SKIP_SCHEMES):
            continue
        try:
            absolute, _ = urldefrag(urljoin(base_url, href))
            scheme = urlparse(absolute).scheme
        except ValueError:
            continue
        if scheme in ("http", "https") and absolute not in seen:
            seen.add(absolute)
            links.append(absolute)
    return links


def extract_page(url: str, html: str, collect_personal_data: bool = True) -> ExtractedBundle:
    """Run every extractor over one page.

    Emails and links are always extracted; the personal-data classes only
    when ``collect_personal_data`` is set.
    """
    soup = parse_html(html)
    links = extract_links(url, soup)
    social_media = extract_social_media("", soup) if collect_personal_data else {}
    text = page_text(soup)

    bundle = ExtractedBundle(url=url, emails=extract_emails(text, soup), links=links)
    if not collect_personal_data:
        return bundle

    # hrefs were scanned above, before script/style removal; add the text matches
    for platform, handles in extract_social_media(text).items():
        merged = social_media.setdefault(platform, [])
        merged.extend(h for h in handles if h not in merged)

    bundle.names = extract_names(text, soup, bundle.emails)
    bundle.addresses = extract_addresses(text)
    bundle.social_media = social_media
    bundle.job_titles = extract_job_titles(text, soup)
    bundle.companies = extract_companies(text, soup)
    bundle.keywords = extract_keywords(soup)
    return bundle
