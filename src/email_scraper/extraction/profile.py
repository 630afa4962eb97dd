"""
Addresses, social-media handles, job titles, companies and keywords.

Company detection is heuristic and comes back empty for many pages.
"""
import re
from typing import Dict, Iterable, List, Optional

from bs4 import BeautifulSoup

from .names import TITLE_KEYWORDS

_STREET_SUFFIX = (
    r"(?:Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd|Lane|Ln|Drive|Dr|Court|Ct|"
    r"Way|Place|Pl|Parkway|Pkwy|Highway|Hwy|Square|Sq|Terrace|Circle|Cir)"
)
_CITY_STATE_ZIP = r",\s*[A-Za-z][A-Za-z .]{1,40},\s*[A-Z]{2}\s+\d{5}(?:-\d{4})?"

ADDRESS_PATTERNS = (
    # 123 Main St, Suite 4, Springfield, IL 62701
    re.compile(
        rf"\b\d{{1,6}}\s+(?:[A-Za-z0-9.'\-]+\s+){{1,5}}{_STREET_SUFFIX}\b\.?"
        rf"(?:,?\s*(?:Suite|Ste\.?|Unit|#)\s*[A-Za-z0-9\-]+)?{_CITY_STATE_ZIP}\b"
    ),
    # P.O. Box 42, Springfield, IL 62701
    re.compile(rf"\bP\.?\s?O\.?\s+Box\s+\d+(?:{_CITY_STATE_ZIP})?\b", re.I),
)

SOCIAL_PATTERNS: Dict[str, re.Pattern] = {
    "linkedin": re.compile(r"linkedin\.com/(?:in|company|pub|school)/[A-Za-z0-9_\-%]+", re.I),
    "twitter": re.compile(
        r"(?<![\w\-])(?:twitter|x)\.com/(?!intent\b|share\b|home\b|search\b|hashtag\b)[A-Za-z0-9_]{1,15}\b",
        re.I,
    ),
    "facebook": re.compile(
        r"facebook\.com/(?!sharer|share\b|dialog|plugins|tr\b)[A-Za-z0-9.\-]+", re.I
    ),
    "instagram": re.compile(r"instagram\.com/(?!p/|explore\b)[A-Za-z0-9_.]+", re.I),
    "youtube": re.compile(
        r"youtube\.com/(?:c/|channel/|user/|@)[A-Za-z0-9_\-]+", re.I
    ),
}

# Whitespace inside one line of page text
_SP = r"[^\S\n]+"

EXECUTIVE_TITLES = re.compile(
    rf"\b(?:CEO|CTO|CFO|COO|CMO|CIO|Co-Founder|Founder|"
    rf"Chief{_SP}[A-Z][a-z]+{_SP}Officer|(?:Senior{_SP}|Executive{_SP})?Vice{_SP}President|"
    rf"Managing{_SP}(?:Director|Partner))\b"
)
_TITLE_VOCAB = re.compile(r"\b(?:%s)\b" % "|".join(re.escape(k) for k in TITLE_KEYWORDS))
# Matched against each class/id token: job-title, jobTitle, member_role; not position-relative
_TITLE_HINT = re.compile(r"(?:^|[-_])(?:job[-_]?)?(?:title|position|role|designation)$", re.I)

_COMPANY_HINT = re.compile(
    r"(?:^|[-_])(?:company|organi[sz]ation|org|employer|firm)(?:[-_]?name)?$", re.I
)
COMPANY_SUFFIX = re.compile(
    rf"\b([A-Z][A-Za-z0-9&'\-]*(?:{_SP}[A-Z][A-Za-z0-9&'\-]*){{0,4}},?{_SP}"
    r"(?:Inc|LLC|Ltd|Corp|Corporation|Company|GmbH|LLP|PLC|Co)\.?)(?!\w)"
)

MAX_ELEMENT_TEXT = 80
MAX_KEYWORDS = 10


def _unique(values: Iterable[str]) -> List[str]:
    out: List[str] = []
    seen = set()
    for value in values:
        value = " ".join(value.split()).strip(" ,;|")
        if value and value not in seen:
            seen.add(value)
            out.append(value)
    return out


def _hinted_texts(soup: BeautifulSoup, hint: re.Pattern) -> List[str]:
    """Short text of elements with a class or id token matching ``hint``."""
    texts = []
    for element in soup.find_all(True):
        tokens = list(element.get("class", [])) + (element.get("id") or "").split()
        if any(hint.search(token) for token in tokens):
            value = element.get_text(" ", strip=True)
            if value and len(value) <= MAX_ELEMENT_TEXT:
                texts.append(value)
    return texts


def extract_addresses(text: str) -> List[str]:
    if not text:
        return []
    found = []
    for pattern in ADDRESS_PATTERNS:
        found.extend(m.group(0).strip() for m in pattern.finditer(text))
    # Verbatim strings, only exact duplicates removed
    out: List[str] = []
    for address in found:
        if address not in out:
            out.append(address)
    return out


def _social_fragment(match: str) -> str:
    fragment = re.sub(r"^(?:https?://)?(?:www\.|m\.|mobile\.)?", "", match, flags=re.I)
    return fragment.rstrip("/.")


def extract_social_media(text: str, soup: Optional[BeautifulSoup] = None) -> Dict[str, List[str]]:
    sources = [text or ""]
    if soup is not None:
        sources.extend(a.get("href", "") for a in soup.find_all("a", href=True))

    found: Dict[str, List[str]] = {}
    for platform, pattern in SOCIAL_PATTERNS.items():
        handles = []
        for source in sources:
            handles.extend(_social_fragment(m.group(0)) for m in pattern.finditer(source))
        handles = _unique(handles)
        if handles:
            found[platform] = handles
    return found


def extract_job_titles(text: str, soup: Optional[BeautifulSoup] = None) -> List[str]:
    titles = []
    if soup is not None:
        titles.extend(t for t in _hinted_texts(soup, _TITLE_HINT) if _TITLE_VOCAB.search(t))
    if text:
        titles.extend(m.group(0) for m in EXECUTIVE_TITLES.finditer(text))
    return _unique(titles)


def extract_companies(text: str, soup: Optional[BeautifulSoup] = None) -> List[str]:
    companies = []
    if soup is not None:
        companies.extend(_hinted_texts(soup, _COMPANY_HINT))
        site_name = soup.find("meta", attrs={"property": "og:site_name"})
        if site_name and site_name.get("content"):
            companies.append(site_name["content"])
    if text:
        companies.extend(m.group(1) for m in COMPANY_SUFFIX.finditer(text))
    return _unique(companies)


def extract_keywords(soup: Optional[BeautifulSoup]) -> List[str]:
    if soup is None:
        return []
    meta = soup.find("meta", attrs={"name": re.compile(r"^keywords$", re.I)})
    if not meta or not meta.get("content"):
        return []
    return _unique(meta["content"].split(","))[:MAX_KEYWORDS]
