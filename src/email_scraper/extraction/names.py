"""
Person-name extraction.

Two complementary passes feed one validator:

- pattern pass: plain full names, honorific prefixes, middle initials,
  generational suffixes, quoted and parenthesized names
- context pass: names next to an email address, next to a job-title keyword,
  under a contact/about/team heading, or inside elements whose class/id
  says "name"
"""
import re
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup

# UI and navigation phrases that look like names; case-insensitive substring match
NAME_DENYLIST = (
    "about us",
    "contact us",
    "click here",
    "read more",
    "learn more",
    "find out",
    "get started",
    "sign up",
    "sign in",
    "log in",
    "privacy policy",
    "terms of",
    "cookie",
    "all rights",
    "copyright",
    "our team",
    "our story",
    "our services",
    "home page",
    "main menu",
    "skip to",
    "view all",
    "see all",
    "see more",
    "show more",
    "follow us",
    "subscribe",
    "newsletter",
    "shopping cart",
    "load more",
    "back to",
    "go to",
    "site map",
    "sitemap",
    "customer service",
    "frequently asked",
    "united states",
    "new york",
    "los angeles",
    "san francisco",
)

TITLE_KEYWORDS = (
    "CEO",
    "CTO",
    "CFO",
    "COO",
    "CMO",
    "Founder",
    "Co-Founder",
    "President",
    "Vice President",
    "Director",
    "Manager",
    "Engineer",
    "Developer",
    "Designer",
    "Consultant",
    "Analyst",
    "Coordinator",
    "Specialist",
    "Officer",
    "Partner",
    "Owner",
    "Head of",
    "Lead",
    "Architect",
    "Administrator",
    "Assistant",
    "Executive",
    "Attorney",
    "Editor",
)

SECTION_KEYWORDS = ("contact", "about", "team", "staff", "leadership", "our people", "management")

# Whitespace inside one line; page text keeps one block element per line
_SP = r"[^\S\n]"
_WORD = r"[A-Z][a-z]{1,19}"
_FULL = rf"{_WORD}(?:{_SP}+{_WORD}){{1,3}}"
_TITLE_ALT = "|".join(re.escape(k) for k in TITLE_KEYWORDS)

NAME_PATTERNS = (
    # Jane Doe (overlapping, so "Meet Jane Doe" still yields "Jane Doe")
    re.compile(rf"(?=\b({_WORD}{_SP}+{_WORD})\b)"),
    # Dr. Jane Doe -> Jane Doe
    re.compile(rf"\b(?:Mr|Mrs|Ms|Miss|Dr|Prof|Sir)\.?{_SP}+({_FULL})\b"),
    # Jane Q. Doe
    re.compile(rf"\b({_WORD}{_SP}+[A-Z]\.{_SP}+{_WORD})(?!\w)"),
    # John Doe Jr. / John Doe III
    re.compile(rf"\b({_WORD}{_SP}+{_WORD},?{_SP}+(?:Jr\.|Sr\.|Jr|Sr|II|III|IV))(?![\w.])"),
    # "Jane Doe"
    re.compile(rf"[\"“]({_FULL})[\"”]"),
    # (Jane Doe)
    re.compile(rf"\(({_FULL})\)"),
)

_CONTEXT_NAME = re.compile(rf"\b({_WORD}(?:{_SP}+[A-Z]\.)?(?:{_SP}+{_WORD}){{1,2}})\b")

# Jane Doe, Marketing Director  /  Jane Doe - CEO
_NAME_BEFORE_TITLE = re.compile(
    rf"\b({_WORD}(?:{_SP}+[A-Z]\.)?(?:{_SP}+{_WORD}){{1,2}}){_SP}*[,\-–—|:]{_SP}*(?:[A-Z][a-z]+{_SP}+)?(?:{_TITLE_ALT})\b"
)
# CEO: Jane Doe  /  Director, John Smith
_NAME_AFTER_TITLE = re.compile(
    rf"\b(?:{_TITLE_ALT}){_SP}*[,\-–—|:]{_SP}*({_WORD}(?:{_SP}+[A-Z]\.)?(?:{_SP}+{_WORD}){{1,2}})\b"
)

_SECTION_HEADING = re.compile(r"\b(?:%s)\b" % "|".join(SECTION_KEYWORDS), re.I)
_NAME_HINT = re.compile(r"(?:^|[-_\s])(?:name|person|author|member|staff|profile)(?:$|[-_\s])", re.I)
SECTION_HEADING_TAGS = ["h1", "h2", "h3", "h4"]

# Capitalized words that never occur in a person's name: navigation and
# marketing vocabulary, street suffixes, and the job-title keywords above
NON_NAME_WORDS = frozenset(
    {
        "home", "product", "products", "features", "feature", "pricing", "plans", "plan",
        "program", "programs", "customer", "customers", "success", "stories", "story",
        "services", "service", "solutions", "solution", "about", "contact", "team", "blog",
        "news", "careers", "jobs", "login", "support", "help", "privacy", "terms", "policy",
        "company", "resources", "learn", "more", "read", "get", "started", "sign", "free",
        "trial", "demo", "request", "book", "our", "your", "the", "welcome", "meet", "write",
        "call", "email", "phone", "fax", "office", "offices", "hours", "menu", "search",
        "shop", "cart", "store", "account", "download", "events", "case", "studies",
        "partners", "industries", "platform", "overview", "pages", "page", "click", "here",
        "marketing", "sales", "business", "enterprise", "community", "documentation",
        "street", "st", "avenue", "ave", "road", "rd", "boulevard", "blvd", "drive",
        "parkway", "highway", "suite", "box", "floor", "building",
    }
    | {word.lower() for keyword in TITLE_KEYWORDS for word in keyword.split()}
)

EMAIL_WINDOW = 100
SECTION_WINDOW = 300


def is_valid_name(name: str) -> bool:
    if not name:
        return False
    lowered = name.lower()
    if any(phrase in lowered for phrase in NAME_DENYLIST):
        return False

    words = name.split()
    if not 2 <= len(words) <= 4:
        return False
    if any(word.rstrip(".,").lower() in NON_NAME_WORDS for word in words):
        return False
    return all(word[0].isupper() and 2 <= len(word) <= 20 for word in words)


def _normalize(candidate: str) -> str:
    return " ".join(candidate.replace(",", " ").split())


def _accept(candidates: Iterable[str]) -> List[str]:
    out: List[str] = []
    seen = set()
    for candidate in candidates:
        name = _normalize(candidate)
        if name not in seen and is_valid_name(name):
            seen.add(name)
            out.append(name)
    return out


def names_by_pattern(text: str) -> List[str]:
    candidates = []
    for pattern in NAME_PATTERNS:
        candidates.extend(m.group(1) for m in pattern.finditer(text))
    return _accept(candidates)


def names_near_emails(text: str, emails: Iterable[str]) -> List[str]:
    """The closest name before, and the first name after, each email occurrence."""
    candidates = []
    lowered = text.lower()
    for email in emails:
        start = lowered.find(email)
        while start != -1:
            before = text[max(0, start - EMAIL_WINDOW):start]
            after = text[start + len(email):start + len(email) + EMAIL_WINDOW]
            preceding = [m.group(1) for m in _CONTEXT_NAME.finditer(before)]
            if preceding:
                candidates.append(preceding[-1])
            following = _CONTEXT_NAME.search(after)
            if following:
                candidates.append(following.group(1))
            start = lowered.find(email, start + len(email))
    return _accept(candidates)


def names_near_titles(text: str) -> List[str]:
    candidates = [m.group(1) for m in _NAME_BEFORE_TITLE.finditer(text)]
    candidates.extend(m.group(1) for m in _NAME_AFTER_TITLE.finditer(text))
    return _accept(candidates)


def _text_after(heading, limit: int) -> str:
    """Up to ``limit`` characters of text following ``heading``, one string per line."""
    parts: List[str] = []
    size = 0
    for string in heading.find_all_next(string=True):
        if any(parent is heading for parent in string.parents):
            continue
        value = " ".join(string.split())
        if not value:
            continue
        parts.append(value)
        size += len(value)
        if size >= limit:
            break
    return "\n".join(parts)[:limit]


def names_in_sections(soup: Optional[BeautifulSoup]) -> List[str]:
    """Names under a contact/about/team heading (h1-h4), plus name-hinted elements."""
    if soup is None:
        return []

    candidates = []
    for heading in soup.find_all(SECTION_HEADING_TAGS):
        if _SECTION_HEADING.search(heading.get_text(" ")):
            window = _text_after(heading, SECTION_WINDOW)
            candidates.extend(m.group(1) for m in _CONTEXT_NAME.finditer(window))

    for element in soup.find_all(True):
        hints = " ".join(element.get("class", [])) + " " + (element.get("id") or "")
        if _NAME_HINT.search(hints):
            value = element.get_text(" ", strip=True)
            if value and len(value) <= 80:
                candidates.append(value)
    return _accept(candidates)


def extract_names(
    text: str, soup: Optional[BeautifulSoup] = None, emails: Iterable[str] = ()
) -> List[str]:
    """All accepted names on a page, first-seen order."""
    if not text:
        return []
    return _accept(
        names_by_pattern(text)
        + names_near_emails(text, emails)
        + names_near_titles(text)
        + names_in_sections(soup)
    )
