"""
Email extraction.

- Plain addresses, ``[at]``/``[dot]``, ``(at)``/``(dot)`` and spaced variants
- ``mailto:`` hrefs and ``data-email`` / ``data-mail`` / ``data-contact`` attributes
- Every candidate goes through :func:`clean_email`; rejects are simply dropped
"""
import re
import urllib.parse
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup

_LOCAL = r"[a-zA-Z0-9._%+\-]+"
_DOMAIN = r"[a-zA-Z0-9.\-]+"

EMAIL_PATTERNS = (
    re.compile(rf"\b{_LOCAL}@{_DOMAIN}\.[a-zA-Z]{{2,}}\b"),
    re.compile(rf"{_LOCAL}\s*\[\s*at\s*\]\s*{_DOMAIN}\s*\[\s*dot\s*\]\s*[a-zA-Z]{{2,}}", re.I),
    re.compile(rf"{_LOCAL}\s*\(\s*at\s*\)\s*{_DOMAIN}\s*\(\s*dot\s*\)\s*[a-zA-Z]{{2,}}", re.I),
    # john @ example . com; a dot is either bare or spaced on both sides
    re.compile(
        rf"{_LOCAL}(?:\s+@\s*|\s*@\s+)[a-zA-Z0-9\-]+"
        rf"(?:(?:\.|\s+\.\s+)[a-zA-Z0-9\-]+)*(?:\.|\s+\.\s+)[a-zA-Z]{{2,}}\b"
    ),
)

_OBFUSCATED = (
    (re.compile(r"\[\s*at\s*\]", re.I), "@"),
    (re.compile(r"\(\s*at\s*\)", re.I), "@"),
    (re.compile(r"\[\s*dot\s*\]", re.I), "."),
    (re.compile(r"\(\s*dot\s*\)", re.I), "."),
)

_VALID_EMAIL = re.compile(r"^[a-z0-9._%+\-]+@[a-z0-9.\-]+\.[a-z]{2,}$")

# ".26.sms" style tails glued on by page widgets
_NUMBERED_TAIL = re.compile(r"\.\d+\.[a-z]{1,4}$")

# Generic TLDs. A label glued on after one of these, or after a two-letter
# country code, is noise: help@mysite.ai.sms -> help@mysite.ai,
# user@example.com.Thanks -> user@example.com. hello@team.app.com is kept.
KNOWN_TLDS = frozenset(
    {"com", "org", "net", "edu", "gov", "mil", "int", "io", "ai", "app", "dev", "biz", "info", "co"}
)

# Asset names that look like addresses: logo@2x.png
_BAD_SUFFIXES = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg", ".css", ".js")

DATA_ATTRIBUTES = ("data-email", "data-mail", "data-contact")


def _strip_spurious_suffix(email: str) -> str:
    email = _NUMBERED_TAIL.sub("", email)

    local, _, domain = email.partition("@")
    labels = domain.split(".")
    if len(labels) < 3:
        return email
    last, previous = labels[-1], labels[-2]
    # Known and two-letter trailing labels are left alone: app.com, com.au, co.uk
    if last not in KNOWN_TLDS and len(last) != 2 and (previous in KNOWN_TLDS or len(previous) == 2):
        email = f"{local}@{'.'.join(labels[:-1])}"
    return email


def clean_email(raw: str) -> Optional[str]:
    """Normalize one candidate address.

    Returns:
        The canonical address, or None if the candidate is not a valid email
    """
    if not raw:
        return None

    cleaned = raw
    for rx, repl in _OBFUSCATED:
        cleaned = rx.sub(repl, cleaned)
    cleaned = re.sub(r"\s+", "", cleaned).lower()
    cleaned = cleaned.strip("\"'<>[](){},;:.")
    cleaned = _strip_spurious_suffix(cleaned)

    if not _VALID_EMAIL.match(cleaned):
        return None
    if cleaned.endswith(_BAD_SUFFIXES):
        return None
    return cleaned


def _unique(values: Iterable[Optional[str]]) -> List[str]:
    out: List[str] = []
    seen = set()
    for value in values:
        if value and value not in seen:
            seen.add(value)
            out.append(value)
    return out


def find_emails(text: str) -> List[str]:
    """Canonical addresses found in free text, first-seen order."""
    if not text:
        return []
    candidates = []
    for pattern in EMAIL_PATTERNS:
        candidates.extend(clean_email(m.group(0)) for m in pattern.finditer(text))
    return _unique(candidates)


def mailto_emails(soup: BeautifulSoup) -> List[str]:
    candidates = []
    for anchor in soup.select('a[href^="mailto:" i]'):
        target = anchor.get("href", "")[len("mailto:"):].split("?")[0]
        candidates.append(clean_email(urllib.parse.unquote(target)))
    return _unique(candidates)


def attribute_emails(soup: BeautifulSoup) -> List[str]:
    candidates = []
    for element in soup.select(", ".join(f"[{attr}]" for attr in DATA_ATTRIBUTES)):
        for attr in DATA_ATTRIBUTES:
            value = element.get(attr)
            if value:
                candidates.append(clean_email(value))
                break
    return _unique(candidates)


def extract_emails(text: str, soup: Optional[BeautifulSoup] = None) -> List[str]:
    """Union of text, mailto and data-attribute addresses."""
    found = find_emails(text)
    if soup is not None:
        found = _unique(found + mailto_emails(soup) + attribute_emails(soup))
    return found
