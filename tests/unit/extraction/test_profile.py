"""Test module for address, social, title, company and keyword extraction."""
from bs4 import BeautifulSoup

from email_scraper.extraction.extractor import extract_links, extract_page, page_text, parse_html
from email_scraper.extraction.profile import (
    extract_addresses,
    extract_companies,
    extract_job_titles,
    extract_keywords,
    extract_social_media,
)


def test_extract_addresses_street_and_po_box():
    text = "Visit 123 Main Street, Springfield, IL 62701 or write to P.O. Box 42"
    assert extract_addresses(text) == ["123 Main Street, Springfield, IL 62701", "P.O. Box 42"]


def test_extract_addresses_none():
    assert extract_addresses("No address on this page") == []


def test_extract_social_media_from_hrefs():
    soup = BeautifulSoup(
        '<a href="https://www.linkedin.com/in/jane-doe/">in</a>'
        '<a href="https://twitter.com/janedoe">tw</a>'
        '<a href="https://x.com/acme">x</a>'
        '<a href="https://twitter.com/intent/tweet?text=hi">share</a>'
        '<a href="https://www.facebook.com/sharer/sharer.php">share</a>'
        '<a href="https://www.youtube.com/@acmechannel">yt</a>',
        "html.parser",
    )
    assert extract_social_media("", soup) == {
        "linkedin": ["linkedin.com/in/jane-doe"],
        "twitter": ["twitter.com/janedoe", "x.com/acme"],
        "youtube": ["youtube.com/@acmechannel"],
    }


def test_extract_social_media_ignores_lookalike_domains():
    assert extract_social_media("see dropbox.com/files and instagram.com/acme.shop") == {
        "instagram": ["instagram.com/acme.shop"],
    }


def test_extract_job_titles():
    soup = BeautifulSoup('<span class="job-title">Senior Engineer</span>', "html.parser")
    titles = extract_job_titles("Ann Lee is our CEO and Co-Founder", soup)
    assert titles == ["Senior Engineer", "CEO", "Co-Founder"]


def test_extract_companies_from_suffix_and_meta():
    soup = BeautifulSoup('<meta property="og:site_name" content="Acme">', "html.parser")
    companies = extract_companies("Made by Widget Works LLC in Ohio", soup)
    assert companies == ["Acme", "Widget Works LLC"]


def test_extract_keywords_capped():
    content = ",".join(f"kw{i}" for i in range(15))
    soup = BeautifulSoup(f'<meta name="keywords" content="{content}">', "html.parser")
    keywords = extract_keywords(soup)
    assert len(keywords) == 10
    assert keywords[0] == "kw0"


def test_extract_links_same_page_rules():
    soup = parse_html(
        '<a href="/about#team">a</a><a href="mailto:x@example.com">m</a>'
        '<a href="javascript:void(0)">j</a><a href="#top">t</a>'
        '<a href="https://other.org/">o</a><a href="/about">dup</a>'
    )
    assert extract_links("https://example.com/", soup) == [
        "https://example.com/about",
        "https://other.org/",
    ]


def test_extract_page_bundle():
    html = (
        '<html><head><meta name="keywords" content="consulting, design"></head><body>'
        "<script>var hidden = 'script@example.com';</script>"
        "<p>Jane Doe, CEO</p><p>jane@example.com</p>"
        '<a href="https://www.linkedin.com/in/janedoe">LinkedIn</a>'
        '<a href="/contact">Contact</a>'
        "</body></html>"
    )
    bundle = extract_page("https://example.com/", html)

    assert bundle.emails == ["jane@example.com"]
    assert "Jane Doe" in bundle.names
    assert bundle.social_media == {"linkedin": ["linkedin.com/in/janedoe"]}
    assert "CEO" in bundle.job_titles
    assert bundle.keywords == ["consulting", "design"]
    assert bundle.links == ["https://www.linkedin.com/in/janedoe", "https://example.com/contact"]


def test_extract_page_without_personal_data():
    bundle = extract_page("https://example.com/", "<p>Jane Doe jane@example.com</p>", False)
    assert bundle.emails == ["jane@example.com"]
    assert bundle.names == []
    assert bundle.social_media == {}


def test_job_title_hint_matches_whole_class_tokens():
    soup = BeautifulSoup(
        '<div class="position-relative">Partner Program</div>'
        '<span id="jobTitle">Lead Designer</span>'
        '<p class="member_role">Account Manager</p>',
        "html.parser",
    )
    assert extract_job_titles("", soup) == ["Lead Designer", "Account Manager"]


def test_company_hint_ignores_brand_and_confirm_classes():
    soup = BeautifulSoup(
        '<a class="navbar-brand">Home</a>'
        '<button class="btn-confirm">Confirm Order</button>'
        '<span class="company-name">Globex</span>',
        "html.parser",
    )
    assert extract_companies("", soup) == ["Globex"]


def test_company_suffix_stays_on_one_line():
    assert extract_companies("Blog\nWidget Works LLC") == ["Widget Works LLC"]


def test_page_text_one_line_per_block():
    soup = parse_html(
        "<nav><a href='/'>Home</a> <a href='/blog'>Blog</a></nav>"
        "<p>Hello <b>big</b>   world</p><ul><li>One</li><li>Two</li></ul>"
        "<script>ignored()</script>"
    )
    assert page_text(soup) == "Home Blog\nHello big world\nOne\nTwo"
