"""Test module for email extraction."""
import pytest
from bs4 import BeautifulSoup

from email_scraper.extraction.emails import clean_email, extract_emails, find_emails


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("John.Doe@Example.COM", "john.doe@example.com"),
        ("<sales@example.com>.", "sales@example.com"),
        ("help@mysite.ai.sms", "help@mysite.ai"),
        ("info@company.com.26.sms", "info@company.com"),
        ("contact@shop.co.uk", "contact@shop.co.uk"),
        ("help@mysite.ai.26.sms", "help@mysite.ai"),
        ("hello@team.app.com", "hello@team.app.com"),
        ("user@example.com.Thanks", "user@example.com"),
        ("x @ y . com", "x@y.com"),
        ("jane [at] example [dot] org", "jane@example.org"),
        ("logo@2x.png", None),
        ("not-an-email", None),
        ("", None),
    ],
)
def test_clean_email(raw, expected):
    assert clean_email(raw) == expected


def test_find_emails_plain_and_obfuscated():
    text = (
        "Write to sales@example.com or SALES@example.com. "
        "Press: press (at) example (dot) com, support [at] example [dot] com"
    )
    assert find_emails(text) == [
        "sales@example.com",
        "support@example.com",
        "press@example.com",
    ]


def test_spaced_at_sign_does_not_swallow_next_sentence():
    assert find_emails("Mail john @ example.com. Next we") == ["john@example.com"]


def test_find_emails_spaced_address_in_sentence():
    assert find_emails("Contact x @ y . com today") == ["x@y.com"]


def test_find_emails_drops_word_glued_after_tld():
    assert find_emails("Email user@example.com.Thanks for writing") == ["user@example.com"]


def test_find_emails_empty_text():
    assert find_emails("") == []


def test_extract_emails_from_mailto_and_data_attributes():
    soup = BeautifulSoup(
        '<a href="mailto:Team@Example.com?subject=Hi">Write us</a>'
        '<span data-email="hidden@example.com"></span>'
        '<img src="icon@2x.png">',
        "html.parser",
    )
    assert extract_emails("Visible: first@example.com", soup) == [
        "first@example.com",
        "team@example.com",
        "hidden@example.com",
    ]
