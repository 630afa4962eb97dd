"""Test module for the robots.txt gate."""
from unittest.mock import AsyncMock, patch
from urllib.robotparser import RobotFileParser

import pytest

from email_scraper.utils.robots import RobotsGate, host_key

UA = "TestAgent/1.0"


def parsed_rules(*lines: str) -> RobotFileParser:
    parser = RobotFileParser("https://example.com/robots.txt")
    parser.parse(list(lines))
    return parser


def test_host_key():
    assert host_key("https://Example.com:8443/a/b?c=1") == "https://example.com:8443"


@pytest.mark.asyncio
async def test_disabled_gate_allows_everything():
    gate = RobotsGate(enabled=False, user_agent=UA)
    with patch.object(gate, "_load_rules", new=AsyncMock()) as load:
        assert await gate.can_fetch("https://example.com/private") is True
    load.assert_not_awaited()


@pytest.mark.asyncio
async def test_rules_evaluated_per_url_and_cached_per_host():
    gate = RobotsGate(enabled=True, user_agent=UA)
    rules = parsed_rules("User-agent: *", "Disallow: /private")
    with patch.object(gate, "_load_rules", new=AsyncMock(return_value=rules)) as load:
        assert await gate.can_fetch("https://example.com/public") is True
        assert await gate.can_fetch("https://example.com/private/page") is False

    load.assert_awaited_once_with("https://example.com")


@pytest.mark.asyncio
async def test_missing_robots_fails_open():
    gate = RobotsGate(enabled=True, user_agent=UA)
    with patch.object(gate, "_load_rules", new=AsyncMock(return_value=None)):
        assert await gate.can_fetch("https://example.com/anything") is True


@pytest.mark.asyncio
async def test_unexpected_error_fails_open():
    gate = RobotsGate(enabled=True, user_agent=UA)
    with patch.object(gate, "_load_rules", new=AsyncMock(side_effect=RuntimeError("dns"))):
        assert await gate.can_fetch("https://example.com/anything") is True


@pytest.mark.asyncio
async def test_shared_cache_between_gates():
    cache = {"https://example.com": parsed_rules("User-agent: *", "Disallow: /")}
    gate = RobotsGate(enabled=True, user_agent=UA, cache=cache)
    with patch.object(gate, "_load_rules", new=AsyncMock()) as load:
        assert await gate.can_fetch("https://example.com/page") is False
    load.assert_not_awaited()


@pytest.mark.asyncio
async def test_load_rules_network_failure_returns_none():
    gate = RobotsGate(enabled=True, user_agent=UA, timeout_s=0.1)
    with patch("email_scraper.utils.robots.aiohttp.ClientSession", side_effect=OSError("down")):
        assert await gate._load_rules("https://example.com") is None
