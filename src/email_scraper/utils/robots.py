"""robots.txt compliance gate.

Rules are fetched once per host (``scheme://netloc``) and cached; a missing or
unreachable robots.txt allows everything.
"""
from typing import Dict, Optional
from urllib.parse import urlparse
from urllib.robotparser import RobotFileParser

import aiohttp

from ..logging_config import setup_logging

logger = setup_logging("robots")

# host -> parsed rules; None means "allow everything" (fail-open)
RobotsCache = Dict[str, Optional[RobotFileParser]]


def host_key(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc.lower()}"


class RobotsGate:
    """Answers "may this URL be fetched?" for one crawl job.

    Args:
        enabled: When False every URL is allowed and nothing is fetched
        user_agent: Agent string matched against robots.txt groups
        timeout_s: Timeout for the robots.txt request
        cache: Optional cache shared between jobs
    """

    def __init__(
        self,
        enabled: bool,
        user_agent: str,
        timeout_s: float = 5.0,
        cache: Optional[RobotsCache] = None,
    ):
        self.enabled = enabled
        self.user_agent = user_agent
        self.timeout_s = timeout_s
        self.cache: RobotsCache = cache if cache is not None else {}

    async def _load_rules(self, host: str) -> Optional[RobotFileParser]:
        robots_url = f"{host}/robots.txt"
        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout_s)
            async with aiohttp.ClientSession(
                timeout=timeout, headers={"User-Agent": self.user_agent}
            ) as session:
                async with session.get(robots_url) as response:
                    if response.status != 200:
                        logger.info(
                            "No robots.txt, allowing all",
                            extra={"robots_url": robots_url, "status": response.status},
                        )
                        return None
                    body = await response.text(errors="ignore")
        except Exception as e:
            logger.warning(
                "Could not fetch robots.txt, allowing all",
                extra={"robots_url": robots_url, "error": str(e)},
            )
            return None

        parser = RobotFileParser(robots_url)
        parser.parse(body.splitlines())
        return parser

    async def can_fetch(self, url: str) -> bool:
        if not self.enabled:
            return True

        try:
            host = host_key(url)
            if host not in self.cache:
                self.cache[host] = await self._load_rules(host)
            rules = self.cache[host]
            if rules is None:
                return True
            return rules.can_fetch(self.user_agent, url)
        except Exception as e:
            logger.warning("robots check failed, allowing", extra={"url": url, "error": str(e)})
            return True
