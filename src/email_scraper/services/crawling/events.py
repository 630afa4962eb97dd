"""
Progress events published by a crawl job.

Events are telemetry only: the channel never blocks the publisher and a
failing subscriber never reaches the crawl loop.
"""
import asyncio
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Dict, List, Optional

from ...logging_config import setup_logging

logger = setup_logging("crawl_events")


class CrawlEventType(str, Enum):
    PAGE_START = "page_start"
    EMAILS_FOUND = "emails_found"
    PAGE_COMPLETE = "page_complete"
    PAGE_BLOCKED = "page_blocked"
    PAGE_ERROR = "page_error"
    URL_FILTERED = "url_filtered"
    CRAWL_COMPLETE = "crawl_complete"


@dataclass
class CrawlEvent:
    type: CrawlEventType
    url: str
    depth: Optional[int] = None
    pages_visited: Optional[int] = None
    total_emails: Optional[int] = None
    emails: List[str] = field(default_factory=list)
    reason: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys and unset fields dropped."""
        data = asdict(self)
        data["type"] = self.type.value
        out = {}
        for key, value in data.items():
            if value is None or value == []:
                continue
            head, *rest = key.split("_")
            out[head + "".join(part.title() for part in rest)] = value
        return out


_CLOSED = object()


class CrawlEventChannel:
    """Unbounded event stream; the crawl publishes, callers iterate.

        channel = CrawlEventChannel()
        task = asyncio.create_task(CrawlJob(url, options, events=channel).run())
        async for event in channel:
            ...
    """

    def __init__(self):
        self._queue: "asyncio.Queue[Any]" = asyncio.Queue()
        self._closed = False
        self.history: List[CrawlEvent] = []

    def publish(self, event: CrawlEvent) -> None:
        if self._closed:
            return
        try:
            self.history.append(event)
            self._queue.put_nowait(event)
        except Exception as e:
            logger.warning("Dropped crawl event", extra={"type": event.type.value, "error": str(e)})

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(_CLOSED)

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aiter__(self) -> AsyncIterator[CrawlEvent]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item
