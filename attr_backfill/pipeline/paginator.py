from typing import Any, AsyncIterator, Optional, Protocol
import asyncio
import logging

from attr_backfill.core.config import settings
from attr_backfill.models.schemas import ScanPage

logger = logging.getLogger(__name__)


class ScanSource(Protocol):
    async def scan_page(self, limit: int, continuation_token: Optional[Any] = None) -> ScanPage: ...


class Paginator:
    """Drives sequential scan calls until the store stops returning a continuation token.

    The first call requests ``first_page_limit`` without a token; later calls
    request ``page_limit`` with the last returned token. Termination depends only
    on ``has_more``: a page may be empty and still carry a token.
    Scan errors are not caught here.
    """

    def __init__(self,
                 source: ScanSource,
                 first_page_limit: Optional[int] = None,
                 page_limit: Optional[int] = None,
                 page_delay_seconds: Optional[float] = None,
                 log: Optional[logging.Logger] = None):
        self.source = source
        self.first_page_limit = settings.first_page_limit if first_page_limit is None else first_page_limit
        self.page_limit = settings.page_limit if page_limit is None else page_limit
        self.page_delay_seconds = settings.page_delay_seconds if page_delay_seconds is None else page_delay_seconds
        self.log = log or logger

    async def pages(self) -> AsyncIterator[ScanPage]:
        token: Optional[Any] = None
        first = True
        while True:
            limit = self.first_page_limit if first else self.page_limit
            self.log.info("Scanning batch of %d items...", limit)
            page = await self.source.scan_page(limit, None if first else token)
            yield page
            if not page.has_more:
                return
            token = page.next_token
            first = False
            if self.page_delay_seconds:
                # simple pacing to avoid throttling in large tables
                await asyncio.sleep(self.page_delay_seconds)
