import logging
from collections.abc import AsyncIterator, Callable

from hotpepper.exceptions.custom import InvalidRequestError
from hotpepper.mappers.csv_export import records_to_csv
from hotpepper.schemas.events import (
    CompleteEvent,
    ErrorEvent,
    ProgressEvent,
    ScrapeEvent,
)
from hotpepper.schemas.records import ChunkResult, FullRecord, ListingRecord
from hotpepper.schemas.responses import SearchResult
from hotpepper.services.batch import BatchScheduler
from hotpepper.services.collector import PageCollector

logger = logging.getLogger(__name__)


def require_keyword(keyword: str | None) -> str:
    keyword = (keyword or "").strip()
    if not keyword:
        raise InvalidRequestError("keyword is required")
    return keyword


def require_page_limit(page_limit: int) -> int:
    if page_limit < 1:
        raise InvalidRequestError("max_pages must be at least 1")
    return page_limit


class ScrapeService:
    """Entry points used by the routers: probe, collect, chunk, stream, run."""

    def __init__(self, collector: PageCollector, scheduler: BatchScheduler):
        self._collector = collector
        self._scheduler = scheduler

    async def search(self, keyword: str) -> SearchResult:
        return await self._collector.search(require_keyword(keyword))

    async def collect(self, keyword: str, page_limit: int) -> list[ListingRecord]:
        keyword = require_keyword(keyword)
        return await self._collector.collect(keyword, require_page_limit(page_limit))

    async def process_chunk(
        self, items: list[ListingRecord], cursor: int = 0
    ) -> ChunkResult:
        return await self._scheduler.process_chunk(items, cursor)

    async def run(
        self,
        keyword: str,
        page_limit: int,
        on_collected: Callable[[int], None] | None = None,
        on_progress: Callable[[int, int], None] | None = None,
    ) -> list[FullRecord]:
        """Collect then enrich in one call. Result order is grouped by worker."""
        listings = await self.collect(keyword, page_limit)
        if on_collected:
            on_collected(len(listings))
        logger.info("Enriching %d listings for %r", len(listings), keyword)
        return await self._scheduler.run_continuous(listings, on_progress=on_progress)

    async def run_streaming(
        self, keyword: str, page_limit: int
    ) -> AsyncIterator[ScrapeEvent]:
        """Yield progress events and finish with exactly one complete or error event."""
        try:
            keyword = require_keyword(keyword)
            page_limit = require_page_limit(page_limit)

            yield ProgressEvent(
                phase="collecting", current=0, total=page_limit,
                message=f"Searching {keyword}",
            )
            listings = await self._collector.collect(keyword, page_limit)
            yield ProgressEvent(
                phase="collecting", current=len(listings), total=len(listings),
                message=f"Found {len(listings)} listings",
            )

            records: list[FullRecord] = []
            async for item in self._scheduler.stream(listings):
                if isinstance(item, ProgressEvent):
                    yield item
                else:
                    records.append(item)

            yield CompleteEvent(total=len(records), csv=records_to_csv(records))
        except InvalidRequestError as exc:
            yield ErrorEvent(message=exc.message)
        except Exception as exc:
            logger.exception("Streaming scrape for %r failed", keyword)
            yield ErrorEvent(message=str(exc) or type(exc).__name__)
