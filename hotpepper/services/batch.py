import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from typing import TypeVar

from hotpepper.config import Settings
from hotpepper.exceptions.custom import InvalidRequestError
from hotpepper.schemas.events import ProgressEvent
from hotpepper.schemas.records import ChunkResult, FullRecord, ListingRecord
from hotpepper.services.detail_enricher import DetailEnricher

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def run_in_workers(
    items: Sequence[T],
    worker_count: int,
    fn: Callable[[T], Awaitable[R]],
    delay: float = 0.0,
) -> list[R]:
    """Process items with a fixed pool of sequential workers.

    Items are dealt round-robin (item i goes to worker i % W). Each worker
    handles its bucket in order, sleeping ``delay`` between items. Results
    come back grouped by worker, so they follow input order only when W == 1.
    """
    n = max(1, min(worker_count, len(items)))
    buckets: list[list[T]] = [[] for _ in range(n)]
    for index, item in enumerate(items):
        buckets[index % n].append(item)

    async def _work(bucket: list[T]) -> list[R]:
        out: list[R] = []
        for i, item in enumerate(bucket):
            if i and delay:
                await asyncio.sleep(delay)
            out.append(await fn(item))
        return out

    results = await asyncio.gather(*(_work(bucket) for bucket in buckets))
    return [r for bucket_results in results for r in bucket_results]


class BatchScheduler:
    def __init__(self, enricher: DetailEnricher, settings: Settings):
        self._enricher = enricher
        self._settings = settings

    async def run_continuous(
        self,
        listings: list[ListingRecord],
        on_progress: Callable[[int, int], None] | None = None,
    ) -> list[FullRecord]:
        """Enrich every listing with the worker pool; output is grouped by worker."""
        total = len(listings)
        done = 0

        async def _enrich(listing: ListingRecord) -> FullRecord:
            nonlocal done
            record = await self._enricher.enrich(listing)
            done += 1
            if on_progress:
                on_progress(done, total)
            return record

        return await run_in_workers(
            listings,
            self._settings.detail_worker_count,
            _enrich,
            delay=self._settings.worker_delay,
        )

    async def stream(
        self, listings: list[ListingRecord]
    ) -> AsyncIterator[ProgressEvent | FullRecord]:
        """Enrich listings one at a time, announcing each before it starts."""
        total = len(listings)
        for index, listing in enumerate(listings):
            if index and self._settings.worker_delay:
                await asyncio.sleep(self._settings.worker_delay)
            yield ProgressEvent(
                phase="processing",
                current=index + 1,
                total=total,
                message=listing.name,
            )
            yield await self._enricher.enrich(listing)

    async def process_chunk(
        self, items: list[ListingRecord], cursor: int = 0
    ) -> ChunkResult:
        """Enrich ``items[cursor:cursor + chunk_size]`` and report the next cursor.

        Stateless: the caller keeps the item list and cursor between calls.
        ``next_cursor`` is None once the chunk reaches the end of the list.
        """
        if cursor < 0 or (cursor >= len(items) and not (cursor == 0 and not items)):
            raise InvalidRequestError(
                f"cursor {cursor} out of range for {len(items)} items"
            )

        size = self._settings.chunk_size
        chunk = items[cursor:cursor + size]
        wave_size = max(1, self._settings.chunk_worker_count)

        results: list[FullRecord] = []
        for start in range(0, len(chunk), wave_size):
            if start and self._settings.chunk_delay:
                await asyncio.sleep(self._settings.chunk_delay)
            wave = chunk[start:start + wave_size]
            results.extend(
                await asyncio.gather(*(self._enricher.enrich(item) for item in wave))
            )

        next_cursor: int | None = cursor + size
        if next_cursor >= len(items):
            next_cursor = None
        logger.info(
            "Processed chunk at cursor %d (%d items, next=%s)",
            cursor, len(results), next_cursor,
        )
        return ChunkResult(results=results, next_cursor=next_cursor)
