import logging
from urllib.parse import urlencode

from hotpepper.config import Settings
from hotpepper.mappers.listing_parser import (
    parse_listing_page,
    parse_total_count,
    parse_total_pages,
)
from hotpepper.schemas.records import ListingRecord
from hotpepper.schemas.responses import ListingPreview, SearchResult
from hotpepper.services.batch import run_in_workers
from hotpepper.services.fetcher import Fetcher

logger = logging.getLogger(__name__)

SEARCH_PATH = "/CSP/bt/salonSearch/search/"


def effective_page_count(total_pages: int, page_limit: int) -> int:
    return min(total_pages, page_limit)


class PageCollector:
    def __init__(self, fetcher: Fetcher, settings: Settings):
        self._fetcher = fetcher
        self._settings = settings

    @property
    def search_url(self) -> str:
        return self._settings.base_url.rstrip("/") + SEARCH_PATH

    def list_page_url(self, keyword: str, page: int) -> str:
        params = {
            "freeword": keyword,
            "pn": page,
            "searchGender": "ALL",
            "sortType": "popular",
            "fromSearchCondition": "true",
            "searchT": "検索",
        }
        return f"{self.search_url}?{urlencode(params)}"

    async def search(self, keyword: str) -> SearchResult:
        """Probe the first result page to size a job before crawling it."""
        html = await self._fetcher.fetch(self.list_page_url(keyword, 1))
        listings = parse_listing_page(html, page=1, origin=self._settings.base_url)
        return SearchResult(
            keyword=keyword,
            total_pages=parse_total_pages(html),
            total_count=parse_total_count(html),
            per_page_count=len(listings),
            preview=[
                ListingPreview(name=listing.name, url=listing.url)
                for listing in listings[: self._settings.preview_size]
            ],
        )

    async def collect(self, keyword: str, page_limit: int) -> list[ListingRecord]:
        """Crawl up to ``page_limit`` result pages and return their listings.

        Duplicates are removed within a page only. A page that fails to fetch
        or parse contributes no listings.
        """
        first_html = await self._fetcher.fetch(self.list_page_url(keyword, 1))
        total_pages = parse_total_pages(first_html)
        effective_pages = effective_page_count(total_pages, page_limit)
        logger.info(
            "Collecting %r: %d pages available, crawling %d",
            keyword, total_pages, effective_pages,
        )

        async def _collect_page(page: int) -> tuple[int, list[ListingRecord]]:
            try:
                html = (
                    first_html
                    if page == 1
                    else await self._fetcher.fetch(self.list_page_url(keyword, page))
                )
                listings = parse_listing_page(
                    html, page=page, origin=self._settings.base_url
                )
            except Exception:
                logger.exception("Failed to collect page %d for %r", page, keyword)
                return page, []
            if not listings:
                logger.warning("No listings on page %d for %r", page, keyword)
            return page, listings

        pages = await run_in_workers(
            range(1, effective_pages + 1),
            self._settings.list_worker_count,
            _collect_page,
        )
        # Workers return pages grouped by bucket; restore page order
        pages.sort(key=lambda item: item[0])
        return [listing for _, listings in pages for listing in listings]
