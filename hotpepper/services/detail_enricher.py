import asyncio
import logging

from hotpepper.mappers.contact_parser import parse_contact_page
from hotpepper.mappers.detail_parser import parse_detail_page
from hotpepper.schemas.records import FullRecord, ListingRecord
from hotpepper.services.fetcher import Fetcher

logger = logging.getLogger(__name__)


def contact_url(url: str) -> str:
    return url.rstrip("/") + "/tel/"


class DetailEnricher:
    def __init__(self, fetcher: Fetcher):
        self._fetcher = fetcher

    async def enrich(self, listing: ListingRecord) -> FullRecord:
        """Merge the salon's detail page and /tel/ page into a FullRecord.

        Best-effort, never raises: any failure yields the bare listing.
        """
        try:
            detail_html, contact_html = await asyncio.gather(
                self._fetcher.fetch(listing.url),
                self._fetcher.fetch(contact_url(listing.url)),
            )
            detail = parse_detail_page(detail_html)
            phone = parse_contact_page(contact_html)
            return FullRecord(
                **listing.model_dump(),
                **detail.model_dump(),
                resolved_phone=phone,
            )
        except Exception:
            logger.exception("Detail extraction failed for %s", listing.url)
            return FullRecord(**listing.model_dump())
