import logging
import re

from bs4 import Tag

from hotpepper.mappers.html_text import clean_text, parse_html
from hotpepper.schemas.records import ListingRecord

logger = logging.getLogger(__name__)

SITE_ORIGIN = "https://beauty.hotpepper.jp"

_SALON_ID_RE = re.compile(r"/slnH\d+")
_PAGE_COUNTER_RE = re.compile(r"(\d+)/(\d+)ページ")


def canonicalize_url(href: str | None, origin: str = SITE_ORIGIN) -> str | None:
    """Reduce a salon link to ``origin/slnH<digits>``.

    Query strings, fragments and any trailing path (``/tel/``, ``/coupon/``...)
    are discarded. Returns None when the link has no salon identifier.
    """
    if not href:
        return None
    match = _SALON_ID_RE.search(href)
    if not match:
        return None
    return origin.rstrip("/") + match.group(0)


def _listing_name(row: Tag) -> str:
    name_el = row.select_one(".slnName")
    if name_el is None:
        return ""
    # The anchor holds only the salon name; badges like "UP" sit beside it
    anchor = name_el.find("a")
    name = clean_text(anchor) if isinstance(anchor, Tag) else ""
    return name or clean_text(name_el)


def _listing_href(row: Tag) -> str | None:
    img_list = row.select_one(".slnImgList")
    if img_list is not None:
        first_child = img_list.find(True, recursive=False)
        if first_child is not None:
            anchor = first_child.find("a", href=True)
            if anchor is not None:
                return anchor["href"]

    anchor = row.select_one("a[href*='/slnH']")
    if anchor is not None:
        return anchor.get("href")
    return None


def parse_listing_page(
    html: str, page: int = 1, origin: str = SITE_ORIGIN
) -> list[ListingRecord]:
    """Extract salon listings from one search result page.

    Listings without a name or without a salon link are dropped. Within the
    page each canonical URL appears once; the first container carrying it wins,
    even when that container is dropped for having no name.
    """
    soup = parse_html(html)
    seen: set[str] = set()
    listings: list[ListingRecord] = []

    for row in soup.select(".slnCassetteList > li"):
        url = canonicalize_url(_listing_href(row), origin)
        if not url:
            continue
        if url in seen:
            continue
        # An unnamed container still claims its salon ID
        seen.add(url)
        name = _listing_name(row)
        if not name:
            logger.debug("Dropping unnamed listing %s on page %d", url, page)
            continue
        listings.append(ListingRecord(name=name, url=url, page=page))

    return listings


def parse_total_pages(html: str) -> int:
    """Read the "<current>/<total>ページ" counter; 1 when absent."""
    soup = parse_html(html)
    for p in soup.find_all("p"):
        match = _PAGE_COUNTER_RE.search(p.get_text())
        if match:
            total = int(match.group(2))
            return total if total > 0 else 1
    return 1


def parse_total_count(html: str) -> int:
    soup = parse_html(html)
    counter = soup.select_one("span.numberOfResult")
    if counter is None:
        return 0
    digits = clean_text(counter).replace(",", "")
    try:
        return int(digits)
    except ValueError:
        return 0
