import re
from collections.abc import Callable

from bs4 import BeautifulSoup, NavigableString, Tag

from hotpepper.mappers.html_text import clean_text, parse_html

PHONE_LABEL = "電話番号"

_PHONE_TABLE = "table.wFull.bdCell.pCell10.mT15"
# 03-1234-5678, 0120-123-456, 090 1234 5678 ...
_PHONE_RE = re.compile(r"0\d{1,4}[-\s]?\d{1,4}[-\s]?\d{3,4}")
_SKIP_TAGS = frozenset({"script", "style", "noscript"})


def _from_phone_table(soup: BeautifulSoup) -> str | None:
    table = soup.select_one(_PHONE_TABLE)
    if table is None:
        return None
    phone = None
    for row in table.find_all("tr"):
        if clean_text(row.find("th")) != PHONE_LABEL:
            continue
        phone = clean_text(row.find("td")) or phone
    return phone


def _from_labelled_cell(soup: BeautifulSoup) -> str | None:
    phone = None
    for th in soup.find_all("th"):
        if clean_text(th) != PHONE_LABEL:
            continue
        sibling = th.find_next_sibling()
        if sibling is not None and sibling.name == "td":
            phone = clean_text(sibling) or phone
    return phone


def _from_tel_link(soup: BeautifulSoup) -> str | None:
    link = soup.select_one("a[href^='tel:']")
    if link is None:
        return None
    return link["href"][len("tel:"):].strip() or None


def _own_text(el: Tag) -> str:
    return "".join(
        str(child) for child in el.children if type(child) is NavigableString
    ).strip()


def _from_text_scan(soup: BeautifulSoup) -> str | None:
    for el in soup.find_all(True):
        if el.name in _SKIP_TAGS:
            continue
        match = _PHONE_RE.search(_own_text(el))
        if match:
            return match.group(0)
    return None


PHONE_STRATEGIES: tuple[Callable[[BeautifulSoup], str | None], ...] = (
    _from_phone_table,
    _from_labelled_cell,
    _from_tel_link,
    _from_text_scan,
)


def parse_contact_page(html: str) -> str | None:
    """Resolve the salon's real phone number from its /tel/ page.

    Strategies run in PHONE_STRATEGIES order; the first non-empty value wins.
    """
    soup = parse_html(html)
    for strategy in PHONE_STRATEGIES:
        phone = strategy(soup)
        if phone:
            return phone
    return None
