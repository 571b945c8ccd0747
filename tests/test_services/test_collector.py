"""Tests for PageCollector."""

from unittest.mock import patch

import httpx
import pytest
import respx
from httpx import Response

from html_pages import SEARCH_URL, listing_item, listing_page, salon_url, salons_page
from hotpepper.mappers import listing_parser
from hotpepper.services.collector import PageCollector, effective_page_count
from hotpepper.services.fetcher import Fetcher


@pytest.fixture
def collector(settings):
    return PageCollector(Fetcher(httpx.AsyncClient()), settings)


def _route_pages(pages: dict[int, str]):
    """respx side effect serving list pages by their ``pn`` query param."""

    def _handler(request):
        pn = int(request.url.params["pn"])
        if pn not in pages:
            return Response(404)
        return Response(200, html=pages[pn])

    return _handler


# --- collect ---


@respx.mock
async def test_two_pages_with_in_page_duplicate(collector):
    page1 = listing_page(
        [
            listing_item("Salon 1", "/slnH001/?vos=a"),
            listing_item("Salon 2", "/slnH002/"),
            listing_item("Salon 1 again", "/slnH001/?vos=b"),
        ],
        current=1,
        total=2,
    )
    page2 = salons_page(["003", "004", "005"], current=2, total=2)
    respx.get(SEARCH_URL).mock(side_effect=_route_pages({1: page1, 2: page2}))

    listings = await collector.collect("A", page_limit=5)

    page1_listings = [s for s in listings if s.page == 1]
    assert [s.url for s in page1_listings] == [salon_url("001"), salon_url("002")]
    assert [s.page for s in listings] == [1, 1, 2, 2, 2]
    assert len(listings) == 2 + 3


@respx.mock
async def test_first_page_not_refetched(collector):
    route = respx.get(SEARCH_URL).mock(
        side_effect=_route_pages({
            1: salons_page(["001"], total=3),
            2: salons_page(["002"], current=2, total=3),
            3: salons_page(["003"], current=3, total=3),
        })
    )

    await collector.collect("A", page_limit=3)

    requested = sorted(int(c.request.url.params["pn"]) for c in route.calls)
    assert requested == [1, 2, 3]


@pytest.mark.parametrize(
    ("total_pages", "page_limit", "expected"),
    [(3, 10, 3), (10, 2, 2), (4, 4, 4), (1, 5, 1), (7, 1, 1)],
)
@respx.mock
async def test_effective_pages(collector, total_pages, page_limit, expected):
    pages = {
        n: salons_page([f"{n:03d}"], current=n, total=total_pages)
        for n in range(1, total_pages + 1)
    }
    route = respx.get(SEARCH_URL).mock(side_effect=_route_pages(pages))

    listings = await collector.collect("A", page_limit=page_limit)

    assert route.call_count == expected
    assert [s.page for s in listings] == list(range(1, expected + 1))
    assert effective_page_count(total_pages, page_limit) == expected


@respx.mock
async def test_page_order_preserved_across_workers(settings):
    settings.list_worker_count = 2
    collector = PageCollector(Fetcher(httpx.AsyncClient()), settings)
    pages = {n: salons_page([f"{n:03d}"], current=n, total=5) for n in range(1, 6)}
    respx.get(SEARCH_URL).mock(side_effect=_route_pages(pages))

    listings = await collector.collect("A", page_limit=5)

    assert [s.page for s in listings] == [1, 2, 3, 4, 5]


@respx.mock
async def test_failed_page_contributes_nothing(collector):
    pages = {
        1: salons_page(["001"], total=3),
        3: salons_page(["003"], current=3, total=3),
    }
    respx.get(SEARCH_URL).mock(side_effect=_route_pages(pages))

    listings = await collector.collect("A", page_limit=3)

    assert [s.url for s in listings] == [salon_url("001"), salon_url("003")]


@respx.mock
async def test_parse_fault_on_one_page_is_contained(collector):
    pages = {n: salons_page([f"{n:03d}"], current=n, total=3) for n in range(1, 4)}
    respx.get(SEARCH_URL).mock(side_effect=_route_pages(pages))
    real_parse = listing_parser.parse_listing_page

    def _flaky(html, page=1, origin=listing_parser.SITE_ORIGIN):
        if page == 2:
            raise ValueError("broken markup")
        return real_parse(html, page=page, origin=origin)

    with patch("hotpepper.services.collector.parse_listing_page", side_effect=_flaky):
        listings = await collector.collect("A", page_limit=3)

    assert [s.page for s in listings] == [1, 3]


@respx.mock
async def test_cross_page_duplicates_are_kept(collector):
    pages = {
        1: salons_page(["001", "002"], total=2),
        2: salons_page(["002", "003"], current=2, total=2),
    }
    respx.get(SEARCH_URL).mock(side_effect=_route_pages(pages))

    listings = await collector.collect("A", page_limit=2)

    assert [s.url for s in listings].count(salon_url("002")) == 2


@respx.mock
async def test_unreachable_site_yields_empty(collector):
    respx.get(SEARCH_URL).mock(side_effect=httpx.ConnectError("down"))
    assert await collector.collect("A", page_limit=5) == []


@respx.mock
async def test_query_parameters(collector):
    route = respx.get(SEARCH_URL).mock(side_effect=_route_pages({1: salons_page([])}))

    await collector.collect("表参道", page_limit=1)

    params = route.calls.last.request.url.params
    assert params["freeword"] == "表参道"
    assert params["pn"] == "1"
    assert params["searchGender"] == "ALL"
    assert params["sortType"] == "popular"


# --- search ---


@respx.mock
async def test_search_probe(collector):
    page1 = listing_page(
        [listing_item(f"Salon {i}", f"/slnH00{i}/") for i in range(1, 8)],
        current=1,
        total=12,
        count="1,234",
    )
    route = respx.get(SEARCH_URL).mock(side_effect=_route_pages({1: page1}))

    result = await collector.search("A")

    assert route.call_count == 1
    assert result.keyword == "A"
    assert result.total_pages == 12
    assert result.total_count == 1234
    assert result.per_page_count == 7
    assert [p.name for p in result.preview] == [f"Salon {i}" for i in range(1, 6)]
    assert result.preview[0].url == salon_url("001")


@respx.mock
async def test_search_probe_on_empty_page(collector):
    respx.get(SEARCH_URL).mock(return_value=Response(200, html="<html></html>"))

    result = await collector.search("nothing")

    assert result.total_pages == 1
    assert result.total_count == 0
    assert result.per_page_count == 0
    assert result.preview == []
