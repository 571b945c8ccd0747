from collections.abc import AsyncIterator

from fastapi import APIRouter, Response
from fastapi.responses import StreamingResponse

from hotpepper.config import Settings
from hotpepper.dependencies import ScrapeDep, SettingsDep
from hotpepper.exceptions.custom import InvalidRequestError
from hotpepper.mappers.csv_export import export_filename, records_to_csv
from hotpepper.schemas.records import JobCheckpoint
from hotpepper.schemas.responses import (
    ChunkResponse,
    CollectRequest,
    CollectResponse,
)
from hotpepper.services.scrape import ScrapeService

router = APIRouter(prefix="/api")


def resolve_page_limit(max_pages: int | None, settings: Settings) -> int:
    if max_pages is None:
        return settings.default_page_limit
    if max_pages < 1 or max_pages > settings.max_page_limit:
        raise InvalidRequestError(
            f"max_pages must be between 1 and {settings.max_page_limit}"
        )
    return max_pages


@router.get("/scrape")
async def scrape_csv(
    service: ScrapeDep,
    settings: SettingsDep,
    keyword: str = "",
    max_pages: int | None = None,
) -> Response:
    """Collect and enrich in one request; responds with the CSV export."""
    records = await service.run(keyword, resolve_page_limit(max_pages, settings))
    return Response(
        content=records_to_csv(records),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(keyword)}"'
        },
    )


async def _ndjson(service: ScrapeService, keyword: str, page_limit: int) -> AsyncIterator[str]:
    async for event in service.run_streaming(keyword, page_limit):
        yield event.model_dump_json() + "\n"


@router.get("/scrape/stream")
async def scrape_stream(
    service: ScrapeDep,
    settings: SettingsDep,
    keyword: str = "",
    max_pages: int | None = None,
) -> StreamingResponse:
    """Newline-delimited JSON events: progress..., then complete or error."""
    return StreamingResponse(
        _ndjson(service, keyword, resolve_page_limit(max_pages, settings)),
        media_type="application/x-ndjson",
    )


@router.post("/collect", response_model=CollectResponse)
async def collect(
    request: CollectRequest,
    service: ScrapeDep,
    settings: SettingsDep,
) -> CollectResponse:
    items = await service.collect(
        request.keyword, resolve_page_limit(request.max_pages, settings)
    )
    return CollectResponse(keyword=request.keyword, total=len(items), items=items)


@router.post(
    "/process",
    response_model=ChunkResponse,
    response_model_exclude_none=True,
)
async def process_chunk(checkpoint: JobCheckpoint, service: ScrapeDep) -> ChunkResponse:
    chunk = await service.process_chunk(checkpoint.items, checkpoint.cursor)
    return ChunkResponse(
        results=chunk.results,
        next_cursor=chunk.next_cursor,
        processed=checkpoint.cursor + len(chunk.results),
        total=len(checkpoint.items),
    )
