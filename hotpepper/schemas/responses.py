from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from hotpepper.schemas.records import FullRecord, ListingRecord


class ListingPreview(BaseModel):
    name: str
    url: str


class SearchResult(BaseModel):
    keyword: str
    total_pages: int
    total_count: int  # site-reported hit count, 0 when not shown
    per_page_count: int
    preview: list[ListingPreview] = []


class CollectRequest(BaseModel):
    keyword: str = ""
    max_pages: int | None = None


class CollectResponse(BaseModel):
    keyword: str
    total: int
    items: list[ListingRecord]


class ChunkResponse(BaseModel):
    results: list[FullRecord]
    next_cursor: int | None = None
    processed: int  # items covered so far, cursor + len(results)
    total: int


class JobRequest(BaseModel):
    keyword: str = ""
    max_pages: int | None = None


class JobSubmittedResponse(BaseModel):
    job_id: str
    status: str
    message: str


class JobStatusResponse(BaseModel):
    job_id: str
    status: str
    keyword: str
    max_pages: int
    created_at: datetime
    finished_at: datetime | None = None
    total: int = 0
    processed: int = 0
    error: str | None = None
