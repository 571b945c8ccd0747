import asyncio
import logging

from fastapi import APIRouter, HTTPException, Response
from fastapi.responses import JSONResponse

from hotpepper.dependencies import JobStoreDep, ScrapeDep, SettingsDep
from hotpepper.exceptions.custom import JobNotReadyError
from hotpepper.jobs import JobStatus, JobStore
from hotpepper.mappers.csv_export import export_filename, records_to_csv
from hotpepper.routers.scrape import resolve_page_limit
from hotpepper.schemas.responses import (
    JobRequest,
    JobStatusResponse,
    JobSubmittedResponse,
)
from hotpepper.services.scrape import ScrapeService, require_keyword

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


async def _run_scrape(
    job_id: str,
    service: ScrapeService,
    store: JobStore,
    keyword: str,
    max_pages: int,
) -> None:
    store.mark_collecting(job_id)
    try:
        records = await service.run(
            keyword,
            max_pages,
            on_collected=lambda total: store.mark_processing(job_id, total),
            on_progress=lambda done, total: store.update_progress(job_id, done, total),
        )
        store.mark_completed(job_id, records)
        logger.info("Scrape job %s completed with %d records", job_id, len(records))
    except Exception as exc:
        logger.exception("Scrape job %s failed", job_id)
        store.mark_failed(job_id, str(exc))


@router.post("/jobs", response_model=JobSubmittedResponse, status_code=202)
async def submit_job(
    request: JobRequest,
    service: ScrapeDep,
    store: JobStoreDep,
    settings: SettingsDep,
) -> JobSubmittedResponse:
    keyword = require_keyword(request.keyword)
    max_pages = resolve_page_limit(request.max_pages, settings)

    existing = store.active_job(keyword, max_pages)
    if existing:
        return JSONResponse(content={
            "job_id": existing.job_id,
            "status": "already_running",
            "message": "A job for this keyword is already running",
        })

    job = store.create_job(keyword=keyword, max_pages=max_pages)
    asyncio.create_task(_run_scrape(job.job_id, service, store, keyword, max_pages))
    return JobSubmittedResponse(
        job_id=job.job_id,
        status=job.status,
        message="Scrape job submitted",
    )


@router.get("/jobs/{job_id}", response_model=JobStatusResponse)
async def get_job_status(job_id: str, store: JobStoreDep) -> JobStatusResponse:
    job = store.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return JobStatusResponse(**job.model_dump(exclude={"records"}))


@router.get("/jobs/{job_id}/csv")
async def get_job_csv(job_id: str, store: JobStoreDep) -> Response:
    job = store.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    if job.status != JobStatus.completed:
        raise JobNotReadyError(job_id, job.status)
    return Response(
        content=records_to_csv(job.records),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(job.keyword)}"'
        },
    )
