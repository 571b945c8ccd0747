from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import StrEnum

from pydantic import BaseModel

from hotpepper.schemas.records import FullRecord


class JobStatus(StrEnum):
    pending = "pending"
    collecting = "collecting"
    processing = "processing"
    completed = "completed"
    failed = "failed"


FINISHED = (JobStatus.completed, JobStatus.failed)


class ScrapeJob(BaseModel):
    job_id: str
    status: JobStatus
    keyword: str
    max_pages: int
    created_at: datetime
    finished_at: datetime | None = None
    total: int = 0
    processed: int = 0
    records: list[FullRecord] = []
    error: str | None = None


class JobStore:
    """In-memory registry of background scrape jobs. Lost on restart."""

    def __init__(self, max_jobs: int = 100) -> None:
        self._jobs: dict[str, ScrapeJob] = {}
        self._max_jobs = max_jobs

    def _evict(self) -> None:
        if len(self._jobs) <= self._max_jobs:
            return
        # Oldest finished jobs go first; running jobs are never evicted
        candidates = sorted(
            (j for j in self._jobs.values() if j.status in FINISHED),
            key=lambda j: j.created_at,
        )
        while len(self._jobs) > self._max_jobs and candidates:
            self._jobs.pop(candidates.pop(0).job_id, None)

    def create_job(self, keyword: str, max_pages: int) -> ScrapeJob:
        job = ScrapeJob(
            job_id=uuid.uuid4().hex[:12],
            status=JobStatus.pending,
            keyword=keyword,
            max_pages=max_pages,
            created_at=datetime.now(timezone.utc),
        )
        self._jobs[job.job_id] = job
        self._evict()
        return job

    def get_job(self, job_id: str) -> ScrapeJob | None:
        return self._jobs.get(job_id)

    def active_job(self, keyword: str, max_pages: int) -> ScrapeJob | None:
        for job in self._jobs.values():
            if (
                job.keyword == keyword
                and job.max_pages == max_pages
                and job.status not in FINISHED
            ):
                return job
        return None

    def mark_collecting(self, job_id: str) -> None:
        if job := self._jobs.get(job_id):
            job.status = JobStatus.collecting

    def mark_processing(self, job_id: str, total: int) -> None:
        if job := self._jobs.get(job_id):
            job.status = JobStatus.processing
            job.total = total

    def update_progress(self, job_id: str, processed: int, total: int) -> None:
        if job := self._jobs.get(job_id):
            job.processed = processed
            job.total = total

    def mark_completed(self, job_id: str, records: list[FullRecord]) -> None:
        if job := self._jobs.get(job_id):
            job.status = JobStatus.completed
            job.records = records
            job.processed = len(records)
            job.total = len(records)
            job.finished_at = datetime.now(timezone.utc)

    def mark_failed(self, job_id: str, error: str) -> None:
        if job := self._jobs.get(job_id):
            job.status = JobStatus.failed
            job.error = error
            job.finished_at = datetime.now(timezone.utc)
