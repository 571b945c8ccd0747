import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from hotpepper.config import Settings
from hotpepper.exceptions.custom import InvalidRequestError, JobNotReadyError
from hotpepper.exceptions.handlers import (
    invalid_request_error_handler,
    job_not_ready_error_handler,
)
from hotpepper.jobs import JobStore
from hotpepper.routers.jobs import router as jobs_router
from hotpepper.routers.scrape import router as scrape_router
from hotpepper.routers.search import router as search_router
from hotpepper.services.batch import BatchScheduler
from hotpepper.services.collector import PageCollector
from hotpepper.services.detail_enricher import DetailEnricher
from hotpepper.services.fetcher import Fetcher
from hotpepper.services.scrape import ScrapeService


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
        fetcher = Fetcher(client, user_agent=settings.user_agent)
        collector = PageCollector(fetcher, settings)
        scheduler = BatchScheduler(DetailEnricher(fetcher), settings)

        app.state.settings = settings
        app.state.scrape_service = ScrapeService(collector, scheduler)
        app.state.job_store = JobStore(max_jobs=settings.max_jobs)

        yield


app = FastAPI(title="HotPepper Beauty Scraper", lifespan=lifespan)

app.add_exception_handler(InvalidRequestError, invalid_request_error_handler)
app.add_exception_handler(JobNotReadyError, job_not_ready_error_handler)

app.include_router(search_router)
app.include_router(scrape_router)
app.include_router(jobs_router)
