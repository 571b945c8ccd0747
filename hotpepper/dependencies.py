from typing import Annotated

from fastapi import Depends, Request

from hotpepper.config import Settings
from hotpepper.jobs import JobStore
from hotpepper.services.scrape import ScrapeService


def get_scrape_service(request: Request) -> ScrapeService:
    return request.app.state.scrape_service


def get_job_store(request: Request) -> JobStore:
    return request.app.state.job_store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


ScrapeDep = Annotated[ScrapeService, Depends(get_scrape_service)]
JobStoreDep = Annotated[JobStore, Depends(get_job_store)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
