from fastapi import APIRouter

from hotpepper.dependencies import ScrapeDep
from hotpepper.schemas.responses import SearchResult

router = APIRouter(prefix="/api")


@router.get("/search", response_model=SearchResult)
async def search(service: ScrapeDep, keyword: str = "") -> SearchResult:
    return await service.search(keyword)
