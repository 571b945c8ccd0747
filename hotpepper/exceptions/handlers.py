import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from .custom import InvalidRequestError, JobNotReadyError

logger = logging.getLogger(__name__)


async def invalid_request_error_handler(
    _request: Request, exc: InvalidRequestError
) -> JSONResponse:
    logger.warning("Rejected request: %s", exc.message)
    return JSONResponse(
        status_code=400,
        content={"detail": exc.message},
    )


async def job_not_ready_error_handler(
    _request: Request, exc: JobNotReadyError
) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={"detail": exc.message, "status": exc.status},
    )
