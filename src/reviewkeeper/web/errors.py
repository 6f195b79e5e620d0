"""Error responses for the Reviewkeeper HTTP API.

Business rejections (ReviewError) map onto a status by their code; request
validation failures become 400 INVALID_REQUEST; store failures become 500
INTERNAL_ERROR and are logged with their traceback. Every error body has the
shape ``{"error": {"code": ..., "message": ...}}``.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi import status as http_status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from reviewkeeper.errors import ReviewError
from reviewkeeper.logging import get_logger

logger = get_logger(__name__)

ERROR_STATUS: dict[str, int] = {
    "UNAUTHORIZED": http_status.HTTP_401_UNAUTHORIZED,
    "NOT_FOUND": http_status.HTTP_404_NOT_FOUND,
    "TEAM_EXISTS": http_status.HTTP_400_BAD_REQUEST,
    "PR_EXISTS": http_status.HTTP_409_CONFLICT,
    "PR_MERGED": http_status.HTTP_409_CONFLICT,
    "NOT_ASSIGNED": http_status.HTTP_409_CONFLICT,
    "NO_CANDIDATE": http_status.HTTP_409_CONFLICT,
    "TEAM_COMPATIBILITY": http_status.HTTP_409_CONFLICT,
    "INVALID_TRANSITION": http_status.HTTP_409_CONFLICT,
}


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    error: ErrorDetail


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    """Build a JSONResponse carrying an ErrorResponse body."""
    body = ErrorResponse(error=ErrorDetail(code=code, message=message))
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def review_error_handler(request: Request, exc: ReviewError) -> JSONResponse:
    status_code = ERROR_STATUS.get(exc.code, http_status.HTTP_500_INTERNAL_SERVER_ERROR)
    logger.warning(
        "request_rejected",
        path=request.url.path,
        code=exc.code,
        status_code=status_code,
        error=exc.message,
    )
    return error_response(status_code, exc.code, exc.message)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.warning("invalid_request", path=request.url.path, errors=exc.errors())
    return error_response(
        http_status.HTTP_400_BAD_REQUEST,
        "INVALID_REQUEST",
        "invalid request body or parameters",
    )


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        "store_failure",
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    return error_response(
        http_status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "internal server error",
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach the Reviewkeeper exception handlers to an application."""
    app.add_exception_handler(ReviewError, review_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
