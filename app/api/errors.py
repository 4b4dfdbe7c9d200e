"""Map core error kinds to HTTP responses"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
import structlog

from app.services.errors import (
    CoordinationError,
    NotFoundError,
    ReservationSystemError,
)

logger = structlog.get_logger()


def _error_body(exc: ReservationSystemError) -> dict:
    return {"error": exc.reason, "kind": exc.kind}


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=_error_body(exc))


async def coordination_error_handler(request: Request, exc: CoordinationError) -> JSONResponse:
    logger.critical(
        "Data integrity failure",
        method=request.method,
        path=request.url.path,
        kind=exc.kind,
        reason=exc.reason,
        event_type="data_integrity",
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(exc),
    )


async def client_error_handler(request: Request, exc: ReservationSystemError) -> JSONResponse:
    """Validation, rule and transition errors"""
    logger.info(
        "Request rejected",
        method=request.method,
        path=request.url.path,
        kind=exc.kind,
        reason=exc.reason,
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_body(exc))


def register_error_handlers(app: FastAPI) -> None:
    # Starlette picks the handler registered for the closest class in the MRO
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(CoordinationError, coordination_error_handler)
    app.add_exception_handler(ReservationSystemError, client_error_handler)
