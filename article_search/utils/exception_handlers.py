"""
Exception handlers registered on the FastAPI app.
Every error leaves the API as the same JSON shape: status_code, message, detail.
"""

import logging
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from elasticsearch import ApiError, TransportError
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, detail=None) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=status_code,
        content={
            "status_code": status_code,
            "message": message,
            "detail": detail
        }
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTPException raised by routes and by routing itself (404, 405)"""
    return error_response(exc.status_code, "Request failed", exc.detail)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle missing or mistyped request parameters"""
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg"),
            "type": error.get("type")
        }
        for error in exc.errors()
    ]
    logger.info(f"Request validation failed for {request.url.path}: {errors}")
    return error_response(
        422,
        "Invalid request parameters",
        errors
    )


async def search_api_error_handler(request: Request, exc: ApiError):
    """The engine answered with an error (bad query, missing index, ...)"""
    logger.error(f"Search engine error on {request.url.path}: {exc}")
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Search engine request failed",
        str(exc)
    )


async def search_transport_error_handler(request: Request, exc: TransportError):
    """The engine could not be reached (connection refused, timeout, ...)"""
    logger.error(f"Search engine unavailable on {request.url.path}: {exc}")
    return error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "Search engine unavailable",
        str(exc)
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Anything else that escapes a route"""
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        None
    )
