from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status
import logging

from travelref.services.rates.errors import RateError

logger = logging.getLogger("travelref.errors")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def http_exception_handler(request: Request, exc):  # type: ignore
    status_code = getattr(exc, "status_code", status.HTTP_404_NOT_FOUND)
    if status_code != status.HTTP_404_NOT_FOUND:
        return JSONResponse(
            status_code=status_code,
            content={"error": "http_error", "detail": getattr(exc, "detail", "")},
        )
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "not_found",
            "detail": f"No route for {request.method} {request.url.path}",
        },
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "detail": jsonable_errors(exc),
            "success": False,
        },
        headers=CORS_HEADERS,
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    # pydantic error contexts may hold exception instances
    return [
        {k: (str(v) if k == "ctx" else v) for k, v in err.items() if k != "input"}
        for err in exc.errors()
    ]


def rate_error_handler(request: Request, exc: RateError):  # type: ignore
    logger.error("rate resolution failed: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc) or "Unknown error occurred", "success": False},
        headers=CORS_HEADERS,
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.error("unhandled exception", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
