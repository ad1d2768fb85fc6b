"""
Exception handlers that wrap every error in the response envelope
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gympro.core.config import settings
from gympro.core.logging_config import get_logger

logger = get_logger(__name__)


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


def format_validation_errors(errors) -> str:
    """'field.path: message' for each error, comma separated"""
    parts = []
    for err in errors:
        # Drop the leading "body" / "query" / "path" segment
        loc = [str(p) for p in err.get("loc", ())[1:]]
        path = ".".join(loc)
        msg = err.get("msg", "Invalid value")
        parts.append(f"{path}: {msg}" if path else msg)
    return ", ".join(parts)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_response(exc.status_code, message, getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, format_validation_errors(exc.errors()))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    content = {"success": False, "error": "Internal Server Error"}
    if settings.is_development:
        content["message"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
