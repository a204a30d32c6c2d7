"""
Exception handlers mapping failures onto the API's JSON error shape.

Every error body carries an "error" string. Validation failures add an
"errors" map of field name to message.
"""
import logging
import traceback
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from blog_api.core.config import settings

logger = logging.getLogger(__name__)

# Location prefixes FastAPI adds to request validation errors
_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def format_validation_errors(errors: list[dict]) -> dict[str, str]:
    """Collapse pydantic error entries into {field: message}, first error wins"""
    formatted: dict[str, str] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _REQUEST_LOCATIONS:
            loc = loc[1:]
        field = ".".join(loc) or "__root__"
        # Custom validators raise ValueError; report its text without pydantic's prefix
        cause = error.get("ctx", {}).get("error")
        message = str(cause) if cause is not None else error.get("msg", "Invalid value")
        formatted.setdefault(field, message)
    return formatted


def validation_error_response(errors: list[dict]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Validation failed",
            "errors": format_validation_errors(errors),
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND and detail == "Not Found":
        # Raised by the router itself: no route matched the path
        detail = f"Route {request.url.path} not found"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": detail},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    return validation_error_response(exc.errors())


async def write_validation_exception_handler(request: Request, exc: ValidationError):
    logger.info(f"Rejected write on {request.method} {request.url.path}: {exc.error_count()} invalid field(s)")
    return validation_error_response(exc.errors())


def _cors_headers(request: Request) -> dict[str, str]:
    """CORS headers for an allowed Origin, empty otherwise"""
    origin = request.headers.get("origin")
    if not origin or origin not in settings.get_cors_origins():
        return {}
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Credentials": "true",
        "Vary": "Origin",
    }


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    content = {"error": "Something went wrong"}
    if settings.is_development:
        content["message"] = str(exc)
        content["stack"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__))
    # Starlette runs this handler in ServerErrorMiddleware, outside
    # CORSMiddleware, so the CORS headers have to be added here or the
    # browser frontend cannot read the 500 body
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
        headers=_cors_headers(request),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(ValidationError, write_validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
