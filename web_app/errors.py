"""Mapping of link errors to HTTP responses."""

from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shortlinks.common.logging_config import get_logger
from shortlinks.errors import LinkError
from .api.schemas import ErrorResponse

logger = get_logger("web.errors")


def error_response(status_code: int, reason: str, detail: Optional[str] = None) -> JSONResponse:
    """Build the standard ``{error, detail}`` body."""
    body = ErrorResponse(error=reason, detail=detail)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def link_error_handler(request: Request, exc: LinkError) -> JSONResponse:
    """Render a LinkError with its status code and stable reason."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.reason}")
    return error_response(exc.status_code, exc.reason, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors (400), not 422."""
    errors = exc.errors()
    detail = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return error_response(status.HTTP_400_BAD_REQUEST, "invalid_input", detail)
