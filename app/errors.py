import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class BlogError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    summary = "Server error"

    def __init__(self, summary: Optional[str] = None, details: Optional[str] = None):
        self.summary = summary or self.summary
        self.details = details
        super().__init__(self.summary)

    def to_dict(self) -> dict:
        body = {"error": self.summary}
        if self.details:
            body["details"] = self.details
        return body


class InvalidArgument(BlogError):
    status_code = 400
    summary = "Invalid data"


class Unauthenticated(BlogError):
    status_code = 401
    summary = "Unauthorized"


class Forbidden(BlogError):
    status_code = 403
    summary = "Forbidden"


class NotFound(BlogError):
    status_code = 404
    summary = "Not found"


class Conflict(BlogError):
    status_code = 409
    summary = "Conflict"


class InternalError(BlogError):
    status_code = 500
    summary = "Server error"


async def blog_error_handler(request: Request, exc: BlogError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    logger.debug(f"Rejected request to {request.url.path}: {details}")
    return JSONResponse(
        status_code=400, content={"error": "Invalid data", "details": details}
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=exc.headers,
    )


def install_error_handlers(app: FastAPI) -> None:
    """Render every API error as ``{"error": ..., "details": ...}``."""
    app.add_exception_handler(BlogError, blog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
