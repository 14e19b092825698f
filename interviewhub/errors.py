"""Error envelope and exception handlers.

Every error leaves the API as ``{"error": str, "details"?: str}``. ``details``
is only populated outside production so stack-adjacent text never reaches
production clients.

Taxonomy:
- HTTPException (4xx raised by routers)  -> status from the exception
- RequestValidationError                 -> 400, first validator message
- DatabaseError (wraps SQLAlchemyError)  -> 500, operation-specific message
- anything else                          -> 500, generic message
"""

from contextlib import contextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from interviewhub.config import settings

log = structlog.get_logger(__name__)


class DatabaseError(Exception):
    """A storage failure surfaced to the client as a 500 with a public message.

    Raise it ``from`` the underlying SQLAlchemy exception so the cause is
    available for the non-production ``details`` field.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@contextmanager
def translate_db_errors(message: str):
    """Re-raise any SQLAlchemyError inside the block as DatabaseError(message)."""
    try:
        yield
    except SQLAlchemyError as exc:
        raise DatabaseError(message) from exc


def error_body(error: str, details: Optional[str] = None) -> dict:
    body = {"error": error}
    if details is not None and not settings.is_production:
        body["details"] = details
    return body


def _format_validation_error(error: dict) -> str:
    # Drop the "body"/"query"/"path" prefix FastAPI adds to every location
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    message = error.get("msg", "Invalid value")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return f"{'.'.join(loc)}: {message}" if loc else message


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the envelope-producing exception handlers to the app."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        messages = [_format_validation_error(err) for err in exc.errors()]
        first = messages[0] if messages else "Invalid request"
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=jsonable_encoder(error_body(first, "; ".join(messages))),
        )

    @app.exception_handler(DatabaseError)
    async def database_exception_handler(request: Request, exc: DatabaseError):
        cause = exc.__cause__
        log.error(
            "database_error",
            error=exc.message,
            cause=repr(cause) if cause is not None else None,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(exc.message, str(cause) if cause is not None else None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        log.error("unhandled_exception", error_type=type(exc).__name__, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Internal server error", str(exc)),
        )
