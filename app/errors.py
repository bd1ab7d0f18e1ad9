"""Error taxonomy and the single HTTP error boundary.

Services raise the classes below; ``install_error_handlers`` maps them to a
status code and a uniform ``{"status", "message"}`` body. Anything that is
not an :class:`AppError` is logged and reported as a generic 500.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)

Violation = Tuple[str, str]


class AppError(Exception):
    """Base class for errors that carry their own HTTP status."""

    status_code = 500
    status = "fail"

    def __init__(self, message: str, payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.payload = payload or {}

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"status": self.status, "message": self.message}
        body.update(self.payload)
        return body


class Unauthorized(AppError):
    status_code = 401


class Forbidden(AppError):
    status_code = 403


class NotFound(AppError):
    status_code = 404


class ValidationFailure(AppError):
    status_code = 400

    def __init__(self, message: str, violations: Sequence[Violation] = ()):
        self.violations: List[Violation] = list(violations)
        payload = {}
        if self.violations:
            payload["errors"] = [
                {"field": field, "message": text} for field, text in self.violations
            ]
        super().__init__(message, payload)

    @classmethod
    def from_violations(cls, violations: Sequence[Violation]) -> "ValidationFailure":
        message = "; ".join(f"{field}: {text}" for field, text in violations)
        return cls(message or "Validation failed", violations)


class UploadTooLarge(ValidationFailure):
    status_code = 413


class Conflict(AppError):
    status_code = 409

    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(f"Duplicate value for field(s): {', '.join(self.fields)}")


class InternalConfig(AppError):
    status_code = 500
    status = "error"


# SQLite: "UNIQUE constraint failed: startup.name"
# PostgreSQL: 'duplicate key value ... DETAIL:  Key (name)=(x) already exists.'
_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: ([\w.,\s]+)")
_PG_UNIQUE = re.compile(r"Key \(([^)]+)\)=")


def duplicate_fields(exc: IntegrityError) -> List[str]:
    """Best-effort extraction of the columns named in a uniqueness error."""
    text = str(exc.orig) if exc.orig is not None else str(exc)
    match = _SQLITE_UNIQUE.search(text)
    if match:
        return [part.strip().split(".")[-1] for part in match.group(1).split(",")]
    match = _PG_UNIQUE.search(text)
    if match:
        return [part.strip() for part in match.group(1).split(",")]
    return []


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error(request: Request, exc: AppError) -> JSONResponse:
        if isinstance(exc, InternalConfig):
            logger.error("Configuration error on %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        violations = []
        for err in exc.errors():
            loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
            violations.append((".".join(loc) or "request", err.get("msg", "invalid value")))
        failure = ValidationFailure.from_violations(violations)
        return JSONResponse(status_code=failure.status_code, content=failure.to_body())

    @app.exception_handler(IntegrityError)
    async def _integrity(request: Request, exc: IntegrityError) -> JSONResponse:
        fields = [_camel(name) for name in duplicate_fields(exc)]
        if not fields:
            logger.exception("Integrity error on %s %s", request.method, request.url.path, exc_info=exc)
            return JSONResponse(
                status_code=500,
                content={"status": "error", "message": "Something went wrong"},
            )
        conflict = Conflict(fields)
        return JSONResponse(status_code=conflict.status_code, content=conflict.to_body())

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unexpected error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": "Something went wrong"},
        )
