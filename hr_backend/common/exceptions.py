"""Custom exceptions and RFC 7807 Problem Detail error handlers."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

BASE_ERROR_URI = "https://hr-directory.local/errors"


# ── Exception hierarchy ─────────────────────────────────────────────

class AppException(Exception):
    """Base for all application exceptions → RFC 7807 JSON."""

    def __init__(
        self,
        status_code: int,
        error_type: str,
        title: str,
        detail: str,
        errors: Optional[dict[str, Any]] = None,
    ) -> None:
        self.status_code = status_code
        self.error_type = error_type
        self.title = title
        self.detail = detail
        self.errors = errors
        super().__init__(detail)


class NotFoundException(AppException):
    """404 — entity not found."""

    def __init__(
        self,
        entity_type: str,
        entity_id: Any,
        detail: Optional[str] = None,
    ) -> None:
        super().__init__(
            status_code=404,
            error_type="not-found",
            title=f"{entity_type} Not Found",
            detail=detail or f"{entity_type} with id '{entity_id}' does not exist.",
        )
        self.entity_type = entity_type


class ConflictError(AppException):
    """409 — unique-constraint / duplicate."""

    def __init__(self, field: str, value: Any) -> None:
        super().__init__(
            status_code=409,
            error_type="conflict",
            title="Conflict",
            detail=f"An entry with {field}='{value}' already exists.",
            errors={field: [f"'{value}' is already in use."]},
        )


class DuplicateEmailException(ConflictError):
    """409 — another employee already uses this email."""

    def __init__(self, email: str) -> None:
        super().__init__("email", email)
        self.error_type = "duplicate-email"
        self.detail = f"Email already exists: {email}"


class ForbiddenException(AppException):
    """403 — insufficient permissions."""

    def __init__(
        self,
        detail: str = "You do not have permission to perform this action.",
    ) -> None:
        super().__init__(
            status_code=403,
            error_type="forbidden",
            title="Forbidden",
            detail=detail,
        )


class AuthorizationDeniedException(ForbiddenException):
    """403 — ownership rule violated (wrong manager, self-edit by a manager)."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.error_type = "authorization-denied"


class ValidationException(AppException):
    """400 — business-logic validation failures."""

    def __init__(
        self,
        errors: dict[str, list[str]],
        detail: str = "One or more fields failed validation.",
    ) -> None:
        super().__init__(
            status_code=400,
            error_type="validation-error",
            title="Validation Error",
            detail=detail,
            errors=errors,
        )


class InvalidRangeException(ValidationException):
    """400 — end date precedes start date."""

    def __init__(self) -> None:
        super().__init__(
            {"end_date": ["End date must be after start date."]},
            detail="End date must be after start date.",
        )
        self.error_type = "invalid-range"


class SelfReferenceException(ValidationException):
    """400 — feedback addressed to its own author."""

    def __init__(self) -> None:
        super().__init__(
            {"to_employee_id": ["Cannot give feedback to yourself."]},
            detail="Cannot give feedback to yourself.",
        )
        self.error_type = "self-reference"


class AlreadyProcessedException(AppException):
    """409 — absence request is no longer pending."""

    def __init__(self, status: str) -> None:
        super().__init__(
            status_code=409,
            error_type="already-processed",
            title="Already Processed",
            detail=f"This request has already been processed ({status}).",
        )


# ── RFC 7807 builder ────────────────────────────────────────────────

def _build_problem_detail(exc: AppException, request: Request) -> dict[str, Any]:
    body: dict[str, Any] = {
        "type": f"{BASE_ERROR_URI}/{exc.error_type}",
        "title": exc.title,
        "status": exc.status_code,
        "detail": exc.detail,
        "instance": str(request.url.path),
    }
    if exc.errors:
        body["errors"] = exc.errors
    return body


# ── FastAPI handlers ────────────────────────────────────────────────

async def _handle_app_exception(
    request: Request,
    exc: AppException,
) -> JSONResponse:
    logger.info(
        "%s %s → %d %s", request.method, request.url.path, exc.status_code, exc.error_type,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_build_problem_detail(exc, request),
        media_type="application/problem+json",
    )


async def _handle_validation_error(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    field_errors: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = err.get("loc", ())
        name = (
            ".".join(str(p) for p in loc[1:])
            if len(loc) > 1
            else str(loc[0]) if loc else "unknown"
        )
        field_errors.setdefault(name, []).append(err.get("msg", "Invalid value"))

    return JSONResponse(
        status_code=400,
        content={
            "type": f"{BASE_ERROR_URI}/validation-error",
            "title": "Validation Error",
            "status": 400,
            "detail": "Request validation failed.",
            "instance": str(request.url.path),
            "errors": field_errors,
        },
        media_type="application/problem+json",
    )


# ── Registration helper (called from main.py) ──────────────────────

def register_exception_handlers(app: FastAPI) -> None:
    """Attach all custom exception handlers to the FastAPI app."""
    app.add_exception_handler(AppException, _handle_app_exception)          # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
