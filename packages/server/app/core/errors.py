"""
Typed failures raised by the membership core, and their HTTP rendering.

Callers must be able to tell "you're not allowed" (Forbidden) from
"this would break an invariant" (LastAdminError, DuplicateMembership) from
"already done / not there" (NotFound, InvitationAlreadyActioned).
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

log = structlog.get_logger()


class AccessError(Exception):
    """Base class for every failure the core reports to callers."""

    status_code: int = 400
    code: str = "BAD_REQUEST"
    default_message: str = "Request could not be completed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(AccessError):
    status_code = 401
    code = "UNAUTHENTICATED"
    default_message = "Authentication required"


class Forbidden(AccessError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "You are not allowed to perform this action"


class NotFound(AccessError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Not found"


class InvitationAlreadyActioned(NotFound):
    code = "INVITATION_ALREADY_ACTIONED"
    default_message = "Invitation not found or already actioned"


class LastAdminError(AccessError):
    status_code = 409
    code = "LAST_ADMIN"
    default_message = "An organization must keep at least one admin"


class DuplicateMembership(AccessError):
    status_code = 409
    code = "DUPLICATE_MEMBERSHIP"
    default_message = "Principal is already a member of this organization"


class ProfileConflict(AccessError):
    status_code = 409
    code = "PROFILE_CONFLICT"
    default_message = "Profile was written concurrently; retry the event"


class ValidationError(AccessError):
    status_code = 422
    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


def error_body(code: str, message: str, status: int) -> dict:
    return {"error": {"code": code, "message": message, "status": status}}


async def _access_error_handler(request: Request, exc: AccessError) -> JSONResponse:
    log.info(
        "request.rejected",
        path=request.url.path,
        method=request.method,
        code=exc.code,
        status=exc.status_code,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.code, exc.message, exc.status_code),
    )


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = f"{location}: {first.get('msg', 'invalid')}" if location else "Invalid input"
    log.info("request.invalid", path=request.url.path, method=request.method, detail=message)
    return JSONResponse(
        status_code=ValidationError.status_code,
        content=error_body(ValidationError.code, message, ValidationError.status_code),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AccessError, _access_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
