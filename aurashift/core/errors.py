"""
Custom exception hierarchy for the AuraShift API.

Rule: every HTTP error keeps the `{success: false, error}` envelope the
mobile client reads, plus a machine-readable `code` string so clients can
branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from aurashift.schemas.common import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class AuraShiftException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {
            "success": False,
            "error": self.message,
            "code": self.code,
        }
        if self.details:
            payload["details"] = self.details
        return payload


class AuthenticationMissingError(AuraShiftException):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = "AUTHENTICATION_REQUIRED"

    def __init__(self, message: str = "Access token is required"):
        super().__init__(message=message)


class InvalidTokenError(AuraShiftException):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = "INVALID_TOKEN"

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message=message)


class UserNotFoundError(AuraShiftException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "USER_NOT_FOUND"

    def __init__(self, user_id: int):
        super().__init__(
            message="User not found",
            details={"user_id": user_id},
        )


class ActivityNotFoundError(AuraShiftException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "ACTIVITY_NOT_FOUND"

    def __init__(self, activity_id: int):
        super().__init__(
            message="Activity not found",
            details={"activity_id": activity_id},
        )


class InvalidActivityTypeError(AuraShiftException):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "INVALID_ACTIVITY_TYPE"

    def __init__(self, value: Any, allowed: list[str]):
        super().__init__(
            message="Invalid activity type",
            details={"received": value, "allowed": allowed},
        )


class InvalidTimeRangeError(AuraShiftException):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "INVALID_TIME_RANGE"

    def __init__(self, value: Any, allowed: list[str]):
        super().__init__(
            message=f"Invalid time range. Must be {', '.join(allowed[:-1])}, or {allowed[-1]}",
            details={"received": value, "allowed": allowed},
        )


class OnboardingAlreadyCompletedError(AuraShiftException):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "ONBOARDING_ALREADY_COMPLETED"

    def __init__(self):
        super().__init__(message="Onboarding already completed")


class StoreFailureError(AuraShiftException):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "STORE_FAILURE"

    def __init__(self, operation: str):
        super().__init__(
            message=f"Failed to {operation}",
            details={"operation": operation},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def aurashift_exception_handler(request: Request, exc: AuraShiftException) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 400 with machine-readable field errors."""
    field_errors = [
        ErrorDetail(
            field=".".join(str(loc) for loc in error["loc"] if loc != "body"),
            message=error["msg"],
            type=error["type"],
        ).model_dump()
        for error in exc.errors()
    ]
    body = ErrorResponse(
        error="Validation failed",
        code="VALIDATION_ERROR",
        details={"errors": field_errors},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=body.model_dump(),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "An unexpected error occurred.",
            "code": "INTERNAL_ERROR",
        },
    )
