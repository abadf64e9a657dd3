# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every failure leaves the service in one envelope:
#   {"errors": [{"msg": ..., "code": ..., ...}]}
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.models.contact import ErrorDetail

logger = logging.getLogger(__name__)


class ContactsException(Exception):
    """
    Base exception for the contacts API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "CONTACTS_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def error_details(self) -> list[ErrorDetail]:
        return [
            ErrorDetail(msg=self.message, code=self.code, suggestion=self.suggestion)
        ]

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        return {"errors": [error.to_dict() for error in self.error_details()]}


# =============================================================================
# Client Errors
# =============================================================================

class ContactValidationError(ContactsException):
    """Raised when a request body is missing fields or has malformed ones."""

    def __init__(self, errors: list[ErrorDetail]):
        super().__init__(
            message="Request validation failed",
            code="VALIDATION_ERROR",
            status_code=400,
            details={"params": [error.param for error in errors]},
        )
        self.errors = errors

    def error_details(self) -> list[ErrorDetail]:
        return self.errors


class DuplicateContactError(ContactsException):
    """Raised when a create or update would reuse another contact's email or phone."""

    MESSAGES = {
        "email": ("Email-id already exists", "EMAIL_EXISTS"),
        "phone": ("Phone-number already exists", "PHONE_EXISTS"),
    }

    def __init__(self, field: str):
        message, code = self.MESSAGES.get(
            field, (f"{field} already exists", "DUPLICATE_CONTACT")
        )
        super().__init__(
            message=message,
            code=code,
            status_code=400,
            suggestion=f"Use a different {field}",
            details={"field": field},
        )
        self.field = field


class ContactNotFoundError(ContactsException):
    """Raised when a contact ID doesn't exist."""

    def __init__(self, contact_id: str):
        super().__init__(
            message="Contact not found",
            code="CONTACT_NOT_FOUND",
            status_code=404,
            suggestion="Check that the contact id is correct and the contact hasn't been deleted",
            details={"contact_id": contact_id},
        )


class InvalidCredentialsError(ContactsException):
    """
    Raised when a login fails.

    Unknown email and wrong password produce the same error.
    """

    def __init__(self):
        super().__init__(
            message="Invalid credentials",
            code="INVALID_CREDENTIALS",
            status_code=400,
        )


# =============================================================================
# Server Errors
# =============================================================================

class ContactServiceError(ContactsException):
    """
    Raised when the contact store fails underneath an operation.

    The message is generic on purpose; the cause is only logged.
    """

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="STORE_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def contacts_exception_handler(
    request: Request,
    exc: ContactsException
) -> JSONResponse:
    """Convert ContactsException to JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request parsing errors (unknown fields, wrong types, bad JSON).

    Reported as 400 with the same envelope the record validator uses.
    """
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        location = loc[0] if loc else None
        param = ".".join(loc[1:]) or None
        if error.get("type") == "extra_forbidden":
            msg = f"Unknown field: {param}"
        else:
            msg = error.get("msg", "Invalid value")
        errors.append(
            ErrorDetail(
                msg=msg,
                code="VALIDATION_ERROR",
                param=param,
                location=location,
            ).to_dict()
        )

    logger.debug(f"Rejected request body for {request.url.path}: {errors}")
    return JSONResponse(status_code=400, content={"errors": errors})
