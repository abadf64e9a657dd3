# =============================================================================
# core/validation.py - Record Validator
# =============================================================================
# Checks presence and format of the fields on incoming write requests.
#
# The validator never raises: it returns every violation, in field order, so
# the caller can reject the request with all problems at once before the
# contact store is touched.
#
# Usage:
#   errors = validate_payload(body, OperationKind.CREATE)
#   if errors:
#       raise ContactValidationError(errors)
# =============================================================================

from collections.abc import Callable
from enum import Enum
from typing import Any

import email_validator
from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel

from core.models.contact import ErrorDetail

MIN_PASSWORD_LENGTH = 6

# Reserved names (.test, .local, .invalid, ...) are grammatically valid domains
email_validator.SPECIAL_USE_DOMAIN_NAMES.clear()


class OperationKind(str, Enum):
    """The write operations that carry a validated body."""
    CREATE = "create"
    UPDATE = "update"
    LOGIN = "login"


# =============================================================================
# Field Checks
# =============================================================================
# Each check returns True when the value is acceptable.

def is_non_empty(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def is_present(value: Any) -> bool:
    return value is not None


def is_valid_email(value: Any) -> bool:
    """Standard addr-spec grammar; no DNS lookup."""
    if not isinstance(value, str) or not value:
        return False
    try:
        validate_email(value, check_deliverability=False, test_environment=True)
    except EmailNotValidError:
        return False
    return True


def has_min_length(length: int) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        return isinstance(value, str) and len(value) >= length
    return check


# (wire field name, check, message)
Rule = tuple[str, Callable[[Any], bool], str]

_PROFILE_RULES: list[Rule] = [
    ("firstName", is_non_empty, "First name is required"),
    ("lastName", is_non_empty, "Last name is required"),
    ("email", is_valid_email, "Please include a valid email"),
    ("phone", is_non_empty, "Phone number is required"),
]

RULES: dict[OperationKind, list[Rule]] = {
    OperationKind.CREATE: _PROFILE_RULES + [
        (
            "password",
            has_min_length(MIN_PASSWORD_LENGTH),
            f"Please enter a password with {MIN_PASSWORD_LENGTH} or more characters",
        ),
    ],
    OperationKind.UPDATE: list(_PROFILE_RULES),
    OperationKind.LOGIN: [
        ("email", is_valid_email, "Please include a valid email"),
        ("password", is_present, "Password is required"),
    ],
}


def validate_payload(
    payload: BaseModel | dict[str, Any],
    kind: OperationKind,
) -> list[ErrorDetail]:
    """
    Validate a request body against the rules for one operation.

    Args:
        payload: A request model or a camelCase dict
        kind: Which operation the body belongs to

    Returns:
        One ErrorDetail per violated rule; empty when the body is valid
    """
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(by_alias=True)

    errors: list[ErrorDetail] = []
    for param, check, message in RULES[kind]:
        value = payload.get(param)
        if not check(value):
            errors.append(
                ErrorDetail(
                    msg=message,
                    code="VALIDATION_ERROR",
                    param=param,
                    location="body",
                    # Never echo a password back
                    value=None if param == "password" else value,
                )
            )
    return errors
