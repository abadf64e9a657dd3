# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - contact.py: contact request bodies, stored/public records, envelopes
#
# These models define the "contract" between API and clients.
# =============================================================================

from .contact import (
    PROFILE_FIELDS,
    AuthenticatedContact,
    ContactCreate,
    ContactEnvelope,
    ContactListEnvelope,
    ContactPublic,
    ContactRecord,
    ContactUpdate,
    ErrorDetail,
    ErrorEnvelope,
    LoginRequest,
    MessageEnvelope,
    TokenEnvelope,
)

__all__ = [
    "PROFILE_FIELDS",
    # Requests
    "ContactCreate",
    "ContactUpdate",
    "LoginRequest",
    # Records
    "AuthenticatedContact",
    "ContactPublic",
    "ContactRecord",
    # Envelopes
    "ContactEnvelope",
    "ContactListEnvelope",
    "MessageEnvelope",
    "TokenEnvelope",
    "ErrorDetail",
    "ErrorEnvelope",
]
