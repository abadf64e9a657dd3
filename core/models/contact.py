# =============================================================================
# core/models/contact.py - Contact Schemas
# =============================================================================
# These models define the API contract for contact operations:
# - ContactCreate / ContactUpdate / LoginRequest: request bodies
# - ContactRecord: a row as held by the contact store (includes the hash)
# - ContactPublic: a contact as returned to clients (never the hash)
# - *Envelope: the uniform {message, data, token?} response wrapper
# - ErrorDetail / ErrorEnvelope: the single error envelope
#
# Clients speak camelCase (firstName); the store speaks snake_case
# (first_name). Aliases bridge the two.
# =============================================================================

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# Fields a client may set on a contact, in wire order
PROFILE_FIELDS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "middle_name",
    "dob",
    "email",
    "phone",
    "occupation",
    "company",
)


class _WireModel(BaseModel):
    """Base for models that cross the HTTP boundary in camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# Request Models
# =============================================================================
# Every field is optional at the type level so that missing values are
# reported by the record validator together with the other field errors.
# extra="forbid" rejects unknown fields at the boundary.

class ContactUpdate(_WireModel):
    """
    Body of PUT /{id}.

    The password is deliberately absent: it can only be set at creation.

    Example:
        {
            "firstName": "Ada",
            "lastName": "Lovelace",
            "email": "ada@example.com",
            "phone": "+44 20 7946 0000",
            "company": "Analytical Engines Ltd"
        }
    """

    model_config = ConfigDict(extra="forbid")

    first_name: str | None = Field(default=None, description="Given name")
    last_name: str | None = Field(default=None, description="Family name")
    middle_name: str | None = Field(default=None, description="Middle name")
    dob: str | None = Field(default=None, description="Date of birth (free form)")
    email: str | None = Field(default=None, description="Unique email, used to log in")
    phone: str | None = Field(default=None, description="Unique phone number")
    occupation: str | None = Field(default=None, description="Occupation")
    company: str | None = Field(default=None, description="Company")

    def changed_fields(self) -> dict[str, str]:
        """
        Snake_case fields that carry a non-empty value.

        Empty strings and nulls mean "leave this field alone".
        """
        values = self.model_dump(include=set(PROFILE_FIELDS))
        return {
            name: value
            for name, value in values.items()
            if value is not None and value.strip()
        }


class ContactCreate(ContactUpdate):
    """Body of POST /: the profile fields plus a plaintext password."""

    password: str | None = Field(
        default=None,
        description="Plaintext password, at least 6 characters",
    )

    def profile(self) -> dict[str, str | None]:
        """Snake_case profile fields to persist, without the password."""
        return self.model_dump(include=set(PROFILE_FIELDS))


class LoginRequest(_WireModel):
    """Body of POST /login."""

    model_config = ConfigDict(extra="forbid")

    email: str | None = None
    password: str | None = None


# =============================================================================
# Stored / Returned Contacts
# =============================================================================

class ContactRecord(BaseModel):
    """
    A contact as stored, keyed by snake_case column names.

    Columns the service does not know about (created_at, ...) are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    first_name: str
    last_name: str
    middle_name: str | None = None
    dob: str | None = None
    email: str
    phone: str
    occupation: str | None = None
    company: str | None = None
    password_hash: str

    def to_public(self) -> "ContactPublic":
        """Drop the password hash before the record leaves the service."""
        return ContactPublic.model_validate(self.model_dump(exclude={"password_hash"}))


class ContactPublic(_WireModel):
    """A contact as returned to clients."""

    id: str
    first_name: str
    last_name: str
    middle_name: str | None = None
    dob: str | None = None
    email: str
    phone: str
    occupation: str | None = None
    company: str | None = None


class AuthenticatedContact(BaseModel):
    """A contact together with a freshly issued bearer token."""

    contact: ContactPublic
    token: str


# =============================================================================
# Envelopes
# =============================================================================

class MessageEnvelope(BaseModel):
    """Envelope without a payload (DELETE)."""

    message: str


class ContactEnvelope(MessageEnvelope):
    """Envelope carrying one contact."""

    data: ContactPublic


class ContactListEnvelope(MessageEnvelope):
    """Envelope carrying every contact."""

    data: list[ContactPublic]


class TokenEnvelope(ContactEnvelope):
    """Envelope carrying one contact and its bearer token."""

    token: str


class ErrorDetail(BaseModel):
    """
    One entry of the error envelope.

    Field errors carry param/location/value; other errors only msg and code.
    """

    msg: str
    code: str
    param: str | None = None
    location: str | None = None
    value: Any = None
    suggestion: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ErrorEnvelope(BaseModel):
    """{"errors": [...]}: the only shape failures are rendered in."""

    errors: list[ErrorDetail]
