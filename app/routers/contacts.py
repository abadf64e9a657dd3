# =============================================================================
# app/routers/contacts.py - Contact CRUD and Login Endpoints
# =============================================================================
# POST   /        create a contact (returns a token)
# GET    /        list contacts
# GET    /{id}    fetch one contact
# PUT    /{id}    update a contact
# DELETE /{id}    delete a contact
# POST   /login   exchange email + password for a token
#
# Handlers stay thin: parse the body, call ContactService, wrap the result.
# Handlers are plain functions; FastAPI runs them in its threadpool because
# the store and bcrypt are blocking.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path

from app.dependencies import ContactServiceDep
from core.models.contact import (
    ContactCreate,
    ContactEnvelope,
    ContactListEnvelope,
    ContactUpdate,
    ErrorEnvelope,
    LoginRequest,
    MessageEnvelope,
    TokenEnvelope,
)

router = APIRouter()

ContactId = Annotated[str, Path(description="Contact id returned at creation")]

_ERRORS = {
    400: {"model": ErrorEnvelope, "description": "Validation error, duplicate or bad credentials"},
    404: {"model": ErrorEnvelope, "description": "Contact not found"},
    500: {"model": ErrorEnvelope, "description": "Store failure"},
}


def _responses(*codes: int) -> dict:
    return {code: _ERRORS[code] for code in codes}


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/", response_model=TokenEnvelope, responses=_responses(400, 500))
def create_contact(request: ContactCreate, service: ContactServiceDep):
    """
    Create a new contact.

    Email and phone must be unused. The password is stored as a bcrypt hash
    and never returned. The response carries a bearer token for the contact.
    """
    result = service.create_contact(request)
    return TokenEnvelope(
        message="New contact created",
        data=result.contact,
        token=result.token,
    )


@router.get("/", response_model=ContactListEnvelope, responses=_responses(500))
def list_contacts(service: ContactServiceDep):
    """List every contact."""
    return ContactListEnvelope(
        message="Contacts retrieved",
        data=service.list_contacts(),
    )


@router.post("/login", response_model=TokenEnvelope, responses=_responses(400, 500))
def login(request: LoginRequest, service: ContactServiceDep):
    """
    Log in with email and password.

    Returns the contact and a fresh bearer token. An unknown email and a
    wrong password produce the same error.
    """
    result = service.login(request)
    return TokenEnvelope(
        message="Logged in",
        data=result.contact,
        token=result.token,
    )


@router.get("/{contact_id}", response_model=ContactEnvelope, responses=_responses(404, 500))
def get_contact(contact_id: ContactId, service: ContactServiceDep):
    """Get one contact by id."""
    return ContactEnvelope(
        message="Contact retrieved",
        data=service.get_contact(contact_id),
    )


@router.put("/{contact_id}", response_model=ContactEnvelope, responses=_responses(400, 404, 500))
def update_contact(contact_id: ContactId, request: ContactUpdate, service: ContactServiceDep):
    """
    Update a contact.

    firstName, lastName, email and phone are required. Optional fields sent
    empty are left unchanged. The password cannot be changed here.
    """
    return ContactEnvelope(
        message="Contact updated",
        data=service.update_contact(contact_id, request),
    )


@router.delete("/{contact_id}", response_model=MessageEnvelope, responses=_responses(404, 500))
def delete_contact(contact_id: ContactId, service: ContactServiceDep):
    """Delete a contact."""
    service.delete_contact(contact_id)
    return MessageEnvelope(message="Contact deleted")
