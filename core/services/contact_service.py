# =============================================================================
# core/services/contact_service.py - Contact Business Logic
# =============================================================================
# Orchestrates validation, uniqueness, hashing, token issuance and store calls
# for the six contact operations: create, list, get, update, delete, login.
#
# Each operation maps every failure to one of the app exceptions before it
# returns, so nothing unmapped reaches the HTTP layer:
#   ContactValidationError  - bad input, store untouched
#   DuplicateContactError   - email/phone already used
#   ContactNotFoundError    - unknown id
#   InvalidCredentialsError - login failed
#   ContactServiceError     - store failed (details only in the log)
# =============================================================================

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from pydantic import ValidationError

from app.exceptions import (
    ContactNotFoundError,
    ContactServiceError,
    ContactValidationError,
    DuplicateContactError,
    InvalidCredentialsError,
)
from core.models.contact import (
    AuthenticatedContact,
    ContactCreate,
    ContactPublic,
    ContactRecord,
    ContactUpdate,
    LoginRequest,
)
from core.services.password_hasher import PasswordHasher
from core.services.token_service import TokenIssuer
from core.validation import OperationKind, validate_payload
from lib.contact_store import UNIQUE_FIELDS, ContactStore, ContactStoreError, DuplicateKeyError

logger = logging.getLogger(__name__)


@contextmanager
def _store_guard(failure_message: str) -> Iterator[None]:
    """
    Translate store failures into the API's error taxonomy.

    Duplicate keys become conflicts. Store errors and rows that do not
    parse as contacts become a generic server error whose cause is logged,
    never returned.
    """
    try:
        yield
    except DuplicateKeyError as e:
        logger.warning(f"Unique constraint rejected write on {e.field}")
        raise DuplicateContactError(e.field) from e
    except ContactStoreError as e:
        logger.exception(f"{failure_message}: {e.message}")
        raise ContactServiceError(failure_message) from e
    except ValidationError as e:
        logger.exception(f"{failure_message}: malformed contact row")
        raise ContactServiceError(failure_message) from e


def _raise_if_invalid(payload, kind: OperationKind) -> None:
    errors = validate_payload(payload, kind)
    if errors:
        logger.info(f"Rejected {kind.value} request: {[error.param for error in errors]}")
        raise ContactValidationError(errors)


class ContactService:
    """
    Service for contact directory operations.

    Collaborators are injected so the service never reads global config.

    Example:
        service = ContactService(
            store=InMemoryContactStore(),
            hasher=PasswordHasher(rounds=10),
            tokens=TokenIssuer(secret="..."),
        )
        result = service.create_contact(ContactCreate(...))
    """

    def __init__(
        self,
        store: ContactStore,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
    ):
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    def create_contact(self, request: ContactCreate) -> AuthenticatedContact:
        """
        Create a contact and issue its first token.

        Raises:
            ContactValidationError: If required fields are missing/malformed
            DuplicateContactError: If the email or phone is already used
            ContactServiceError: If the store fails
        """
        _raise_if_invalid(request, OperationKind.CREATE)

        with _store_guard("Error creating contact"):
            for field in UNIQUE_FIELDS:
                if self.store.find_by_field(field, getattr(request, field)):
                    logger.info(f"Create rejected: {field} already exists")
                    raise DuplicateContactError(field)

            row = {
                **request.profile(),
                "password_hash": self.hasher.hash(request.password),
            }
            # The store's unique constraint closes the gap between the
            # checks above and this insert
            record = ContactRecord.model_validate(self.store.insert(row))

        logger.info(f"Created contact: {record.id}")
        return AuthenticatedContact(
            contact=record.to_public(),
            token=self.tokens.issue(record.id),
        )

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def list_contacts(self) -> list[ContactPublic]:
        """Every stored contact, in store order."""
        with _store_guard("Error retrieving contacts"):
            rows = self.store.list_all()
            return [ContactRecord.model_validate(row).to_public() for row in rows]

    def _get_record(self, contact_id: str, failure_message: str) -> ContactRecord:
        with _store_guard(failure_message):
            row = self.store.find_by_id(contact_id)
            if row is None:
                raise ContactNotFoundError(contact_id)
            return ContactRecord.model_validate(row)

    def get_contact(self, contact_id: str) -> ContactPublic:
        """
        Fetch one contact.

        Raises:
            ContactNotFoundError: If the id is unknown or malformed
        """
        return self._get_record(contact_id, "Error retrieving contact").to_public()

    # -------------------------------------------------------------------------
    # Update
    # -------------------------------------------------------------------------

    def update_contact(self, contact_id: str, request: ContactUpdate) -> ContactPublic:
        """
        Apply the non-empty fields of `request` to a contact.

        Empty or missing fields are left unchanged. The password cannot be
        changed here.

        Raises:
            ContactValidationError: If required fields are missing/malformed
            ContactNotFoundError: If the id is unknown
            DuplicateContactError: If the new email/phone belongs to another contact
            ContactServiceError: If the store fails
        """
        _raise_if_invalid(request, OperationKind.UPDATE)

        current = self._get_record(contact_id, "Error updating contact")
        fields = request.changed_fields()

        with _store_guard("Error updating contact"):
            for field in UNIQUE_FIELDS:
                value = fields.get(field)
                if value is None or value == getattr(current, field):
                    continue
                owner = self.store.find_by_field(field, value)
                if owner and str(owner.get("id")) != current.id:
                    logger.info(f"Update of {current.id} rejected: {field} already exists")
                    raise DuplicateContactError(field)

            row = self.store.update_by_id(current.id, fields)
            if row is None:
                # Deleted between the lookup and the write
                raise ContactNotFoundError(contact_id)
            updated = ContactRecord.model_validate(row)

        logger.info(f"Updated contact: {current.id} ({', '.join(sorted(fields))})")
        return updated.to_public()

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------

    def delete_contact(self, contact_id: str) -> None:
        """
        Remove a contact.

        Raises:
            ContactNotFoundError: If the id is unknown (including already deleted)
            ContactServiceError: If the store fails
        """
        current = self._get_record(contact_id, "Error deleting contact")

        with _store_guard("Error deleting contact"):
            deleted = self.store.delete_by_id(current.id)

        if not deleted:
            raise ContactNotFoundError(contact_id)
        logger.info(f"Deleted contact: {current.id}")

    # -------------------------------------------------------------------------
    # Login
    # -------------------------------------------------------------------------

    def login(self, request: LoginRequest) -> AuthenticatedContact:
        """
        Authenticate by email and password.

        Unknown email and wrong password fail identically.

        Raises:
            ContactValidationError: If email/password are missing/malformed
            InvalidCredentialsError: If the credentials don't match a contact
            ContactServiceError: If the store fails
        """
        _raise_if_invalid(request, OperationKind.LOGIN)

        with _store_guard("Error logging in"):
            row = self.store.find_by_field("email", request.email)
            if row is None:
                logger.warning("Login failed: unknown email")
                raise InvalidCredentialsError()
            record = ContactRecord.model_validate(row)

        if not self.hasher.verify(request.password, record.password_hash):
            logger.warning(f"Login failed: wrong password for contact {record.id}")
            raise InvalidCredentialsError()

        logger.info(f"Contact logged in: {record.id}")
        return AuthenticatedContact(
            contact=record.to_public(),
            token=self.tokens.issue(record.id),
        )
