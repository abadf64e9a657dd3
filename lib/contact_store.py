# =============================================================================
# lib/contact_store.py - Contact Persistence
# =============================================================================
# The contact service only needs a narrow contract from persistence:
# find-by-field, find-by-id, list, insert, update-by-id, delete-by-id.
#
# Two implementations:
# - SupabaseContactStore: the `contacts` table (see migrations/), which
#   carries unique constraints on email and phone
# - InMemoryContactStore: a locked dict for development and tests
#
# Uniqueness of email/phone is enforced HERE, atomically, and surfaced as
# DuplicateKeyError. The service's own existence checks only give nicer
# errors in the common case.
#
# Rows are plain dicts keyed by snake_case column names.
# =============================================================================

from __future__ import annotations

import logging
import re
import threading
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Protocol
from uuid import UUID, uuid4

from lib.supabase_client import (
    INVALID_TEXT_REPRESENTATION_CODE,
    NO_ROWS_CODE,
    UNIQUE_VIOLATION_CODE,
    SupabaseClient,
    error_code,
)

if TYPE_CHECKING:
    from supabase import Client

    from app.config import Settings

logger = logging.getLogger(__name__)

# Columns with a unique constraint, in the order conflicts are reported
UNIQUE_FIELDS: tuple[str, ...] = ("email", "phone")


# =============================================================================
# Errors
# =============================================================================

class ContactStoreError(Exception):
    """Any unexpected persistence failure."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.message = message
        self.operation = operation


class DuplicateKeyError(ContactStoreError):
    """A write collided with a unique constraint."""

    def __init__(self, field: str):
        super().__init__(f"Duplicate value for unique field: {field}")
        self.field = field


# =============================================================================
# Contract
# =============================================================================

class ContactStore(Protocol):
    """Persistence contract consumed by ContactService."""

    def find_by_field(self, field: str, value: str) -> dict[str, Any] | None: ...
    def find_by_id(self, contact_id: str) -> dict[str, Any] | None: ...
    def list_all(self) -> list[dict[str, Any]]: ...
    def insert(self, data: dict[str, Any]) -> dict[str, Any]: ...
    def update_by_id(self, contact_id: str, fields: dict[str, Any]) -> dict[str, Any] | None: ...
    def delete_by_id(self, contact_id: str) -> bool: ...
    def ping(self) -> None: ...


def is_valid_id(contact_id: str) -> bool:
    """Contact ids are UUIDs; anything else can never match a row."""
    try:
        UUID(str(contact_id))
    except ValueError:
        return False
    return True


def _check_lookup_field(field: str) -> None:
    if field not in UNIQUE_FIELDS:
        raise ValueError(f"Contacts can only be looked up by {', '.join(UNIQUE_FIELDS)}, not {field!r}")


# =============================================================================
# Supabase
# =============================================================================

_KEY_PATTERN = re.compile(r"Key \((\w+)\)")


def duplicate_field_from_error(exc: Exception) -> str | None:
    """
    Work out which unique column a 23505 error is about.

    Postgres reports `Key (email)=(...) already exists.` in details and the
    constraint name (contacts_email_key) in the message.
    """
    text = " ".join(
        str(part) for part in (getattr(exc, "details", None), getattr(exc, "message", None), exc)
        if part
    )
    match = _KEY_PATTERN.search(text)
    if match and match.group(1) in UNIQUE_FIELDS:
        return match.group(1)
    for field in UNIQUE_FIELDS:
        if f"_{field}_" in text or f"({field})" in text:
            return field
    return None


class SupabaseContactStore:
    """
    Contact store backed by a Supabase (PostgREST) table.

    Example:
        store = SupabaseContactStore(table="contacts")
        row = store.find_by_field("email", "ada@example.com")
    """

    def __init__(self, table: str = "contacts", client: Client | None = None):
        self._table = table
        self._client_override = client

    @property
    def client(self) -> Client:
        if self._client_override is not None:
            return self._client_override
        return SupabaseClient.get_client()

    def _query(self):
        return self.client.table(self._table)

    def _fail(self, operation: str, exc: Exception) -> ContactStoreError:
        if error_code(exc) == UNIQUE_VIOLATION_CODE:
            field = duplicate_field_from_error(exc)
            if field:
                return DuplicateKeyError(field)
        return ContactStoreError(f"Failed to {operation}: {exc}", operation=operation)

    def find_by_field(self, field: str, value: str) -> dict[str, Any] | None:
        _check_lookup_field(field)
        try:
            response = (
                self._query()
                .select("*")
                .eq(field, value)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise self._fail(f"find contact by {field}", e) from e

        rows = response.data or []
        return rows[0] if rows else None

    def find_by_id(self, contact_id: str) -> dict[str, Any] | None:
        if not is_valid_id(contact_id):
            return None
        try:
            response = (
                self._query()
                .select("*")
                .eq("id", str(contact_id))
                .limit(1)
                .execute()
            )
        except Exception as e:
            if error_code(e) in (NO_ROWS_CODE, INVALID_TEXT_REPRESENTATION_CODE):
                return None
            raise self._fail("find contact by id", e) from e

        rows = response.data or []
        return rows[0] if rows else None

    def list_all(self) -> list[dict[str, Any]]:
        try:
            response = (
                self._query()
                .select("*")
                .order("created_at")
                .execute()
            )
        except Exception as e:
            raise self._fail("list contacts", e) from e
        return response.data or []

    def insert(self, data: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self._query().insert(data).execute()
        except Exception as e:
            raise self._fail("insert contact", e) from e

        if not response.data:
            raise ContactStoreError("Insert returned no data", operation="insert contact")
        row = response.data[0]
        logger.debug(f"Inserted contact row: {row.get('id')}")
        return row

    def update_by_id(self, contact_id: str, fields: dict[str, Any]) -> dict[str, Any] | None:
        if not is_valid_id(contact_id):
            return None
        try:
            response = (
                self._query()
                .update(fields)
                .eq("id", str(contact_id))
                .execute()
            )
        except Exception as e:
            raise self._fail("update contact", e) from e

        rows = response.data or []
        return rows[0] if rows else None

    def delete_by_id(self, contact_id: str) -> bool:
        if not is_valid_id(contact_id):
            return False
        try:
            response = (
                self._query()
                .delete()
                .eq("id", str(contact_id))
                .execute()
            )
        except Exception as e:
            raise self._fail("delete contact", e) from e
        return bool(response.data)

    def ping(self) -> None:
        try:
            self._query().select("id").limit(1).execute()
        except Exception as e:
            raise self._fail("reach contacts table", e) from e


# =============================================================================
# In-memory
# =============================================================================

class InMemoryContactStore:
    """
    Process-local contact store.

    A single lock covers every mutation, so the uniqueness check and the
    write it guards happen as one step even under concurrent requests.
    Rows are copied in and out; callers never share state with the store.
    """

    def __init__(self):
        self._rows: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._rows)

    def _conflicting_field(self, candidate: dict[str, Any], exclude_id: str | None) -> str | None:
        for field in UNIQUE_FIELDS:
            value = candidate.get(field)
            if value is None:
                continue
            for row_id, row in self._rows.items():
                if row_id != exclude_id and row.get(field) == value:
                    return field
        return None

    def find_by_field(self, field: str, value: str) -> dict[str, Any] | None:
        _check_lookup_field(field)
        with self._lock:
            for row in self._rows.values():
                if row.get(field) == value:
                    return dict(row)
        return None

    def find_by_id(self, contact_id: str) -> dict[str, Any] | None:
        with self._lock:
            row = self._rows.get(str(contact_id))
            return dict(row) if row else None

    def list_all(self) -> list[dict[str, Any]]:
        with self._lock:
            return [dict(row) for row in self._rows.values()]

    def insert(self, data: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            field = self._conflicting_field(data, exclude_id=None)
            if field:
                raise DuplicateKeyError(field)

            row = dict(data)
            row["id"] = str(uuid4())
            row["created_at"] = datetime.now(timezone.utc).isoformat()
            self._rows[row["id"]] = row
            return dict(row)

    def update_by_id(self, contact_id: str, fields: dict[str, Any]) -> dict[str, Any] | None:
        contact_id = str(contact_id)
        with self._lock:
            current = self._rows.get(contact_id)
            if current is None:
                return None

            field = self._conflicting_field(fields, exclude_id=contact_id)
            if field:
                raise DuplicateKeyError(field)

            # id is never rewritten
            updated = {**current, **fields, "id": contact_id}
            self._rows[contact_id] = updated
            return dict(updated)

    def delete_by_id(self, contact_id: str) -> bool:
        with self._lock:
            return self._rows.pop(str(contact_id), None) is not None

    def ping(self) -> None:
        return None


def build_contact_store(settings: Settings) -> ContactStore:
    """
    Pick the store implementation named by STORE_BACKEND.

    The Supabase client is built from the given settings, not the global ones.
    """
    if settings.STORE_BACKEND == "memory":
        logger.warning("Using in-memory contact store; data is lost on restart")
        return InMemoryContactStore()
    client = SupabaseClient.create(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
    return SupabaseContactStore(table=settings.CONTACTS_TABLE, client=client)
