# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# Holds the single Supabase client the contact store talks through.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   client = SupabaseClient.get_client()
#   client.table("contacts").select("*").execute()
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import Client, create_client

from app.config import settings

logger = logging.getLogger(__name__)

# PostgREST / Postgres error codes the store cares about
NO_ROWS_CODE = "PGRST116"
UNIQUE_VIOLATION_CODE = "23505"
INVALID_TEXT_REPRESENTATION_CODE = "22P02"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Errors should tell HOW to fix, not just WHAT failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Singleton holder for the Supabase client.

    Uses the service_role key which bypasses Row Level Security (RLS).
    This is appropriate for server-side operations.
    """

    _instance: Client | None = None

    @staticmethod
    def create(url: str, service_key: str) -> Client:
        """
        Create a new Supabase client from an explicit credential pair.

        Raises:
            SupabaseClientError: If client creation fails
        """
        try:
            client = create_client(url, service_key)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase client: {e}",
                code="CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
            ) from e
        logger.info("Supabase client initialized successfully")
        return client

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client from the global settings.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            cls._instance = cls.create(
                settings.SUPABASE_URL,
                settings.SUPABASE_SERVICE_KEY
            )
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Forget the cached client (tests, credential rotation)."""
        cls._instance = None


def error_code(exc: Exception) -> str | None:
    """
    Extract the PostgREST/Postgres error code from a client exception.

    postgrest's APIError exposes `.code`; fall back to scanning the message
    the way older client versions had to.
    """
    code = getattr(exc, "code", None)
    if isinstance(code, str) and code:
        return code
    text = str(exc)
    for known in (NO_ROWS_CODE, UNIQUE_VIOLATION_CODE, INVALID_TEXT_REPRESENTATION_CODE):
        if known in text:
            return known
    return None
