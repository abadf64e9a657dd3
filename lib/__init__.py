# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains persistence integrations:
# - supabase_client.py: Singleton Supabase client and error-code helpers
# - contact_store.py: Contact store contract, Supabase and in-memory stores
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.contact_store import (
    ContactStore,
    ContactStoreError,
    DuplicateKeyError,
    InMemoryContactStore,
    SupabaseContactStore,
    build_contact_store,
)

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Contact store
    "ContactStore",
    "ContactStoreError",
    "DuplicateKeyError",
    "InMemoryContactStore",
    "SupabaseContactStore",
    "build_contact_store",
]
