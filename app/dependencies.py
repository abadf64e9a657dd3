# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# The contact service is built once from settings; tests replace it through
# app.dependency_overrides[get_contact_service].
# =============================================================================

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.config import Settings, get_settings
from core.services import ContactService, PasswordHasher, TokenIssuer
from lib.contact_store import ContactStore, build_contact_store


def build_contact_service(settings: Settings) -> ContactService:
    """Wire a ContactService from explicit settings."""
    return ContactService(
        store=build_contact_store(settings),
        hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
        tokens=TokenIssuer(
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            expire_minutes=settings.JWT_EXPIRE_MINUTES,
        ),
    )


@lru_cache
def get_contact_service() -> ContactService:
    """
    Get the process-wide contact service.

    Returns the same instance on every call so the in-memory store (when
    configured) survives between requests.
    """
    return build_contact_service(get_settings())


def get_contact_store(
    service: Annotated[ContactService, Depends(get_contact_service)],
) -> ContactStore:
    """The store behind the current contact service."""
    return service.store


# Type aliases for dependency injection
ContactServiceDep = Annotated[ContactService, Depends(get_contact_service)]
ContactStoreDep = Annotated[ContactStore, Depends(get_contact_store)]
