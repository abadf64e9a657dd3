# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .contact_service import ContactService
from .password_hasher import PasswordHasher
from .token_service import InvalidTokenError, TokenIssuer

__all__ = [
    "ContactService",
    "PasswordHasher",
    "TokenIssuer",
    "InvalidTokenError",
]
