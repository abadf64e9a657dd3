# =============================================================================
# core/services/password_hasher.py - Credential Hasher
# =============================================================================
# One-way bcrypt hashing of plaintext passwords with a random per-record salt.
# The salt and cost factor travel inside the hash string, so verification
# needs nothing but the stored hash.
# =============================================================================

import logging

import bcrypt

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """
    bcrypt password hasher.

    Example:
        hasher = PasswordHasher(rounds=10)
        stored = hasher.hash("secret1")
        hasher.verify("secret1", stored)  # True
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a plaintext password with a freshly generated salt."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode(password), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Check a plaintext candidate against a stored hash.

        A stored value that is not a bcrypt hash never matches.
        """
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is not a valid bcrypt hash")
            return False
