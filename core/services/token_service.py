# =============================================================================
# core/services/token_service.py - Token Issuer
# =============================================================================
# Signs bearer tokens that embed a contact's id.
#
# Tokens carry no expiry unless an expiry is configured: a token stays valid
# until the signing secret is rotated. No endpoint checks tokens yet.
# =============================================================================

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

logger = logging.getLogger(__name__)


class InvalidTokenError(Exception):
    """Raised when a token cannot be verified."""


class TokenIssuer:
    """
    HMAC-signed JWT issuer.

    Example:
        issuer = TokenIssuer(secret="...", algorithm="HS256")
        token = issuer.issue(contact_id)
        issuer.decode(token)["id"] == contact_id
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_minutes: int | None = None,
    ):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, contact_id: str) -> str:
        """Create a signed token with claims {id, iat[, exp]}."""
        now = datetime.now(timezone.utc)
        claims: dict[str, Any] = {"id": str(contact_id), "iat": int(now.timestamp())}
        if self.expire_minutes:
            claims["exp"] = int((now + timedelta(minutes=self.expire_minutes)).timestamp())
        return jwt.encode(claims, self._secret, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        """
        Verify a token's signature (and expiry, when present).

        Returns:
            The token claims

        Raises:
            InvalidTokenError: If the token is expired, tampered with or malformed
        """
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except JWTError as e:
            logger.debug(f"Token verification failed: {e}")
            raise InvalidTokenError(f"Invalid token: {e}") from e

        if not claims.get("id"):
            raise InvalidTokenError("Invalid token: missing contact id")
        return claims
