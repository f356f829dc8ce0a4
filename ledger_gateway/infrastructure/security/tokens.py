"""Signed session credentials (JWT)"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from ledger_gateway.domain.exceptions import (
    NotConfiguredError,
    TokenInvalidError,
    TokenVerificationError,
    UnauthenticatedError,
)
from ledger_gateway.domain.models import SessionClaims


class TokenSigner:
    """Issues and verifies HMAC-signed session tokens carrying userId and email"""

    def __init__(self, secret: Optional[str], algorithm: str = "HS256", ttl_seconds: int = 3600):
        if not secret:
            raise NotConfiguredError("JWT_SECRET is not set")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = timedelta(seconds=ttl_seconds)

    def issue(self, user_id: int, email: str, now: Optional[datetime] = None) -> str:
        """Encode a token valid for ttl from now"""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "userId": user_id,
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Verify signature and expiry and return the raw payload.

        Raises:
            TokenInvalidError: Bad signature, malformed or expired token
            TokenVerificationError: Verification itself failed (key problem)
        """
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError(str(e)) from e
        except jwt.PyJWTError as e:
            raise TokenVerificationError(str(e)) from e

    def verify(self, token: str) -> SessionClaims:
        """
        Decode a token into session claims.

        Raises:
            UnauthenticatedError: Payload carries no usable userId claim
        """
        payload = self.decode(token)
        if not isinstance(payload, dict):
            raise UnauthenticatedError("Token payload is not an object")

        user_id = payload.get("userId")
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            raise UnauthenticatedError("Token has no userId claim")

        return SessionClaims(
            user_id=user_id,
            email=str(payload.get("email", "")),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
