"""Session token issuing and verification (JWT, HMAC-signed)."""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from domain.model.errors import InvalidTokenError
from domain.model.session import TokenClaims

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


class TokenService:
    """Mints and validates self-contained session tokens.

    The signing key is fixed for the lifetime of the instance; build one
    per process at startup.
    """

    def __init__(
        self,
        secret_key: str,
        ttl: timedelta,
        algorithm: str = JWT_ALGORITHM,
    ):
        if not secret_key:
            raise ValueError("Token signing key must not be empty")
        self._secret_key = secret_key
        self.ttl = ttl
        self.algorithm = algorithm

    def __repr__(self) -> str:
        return f"TokenService(algorithm={self.algorithm!r}, ttl={self.ttl!r})"

    def issue(self, user_id: str, email: str) -> str:
        """Create a signed token for the user, valid for `ttl`."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "email": email,
            "iat": now,
            "exp": now + self.ttl,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Verify signature and expiry and return the embedded claims.

        Raises:
            InvalidTokenError: malformed, mis-signed, expired, or missing claims
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug(f"JWT verification failed: {e}")
            raise InvalidTokenError("Invalid or expired token") from e

        user_id = payload.get("sub")
        email = payload.get("email")
        exp = payload.get("exp")
        if not user_id or not email or exp is None:
            raise InvalidTokenError("Token is missing required claims")

        issued_at = payload.get("iat", exp - self.ttl.total_seconds())
        return TokenClaims(
            user_id=user_id,
            email=email,
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
