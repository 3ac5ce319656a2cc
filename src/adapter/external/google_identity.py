"""Google Sign-In adapter: implements IdentityProviderPort.

Verifies Google-issued ID tokens against Google's published signing keys
(JWKS). Keys are cached per adapter instance and refreshed once when a
token names an unknown key id, which covers Google's key rotation.
"""

import logging
import time
from typing import Any

import httpx
from jose import JWTError, jwk, jwt
from jose.exceptions import JOSEError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from domain.model.errors import InvalidAssertionError
from domain.model.session import FederatedIdentity
from domain.model.user import normalize_email
from utils.config import GOOGLE_ISSUERS, GOOGLE_JWKS_URL

logger = logging.getLogger(__name__)

ASSERTION_ALGORITHMS = ["RS256"]
CLOCK_SKEW_SECONDS = 10


class GoogleIdentityAdapter:
    """Adapter that verifies Google ID tokens."""

    def __init__(
        self,
        client_id: str | None,
        jwks_url: str = GOOGLE_JWKS_URL,
        timeout: float = 5.0,
        cache_seconds: int = 3600,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client_id = client_id
        self.jwks_url = jwks_url
        self.timeout = timeout
        self.cache_seconds = cache_seconds
        self._transport = transport
        self._jwks: dict[str, Any] | None = None
        self._jwks_fetched_at = 0.0

    async def verify_assertion(self, assertion: str) -> FederatedIdentity:
        """Verify a Google ID token and extract the identity it asserts.

        Raises:
            InvalidAssertionError: bad signature, wrong audience or issuer,
                expired token, missing claims, or Google unreachable.
        """
        if not self.client_id:
            logger.error("GOOGLE_CLIENT_ID not configured; rejecting federated login")
            raise InvalidAssertionError("Federated login is not configured")

        try:
            signing_key = await self._signing_key_for(assertion)
            public_key = jwk.construct(signing_key, algorithm=ASSERTION_ALGORITHMS[0])
            claims = jwt.decode(
                assertion,
                public_key.to_pem().decode('utf-8'),
                algorithms=ASSERTION_ALGORITHMS,
                audience=self.client_id,
                options={"leeway": CLOCK_SKEW_SECONDS, "verify_at_hash": False},
            )
        except (JOSEError, ValueError) as e:
            logger.info("Google ID token rejected", extra={"reason": str(e)})
            raise InvalidAssertionError(f"Token verification failed: {e}") from e
        except httpx.HTTPError as e:
            logger.warning(
                "Google JWKS request failed",
                extra={"error_type": type(e).__name__},
            )
            raise InvalidAssertionError("Identity provider unavailable") from e

        return _identity_from_claims(claims)

    async def _signing_key_for(self, assertion: str) -> dict[str, Any]:
        header = jwt.get_unverified_header(assertion)
        kid = header.get("kid")
        if not kid:
            raise JWTError("Token header missing 'kid' (Key ID)")

        key = _find_key(await self._fetch_jwks(), kid)
        if key is None:
            # Keys may have rotated since the cache was filled
            key = _find_key(await self._fetch_jwks(force_refresh=True), kid)
        if key is None:
            raise JWTError("Unable to find matching signing key in JWKS")
        return key

    async def _fetch_jwks(self, force_refresh: bool = False) -> dict[str, Any]:
        now = time.monotonic()
        if (
            not force_refresh
            and self._jwks is not None
            and now - self._jwks_fetched_at < self.cache_seconds
        ):
            return self._jwks

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await _fetch_with_retry(client, self.jwks_url)
            response.raise_for_status()
            data = response.json()

        if not isinstance(data, dict) or "keys" not in data:
            raise JWTError("Invalid JWKS response: missing 'keys' field")

        self._jwks = data
        self._jwks_fetched_at = now
        logger.debug("Fetched Google JWKS", extra={"key_count": len(data["keys"])})
        return data


# ── helpers ──────────────────────────────────────────────────


@retry(
    retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
    stop=stop_after_attempt(2),
    wait=wait_exponential(multiplier=0.2, min=0.2, max=1),
    reraise=True,
)
async def _fetch_with_retry(client: httpx.AsyncClient, url: str) -> httpx.Response:
    """Fetch URL with one retry on transient failures."""
    return await client.get(url)


def _find_key(jwks: dict[str, Any], kid: str) -> dict[str, Any] | None:
    for key in jwks.get("keys", []):
        if key.get("kid") == kid:
            return key
    return None


def _identity_from_claims(claims: dict[str, Any]) -> FederatedIdentity:
    if claims.get("iss") not in GOOGLE_ISSUERS:
        raise InvalidAssertionError(f"Invalid issuer: {claims.get('iss')}")

    subject_id = claims.get("sub")
    email = normalize_email(claims.get("email"))
    if not subject_id or not email:
        raise InvalidAssertionError("Token is missing 'sub' or 'email'")

    # Google sends email_verified as a bool, older tokens as the string "true"
    verified = claims.get("email_verified", True)
    if verified is False or str(verified).lower() == "false":
        raise InvalidAssertionError("Email address is not verified")

    return FederatedIdentity(
        subject_id=subject_id,
        email=email,
        name=claims.get("name") or None,
        picture_url=claims.get("picture") or None,
    )
