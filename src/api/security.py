"""Session token dependencies for protected endpoints."""

import json
import logging

from fastapi import Depends, HTTPException, Request, status

from api.dependencies import get_token_service
from domain.model.errors import InvalidTokenError, UnauthenticatedError
from domain.model.session import TokenClaims
from services.token_extraction import extract_token
from services.token_service import TokenService

logger = logging.getLogger(__name__)


async def _json_body(request: Request):
    """Parsed JSON body, or None for empty/non-JSON bodies."""
    if request.method in ("GET", "HEAD", "OPTIONS"):
        return None
    if "application/json" not in request.headers.get("content-type", ""):
        return None
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


async def authenticate(request: Request, tokens: TokenService) -> TokenClaims:
    """Verify the request's session token and attach its claims.

    The claims are trusted as-is for the token's lifetime; no user lookup.

    Raises:
        UnauthenticatedError: no token found, or token failed verification
    """
    token = extract_token(
        request.headers.get("authorization"),
        await _json_body(request),
        request.query_params,
    )
    if not token:
        raise UnauthenticatedError("No token provided")

    try:
        claims = tokens.verify(token)
    except InvalidTokenError as e:
        raise UnauthenticatedError("Invalid token") from e

    request.state.identity = claims
    return claims


async def require_identity(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """FastAPI dependency: 401 unless the request carries a valid session token."""
    try:
        return await authenticate(request, tokens)
    except UnauthenticatedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
