"""Locating a session token inside an inbound request."""

from typing import Any, Mapping

BEARER_PREFIX = "bearer "
TOKEN_FIELD = "token"


def extract_token(
    authorization: str | None,
    body: Any = None,
    query: Mapping[str, str] | None = None,
) -> str | None:
    """Return the first candidate token, or None.

    Checked in order: `Authorization: Bearer <token>`, a `token` field in a
    JSON object body, a `token` query parameter. Blank values are skipped.
    """
    if authorization and authorization[:len(BEARER_PREFIX)].lower() == BEARER_PREFIX:
        token = authorization[len(BEARER_PREFIX):].strip()
        if token:
            return token

    if isinstance(body, Mapping):
        token = body.get(TOKEN_FIELD)
        if isinstance(token, str) and token.strip():
            return token.strip()

    if query:
        token = query.get(TOKEN_FIELD)
        if token and token.strip():
            return token.strip()

    return None
