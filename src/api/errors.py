"""Mapping from domain errors to HTTP responses."""

import logging

from fastapi import HTTPException, status

from domain.model.errors import (
    DomainError,
    DuplicateEmailError,
    InvalidAssertionError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    StorageUnavailableError,
    UnauthenticatedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (DuplicateEmailError, status.HTTP_409_CONFLICT),
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (InvalidAssertionError, status.HTTP_401_UNAUTHORIZED),
    (InvalidTokenError, status.HTTP_401_UNAUTHORIZED),
    (UnauthenticatedError, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (StorageUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
)

# Client-facing text for errors whose own message may carry internals
_FIXED_DETAIL = {
    InvalidAssertionError: "Invalid Google token",
    StorageUnavailableError: "Database unavailable",
}


def to_http_error(error: DomainError) -> HTTPException:
    """Map a domain error to the HTTP status the client sees."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            detail = _FIXED_DETAIL.get(error_type, str(error))
            return HTTPException(status_code=status_code, detail=detail)
    logger.error("Unhandled domain error", extra={"error_type": type(error).__name__})
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error")
