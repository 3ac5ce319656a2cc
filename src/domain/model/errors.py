"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class DuplicateEmailError(DuplicateError):
    """A user with this email is already registered."""

    def __init__(self, message: str = "Email already registered"):
        super().__init__(message)


class InvalidCredentialsError(DomainError):
    """Email/password pair did not authenticate.

    Covers unknown email, accounts without a password and wrong passwords
    alike, so callers cannot tell which one happened.
    """

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class InvalidAssertionError(DomainError):
    """Federated identity assertion failed verification."""


class InvalidTokenError(DomainError):
    """Session token is malformed, mis-signed or expired."""


class UnauthenticatedError(DomainError):
    """Request carries no usable session token."""


class StorageUnavailableError(DomainError):
    """The user directory could not be reached."""
