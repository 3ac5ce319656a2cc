"""Session and credential value objects."""

from dataclasses import dataclass
from datetime import datetime

from domain.model.user import PublicUser


@dataclass(frozen=True)
class TokenClaims:
    """Identity embedded in a verified session token."""
    user_id: str
    email: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class FederatedIdentity:
    """Verified payload of an external identity assertion."""
    subject_id: str
    email: str
    name: str | None = None
    picture_url: str | None = None


@dataclass(frozen=True)
class SignupCredentials:
    name: str | None
    email: str | None
    password: str | None
    confirm_password: str | None


@dataclass(frozen=True)
class PasswordCredentials:
    email: str | None
    password: str | None


@dataclass(frozen=True)
class FederatedAssertion:
    token: str | None


@dataclass(frozen=True)
class AuthResult:
    """What every successful authentication hands back to the caller."""
    token: str
    user: PublicUser

    def to_dict(self) -> dict:
        return {'token': self.token, 'user': self.user.to_dict()}
