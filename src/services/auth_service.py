"""Auth service: signup, login and federated login business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import asyncio
import logging

from email_validator import EmailNotValidError, validate_email

from domain.model.errors import DuplicateEmailError, InvalidCredentialsError, ValidationError
from domain.model.session import (
    AuthResult,
    FederatedAssertion,
    PasswordCredentials,
    SignupCredentials,
)
from domain.model.user import User, normalize_email
from port.authenticator import Authenticator
from port.identity_provider import IdentityProviderPort
from port.user_repository import UserRepository
from services.password_hasher import MAX_PASSWORD_BYTES, BcryptPasswordHasher
from services.token_service import TokenService

logger = logging.getLogger(__name__)


def _require(**fields: str | None) -> None:
    missing = [name for name, value in fields.items() if not value or not value.strip()]
    if missing:
        raise ValidationError(f"Missing fields: {', '.join(missing)}")


def _validate_email(email: str) -> str:
    email = normalize_email(email)
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError("Invalid email address") from e
    return email


class PasswordAuthenticator:
    """Email/password accounts: creation and credential checks."""

    def __init__(self, repo: UserRepository, hasher: BcryptPasswordHasher):
        self.repo = repo
        self.hasher = hasher

    async def signup(self, request: SignupCredentials) -> User:
        """Register a new password account.

        Raises:
            ValidationError: missing field, malformed email, or passwords differ
            DuplicateEmailError: email already registered
        """
        _require(
            name=request.name,
            email=request.email,
            password=request.password,
            confirmPassword=request.confirm_password,
        )
        if request.password != request.confirm_password:
            raise ValidationError("Passwords do not match")
        if len(request.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        email = _validate_email(request.email)

        if self.repo.get_by_email(email):
            raise DuplicateEmailError()

        # Hashing precedes any write
        password_hash = await asyncio.to_thread(self.hasher.hash, request.password)

        # A concurrent signup can still win here; create() raises DuplicateEmailError
        user = self.repo.create(
            name=request.name.strip(),
            email=email,
            password_hash=password_hash,
        )
        logger.info("User registered", extra={"userId": user.id, "email": email})
        return user

    async def resolve_identity(self, request: PasswordCredentials) -> User:
        """Authenticate by email and password.

        Unknown email, accounts without a password and wrong passwords all
        raise the same InvalidCredentialsError.
        """
        _require(email=request.email, password=request.password)

        user = self.repo.get_by_email(request.email)
        if not user or not user.has_password:
            raise InvalidCredentialsError()

        if not await asyncio.to_thread(self.hasher.verify, request.password, user.password_hash):
            raise InvalidCredentialsError()

        logger.info("User logged in", extra={"userId": user.id, "provider": "email"})
        return user


class FederatedAuthenticator:
    """Accounts asserted by an external identity provider."""

    def __init__(self, repo: UserRepository, identity_provider: IdentityProviderPort):
        self.repo = repo
        self.identity_provider = identity_provider

    async def resolve_identity(self, request: FederatedAssertion) -> User:
        """Find, create, or enrich the User behind a verified assertion.

        Repeating the same assertion payload resolves to the same User and
        writes nothing once every optional field is populated.

        Raises:
            ValidationError: no assertion supplied
            InvalidAssertionError: assertion failed verification
        """
        if not request.token or not request.token.strip():
            raise ValidationError("Missing id_token")

        identity = await self.identity_provider.verify_assertion(request.token.strip())

        user = self.repo.get_by_email(identity.email)
        if user is None:
            try:
                user = self.repo.create(
                    name=identity.name or identity.email.split("@")[0],
                    email=identity.email,
                    federated_id=identity.subject_id,
                    avatar_url=identity.picture_url,
                )
                logger.info("User registered", extra={"userId": user.id, "provider": "google"})
                return user
            except DuplicateEmailError:
                # Lost a race with a concurrent first login for the same email
                user = self.repo.get_by_email(identity.email)
                if user is None:
                    raise

        patch = user.enrichment(
            name=identity.name,
            avatar_url=identity.picture_url,
            federated_id=identity.subject_id,
        )
        if patch:
            user = self.repo.update(user.id, patch) or user
            logger.info("User profile enriched", extra={"userId": user.id, "fields": sorted(patch)})

        return user


class AuthService:
    """Entry point for the routing layer: authenticate, then issue a session."""

    def __init__(
        self,
        password: PasswordAuthenticator,
        federated: Authenticator[FederatedAssertion],
        tokens: TokenService,
    ):
        self.password = password
        self.federated = federated
        self.tokens = tokens

    def _session_for(self, user: User) -> AuthResult:
        token = self.tokens.issue(user.id, user.email)
        return AuthResult(token=token, user=user.to_public())

    async def signup(self, request: SignupCredentials) -> AuthResult:
        user = await self.password.signup(request)
        return self._session_for(user)

    async def login(self, request: PasswordCredentials) -> AuthResult:
        user = await self.password.resolve_identity(request)
        return self._session_for(user)

    async def login_with_assertion(self, request: FederatedAssertion) -> AuthResult:
        user = await self.federated.resolve_identity(request)
        return self._session_for(user)
