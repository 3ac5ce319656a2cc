from datetime import timedelta
from functools import lru_cache

from fastapi import Depends, HTTPException

from adapter.external.google_identity import GoogleIdentityAdapter
from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.score_repository import MongoScoreRepository
from adapter.mongodb.user_repository import MongoUserRepository
from port.identity_provider import IdentityProviderPort
from port.score_repository import ScoreRepository
from port.user_repository import UserRepository
from services.auth_service import AuthService, FederatedAuthenticator, PasswordAuthenticator
from services.password_hasher import BcryptPasswordHasher
from services.token_service import TokenService
from utils.config import get_settings


def _get_db():
    """Get MongoDB database, raising 503 if unavailable."""
    client = get_mongodb_client()
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[DATABASE_NAME]


def get_user_repo() -> UserRepository:
    return MongoUserRepository(_get_db())


def get_score_repo() -> ScoreRepository:
    return MongoScoreRepository(_get_db())


# Stateless collaborators below are built once per process.

@lru_cache()
def get_token_service() -> TokenService:
    settings = get_settings()
    return TokenService(
        secret_key=settings.jwt_secret_key,
        ttl=timedelta(minutes=settings.jwt_expiration_minutes),
        algorithm=settings.jwt_algorithm,
    )


@lru_cache()
def get_password_hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=get_settings().bcrypt_rounds)


@lru_cache()
def get_identity_provider() -> IdentityProviderPort:
    settings = get_settings()
    return GoogleIdentityAdapter(
        client_id=settings.google_client_id,
        jwks_url=settings.google_jwks_url,
        timeout=settings.federated_timeout_seconds,
        cache_seconds=settings.jwks_cache_seconds,
    )


def get_auth_service(
    repo: UserRepository = Depends(get_user_repo),
    hasher: BcryptPasswordHasher = Depends(get_password_hasher),
    identity_provider: IdentityProviderPort = Depends(get_identity_provider),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(
        password=PasswordAuthenticator(repo, hasher),
        federated=FederatedAuthenticator(repo, identity_provider),
        tokens=tokens,
    )
