"""Process-wide settings read from the environment.

`api.main` loads `.env` with python-dotenv before anything calls
`get_settings()`, so values from the file and from the real environment
are both visible here.
"""

import os
from dataclasses import dataclass
from functools import lru_cache

GOOGLE_JWKS_URL = "https://www.googleapis.com/oauth2/v3/certs"
GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")
ALLOWED_JWT_ALGORITHMS = ("HS256", "HS384", "HS512")

# 7 days
DEFAULT_TOKEN_TTL_MINUTES = 7 * 24 * 60


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got: {raw!r}") from e


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got: {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_expiration_minutes: int = DEFAULT_TOKEN_TTL_MINUTES
    bcrypt_rounds: int = 10
    google_client_id: str | None = None
    google_jwks_url: str = GOOGLE_JWKS_URL
    federated_timeout_seconds: float = 5.0
    jwks_cache_seconds: int = 3600

    def __post_init__(self):
        if not self.jwt_secret_key:
            raise ValueError(
                "JWT_SECRET_KEY environment variable is required. "
                "Generate a secure key with: openssl rand -hex 32"
            )
        if self.jwt_algorithm not in ALLOWED_JWT_ALGORITHMS:
            raise ValueError(
                f"JWT algorithm must be one of {list(ALLOWED_JWT_ALGORITHMS)}, got: {self.jwt_algorithm}"
            )
        if self.jwt_expiration_minutes <= 0:
            raise ValueError("JWT_EXPIRATION_MINUTES must be positive")
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            jwt_secret_key=os.getenv("JWT_SECRET_KEY", ""),
            jwt_algorithm=os.getenv("JWT_ALGORITHM") or "HS256",
            jwt_expiration_minutes=_int_env("JWT_EXPIRATION_MINUTES", DEFAULT_TOKEN_TTL_MINUTES),
            bcrypt_rounds=_int_env("BCRYPT_ROUNDS", 10),
            google_client_id=os.getenv("GOOGLE_CLIENT_ID") or None,
            google_jwks_url=os.getenv("GOOGLE_JWKS_URL") or GOOGLE_JWKS_URL,
            federated_timeout_seconds=_float_env("FEDERATED_TIMEOUT_SECONDS", 5.0),
            jwks_cache_seconds=_int_env("JWKS_CACHE_SECONDS", 3600),
        )


@lru_cache()
def get_settings() -> Settings:
    """Settings singleton, built on first use."""
    return Settings.from_env()
