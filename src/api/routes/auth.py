"""Authentication routes (signup, login, Google Sign-In)."""

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_auth_service, get_user_repo
from api.errors import to_http_error
from api.models import (
    AuthResponse,
    GoogleLoginRequest,
    LoginRequest,
    SignupRequest,
    UserResponse,
)
from api.security import require_identity
from domain.model.errors import DomainError
from domain.model.session import (
    AuthResult,
    FederatedAssertion,
    PasswordCredentials,
    SignupCredentials,
    TokenClaims,
)
from domain.model.user import PublicUser
from port.user_repository import UserRepository
from services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _user_response(user: PublicUser) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        avatar_url=user.avatar_url,
    )


def _auth_response(message: str, result: AuthResult) -> AuthResponse:
    return AuthResponse(message=message, token=result.token, user=_user_response(result.user))


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(request: SignupRequest, auth: AuthService = Depends(get_auth_service)):
    """Register a new email/password user.

    Raises:
        HTTPException: 400 invalid input, 409 email already registered,
            503 database unavailable
    """
    try:
        result = await auth.signup(SignupCredentials(
            name=request.name,
            email=request.email,
            password=request.password,
            confirm_password=request.confirm_password,
        ))
    except DomainError as e:
        raise to_http_error(e) from e
    return _auth_response("Signup successful", result)


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    """Login with email and password.

    Raises:
        HTTPException: 400 missing fields, 401 invalid credentials,
            503 database unavailable
    """
    try:
        result = await auth.login(PasswordCredentials(email=request.email, password=request.password))
    except DomainError as e:
        raise to_http_error(e) from e
    return _auth_response("Login successful", result)


@router.post("/google", response_model=AuthResponse)
async def google_login(request: GoogleLoginRequest, auth: AuthService = Depends(get_auth_service)):
    """Login (or sign up) with a Google ID token.

    Raises:
        HTTPException: 400 missing id_token, 401 token rejected,
            503 database unavailable
    """
    try:
        result = await auth.login_with_assertion(FederatedAssertion(token=request.id_token))
    except DomainError as e:
        raise to_http_error(e) from e
    return _auth_response("Google login success", result)


@router.get("/me", response_model=UserResponse)
async def get_me(
    identity: TokenClaims = Depends(require_identity),
    repo: UserRepository = Depends(get_user_repo),
):
    """Profile of the user the session token belongs to."""
    try:
        user = repo.get_by_id(identity.user_id)
    except DomainError as e:
        raise to_http_error(e) from e
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return _user_response(user.to_public())
