"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    """Request model for email/password signup.

    Fields are optional here so that missing values surface as the
    service's 400 ValidationError instead of FastAPI's 422.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = Field(None, alias="confirmPassword")


class LoginRequest(BaseModel):
    """Request model for email/password login."""
    email: Optional[str] = None
    password: Optional[str] = None


class GoogleLoginRequest(BaseModel):
    """Request model for Google Sign-In (frontend sends the ID token)."""
    id_token: Optional[str] = None


class UserResponse(BaseModel):
    """Public view of a user. Never carries credentials."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    avatar_url: Optional[str] = Field(None, alias="avatarUrl")


class AuthResponse(BaseModel):
    """Response model for authentication."""
    message: str
    token: str
    user: UserResponse


class SaveResultRequest(BaseModel):
    """Request model for recording a finished quiz.

    Bounds are checked by the leaderboard service so that bad scores get
    the same 400 as every other domain validation failure.
    """
    model_config = ConfigDict(populate_by_name=True)

    subject: Optional[str] = None
    score: Optional[int] = None
    total_questions: Optional[int] = Field(None, alias="totalQuestions")
    name: Optional[str] = None
    token: Optional[str] = Field(None, description="Session token, if not sent as a header")


class ScoreResponse(BaseModel):
    """Response model for a leaderboard entry."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    subject: str
    score: int
    total_questions: int = Field(..., alias="totalQuestions")
    month_key: str = Field(..., alias="monthKey")
    created_at: datetime = Field(..., alias="createdAt")
