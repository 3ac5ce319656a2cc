"""Leaderboard routes. Writes require a session token."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_score_repo
from api.models import SaveResultRequest, ScoreResponse
from api.errors import to_http_error
from api.security import require_identity
from domain.model.errors import DomainError
from domain.model.score import Score
from domain.model.session import TokenClaims
from port.score_repository import ScoreRepository
from services.leaderboard_service import record_result, top_scores


router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])


def _score_response(score: Score) -> ScoreResponse:
    return ScoreResponse(
        id=score.id,
        name=score.name,
        subject=score.subject,
        score=score.score,
        total_questions=score.total,
        month_key=score.month_key,
        created_at=score.created_at,
    )


@router.post("", response_model=ScoreResponse, status_code=status.HTTP_201_CREATED)
async def save_result(
    request: SaveResultRequest,
    identity: TokenClaims = Depends(require_identity),
    repo: ScoreRepository = Depends(get_score_repo),
):
    """Record a finished quiz for the authenticated user."""
    try:
        score = record_result(
            repo,
            identity,
            subject=request.subject,
            score=request.score,
            total=request.total_questions,
            name=request.name,
        )
    except DomainError as e:
        raise to_http_error(e) from e
    return _score_response(score)


@router.get("", response_model=list[ScoreResponse])
async def get_leaderboard(
    limit: int = Query(10, ge=1, le=100),
    month: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}$", description="YYYY-MM bucket"),
    subject: Optional[str] = None,
    repo: ScoreRepository = Depends(get_score_repo),
):
    """Top scores, highest first."""
    try:
        scores = top_scores(repo, limit=limit, month=month, subject=subject)
    except DomainError as e:
        raise to_http_error(e) from e
    return [_score_response(s) for s in scores]
