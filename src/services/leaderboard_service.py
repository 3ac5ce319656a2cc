"""Leaderboard service: recording quiz results and reading the top scores."""

from domain.model.errors import ValidationError
from domain.model.score import Score
from domain.model.session import TokenClaims
from port.score_repository import ScoreRepository

MAX_LEADERBOARD_SIZE = 100


def record_result(
    repo: ScoreRepository,
    identity: TokenClaims,
    subject: str | None,
    score: int | None,
    total: int | None,
    name: str | None = None,
) -> Score:
    """Save a finished quiz for the authenticated user.

    Raises:
        ValidationError: missing field or an impossible score
    """
    missing = [
        field
        for field, value in (("subject", subject), ("score", score), ("totalQuestions", total))
        if value is None or (isinstance(value, str) and not value.strip())
    ]
    if missing:
        raise ValidationError(f"Missing fields: {', '.join(missing)}")
    if total <= 0 or score < 0 or score > total:
        raise ValidationError("Score must be between 0 and totalQuestions")

    display_name = (name or "").strip() or identity.email.split("@")[0]
    entry = Score.create(
        user_id=identity.user_id,
        email=identity.email,
        name=display_name,
        subject=subject.strip(),
        score=score,
        total=total,
    )
    return repo.save(entry)


def top_scores(
    repo: ScoreRepository,
    limit: int = 10,
    month: str | None = None,
    subject: str | None = None,
) -> list[Score]:
    """Best scores first; `month` is a YYYY-MM bucket."""
    limit = max(1, min(limit, MAX_LEADERBOARD_SIZE))
    return repo.top(limit=limit, month_key=month, subject=subject)
