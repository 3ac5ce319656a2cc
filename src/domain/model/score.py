import uuid
from dataclasses import dataclass
from datetime import datetime, timezone


def month_key(moment: datetime) -> str:
    """Leaderboard bucket for a timestamp, e.g. '2025-10'."""
    return moment.astimezone(timezone.utc).strftime('%Y-%m')


@dataclass
class Score:
    """Domain model representing one finished quiz attempt."""
    id: str
    user_id: str
    email: str
    name: str
    subject: str
    score: int
    total: int
    month_key: str
    created_at: datetime

    @classmethod
    def create(
        cls,
        user_id: str,
        email: str,
        name: str,
        subject: str,
        score: int,
        total: int,
    ) -> 'Score':
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid.uuid4().hex,
            user_id=user_id,
            email=email,
            name=name,
            subject=subject,
            score=score,
            total=total,
            month_key=month_key(now),
            created_at=now,
        )
