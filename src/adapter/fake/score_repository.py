"""In-memory implementation of ScoreRepository for testing."""

from domain.model.score import Score


class FakeScoreRepository:
    def __init__(self):
        self.store: dict[str, Score] = {}

    def save(self, score: Score) -> Score:
        self.store[score.id] = score
        return score

    def top(
        self,
        limit: int = 10,
        month_key: str | None = None,
        subject: str | None = None,
    ) -> list[Score]:
        scores = [
            s for s in self.store.values()
            if (not month_key or s.month_key == month_key)
            and (not subject or s.subject == subject)
        ]
        scores.sort(key=lambda s: (-s.score, s.created_at))
        return scores[:limit]
