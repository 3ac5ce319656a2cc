"""Port definition for ScoreRepository."""

from typing import Protocol

from domain.model.score import Score


class ScoreRepository(Protocol):
    def save(self, score: Score) -> Score:
        """Persist a score. Raise StorageUnavailableError on failure."""
        ...

    def top(
        self,
        limit: int = 10,
        month_key: str | None = None,
        subject: str | None = None,
    ) -> list[Score]:
        """Highest scores first, optionally filtered by month and subject."""
        ...
