"""MongoDB implementation of ScoreRepository."""

from logging import getLogger

from pymongo import DESCENDING
from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb.connection import SCORES_COLLECTION_NAME
from domain.model.errors import StorageUnavailableError
from domain.model.score import Score

logger = getLogger(__name__)


class MongoScoreRepository:
    def __init__(self, db: Database):
        self.collection = db[SCORES_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for scores collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(
                self.collection,
                [('month_key', 1), ('score', -1)],
                'idx_scores_month_score',
            )
            create_index_safe(self.collection, [('user_id', 1)], 'idx_scores_user_id')
            return True
        except PyMongoError as e:
            logger.error("Failed to create scores indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> Score:
        return Score(
            id=doc['_id'],
            user_id=doc['user_id'],
            email=doc['email'],
            name=doc['name'],
            subject=doc['subject'],
            score=doc['score'],
            total=doc['total'],
            month_key=doc['month_key'],
            created_at=doc['created_at'],
        )

    def save(self, score: Score) -> Score:
        doc = {
            '_id': score.id,
            'user_id': score.user_id,
            'email': score.email,
            'name': score.name,
            'subject': score.subject,
            'score': score.score,
            'total': score.total,
            'month_key': score.month_key,
            'created_at': score.created_at,
        }
        try:
            self.collection.insert_one(doc)
        except PyMongoError as e:
            logger.error("Failed to save score", extra={"userId": score.user_id, "error": str(e)})
            raise StorageUnavailableError("Failed to save score") from e
        logger.info("Score saved", extra={"userId": score.user_id, "subject": score.subject})
        return score

    def top(
        self,
        limit: int = 10,
        month_key: str | None = None,
        subject: str | None = None,
    ) -> list[Score]:
        query = {}
        if month_key:
            query['month_key'] = month_key
        if subject:
            query['subject'] = subject
        try:
            cursor = (
                self.collection.find(query)
                .sort([('score', DESCENDING), ('created_at', 1)])
                .limit(limit)
            )
            return [self._to_domain(doc) for doc in cursor]
        except PyMongoError as e:
            logger.error("Failed to read leaderboard", extra={"error": str(e)})
            raise StorageUnavailableError("Failed to read leaderboard") from e
