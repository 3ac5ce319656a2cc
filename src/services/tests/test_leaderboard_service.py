"""Unit tests for leaderboard_service."""

import unittest
from datetime import datetime, timedelta, timezone
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from adapter.fake.score_repository import FakeScoreRepository
from domain.model.errors import ValidationError
from domain.model.score import Score, month_key
from domain.model.session import TokenClaims
from services.leaderboard_service import MAX_LEADERBOARD_SIZE, record_result, top_scores

NOW = datetime.now(timezone.utc)
ADA = TokenClaims(user_id='user-ada', email='ada@x.com', issued_at=NOW, expires_at=NOW + timedelta(days=7))


class TestRecordResult(unittest.TestCase):

    def setUp(self):
        self.repo = FakeScoreRepository()

    def test_records_for_authenticated_user(self):
        score = record_result(self.repo, ADA, subject='Algorithms', score=7, total=10, name='Ada')

        self.assertEqual(score.user_id, 'user-ada')
        self.assertEqual(score.email, 'ada@x.com')
        self.assertEqual(score.name, 'Ada')
        self.assertEqual(score.month_key, month_key(score.created_at))
        self.assertIn(score.id, self.repo.store)

    def test_name_defaults_to_email_local_part(self):
        score = record_result(self.repo, ADA, subject='Algorithms', score=7, total=10)
        self.assertEqual(score.name, 'ada')

    def test_rejects_missing_subject(self):
        with self.assertRaises(ValidationError):
            record_result(self.repo, ADA, subject='  ', score=1, total=10)

    def test_rejects_missing_score_fields(self):
        with self.assertRaises(ValidationError) as ctx:
            record_result(self.repo, ADA, subject='OS', score=None, total=None)
        self.assertEqual(str(ctx.exception), 'Missing fields: score, totalQuestions')

    def test_rejects_impossible_scores(self):
        for score, total in ((11, 10), (-1, 10), (0, 0)):
            with self.subTest(score=score, total=total):
                with self.assertRaises(ValidationError):
                    record_result(self.repo, ADA, subject='OS', score=score, total=total)
        self.assertEqual(self.repo.store, {})


class TestTopScores(unittest.TestCase):

    def setUp(self):
        self.repo = FakeScoreRepository()
        for i, (subject, points) in enumerate((('OS', 3), ('OS', 9), ('DBMS', 5), ('OS', 7))):
            self.repo.save(Score(
                id=f's{i}', user_id='u', email='u@x.com', name='U', subject=subject,
                score=points, total=10, month_key='2025-10',
                created_at=datetime(2025, 10, 1 + i, tzinfo=timezone.utc),
            ))
        self.repo.save(Score(
            id='old', user_id='u', email='u@x.com', name='U', subject='OS',
            score=10, total=10, month_key='2025-09',
            created_at=datetime(2025, 9, 30, tzinfo=timezone.utc),
        ))

    def test_sorted_highest_first(self):
        scores = top_scores(self.repo)
        self.assertEqual([s.score for s in scores], [10, 9, 7, 5, 3])

    def test_limit(self):
        self.assertEqual(len(top_scores(self.repo, limit=2)), 2)

    def test_limit_is_clamped(self):
        self.assertEqual(len(top_scores(self.repo, limit=0)), 1)
        self.assertLessEqual(len(top_scores(self.repo, limit=MAX_LEADERBOARD_SIZE + 50)), MAX_LEADERBOARD_SIZE)

    def test_filter_by_month_and_subject(self):
        scores = top_scores(self.repo, month='2025-10', subject='OS')
        self.assertEqual([s.id for s in scores], ['s1', 's3', 's0'])


if __name__ == '__main__':
    unittest.main()
