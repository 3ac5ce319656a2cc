"""Tests for MongoScoreRepository against a mocked collection."""

import unittest
from unittest.mock import MagicMock
from datetime import datetime, timezone

from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from adapter.mongodb.score_repository import MongoScoreRepository
from domain.model.errors import StorageUnavailableError
from domain.model.score import Score

CREATED = datetime(2025, 10, 5, tzinfo=timezone.utc)


def _score() -> Score:
    return Score(
        id='score-1', user_id='user-1', email='ada@x.com', name='Ada', subject='OS',
        score=8, total=10, month_key='2025-10', created_at=CREATED,
    )


class TestMongoScoreRepository(unittest.TestCase):

    def setUp(self):
        self.collection = MagicMock()
        db = MagicMock()
        db.__getitem__.return_value = self.collection
        self.repo = MongoScoreRepository(db)

    def test_save_inserts_document(self):
        self.repo.save(_score())

        doc = self.collection.insert_one.call_args[0][0]
        self.assertEqual(doc['_id'], 'score-1')
        self.assertEqual(doc['month_key'], '2025-10')
        self.assertEqual(doc['total'], 10)

    def test_save_failure(self):
        self.collection.insert_one.side_effect = PyMongoError('down')
        with self.assertRaises(StorageUnavailableError):
            self.repo.save(_score())

    def test_top_sorts_and_filters(self):
        cursor = self.collection.find.return_value
        cursor.sort.return_value.limit.return_value = [{
            '_id': 'score-1', 'user_id': 'user-1', 'email': 'ada@x.com', 'name': 'Ada',
            'subject': 'OS', 'score': 8, 'total': 10, 'month_key': '2025-10', 'created_at': CREATED,
        }]

        scores = self.repo.top(limit=5, month_key='2025-10', subject='OS')

        self.collection.find.assert_called_once_with({'month_key': '2025-10', 'subject': 'OS'})
        cursor.sort.assert_called_once_with([('score', DESCENDING), ('created_at', 1)])
        cursor.sort.return_value.limit.assert_called_once_with(5)
        self.assertEqual(scores, [_score()])

    def test_top_failure(self):
        self.collection.find.side_effect = PyMongoError('down')
        with self.assertRaises(StorageUnavailableError):
            self.repo.top()


if __name__ == '__main__':
    unittest.main()
