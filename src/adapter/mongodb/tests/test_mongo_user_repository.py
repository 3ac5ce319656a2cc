"""Tests for MongoUserRepository against a mocked collection."""

import unittest
from unittest.mock import MagicMock, patch
from datetime import datetime, timezone

from pymongo.errors import DuplicateKeyError, OperationFailure, PyMongoError, ServerSelectionTimeoutError

from adapter.mongodb.connection import USERS_COLLECTION_NAME
from adapter.mongodb.user_repository import MongoUserRepository
from domain.model.errors import DuplicateEmailError, StorageUnavailableError

NOW = datetime(2026, 1, 23, 12, 0, 0, tzinfo=timezone.utc)


def _doc(**overrides) -> dict:
    doc = {
        '_id': 'user-1',
        'name': 'Ada',
        'email': 'ada@x.com',
        'created_at': NOW,
        'updated_at': NOW,
    }
    doc.update(overrides)
    return doc


class MongoUserRepositoryTestCase(unittest.TestCase):

    def setUp(self):
        self.collection = MagicMock()
        self.db = MagicMock()
        self.db.__getitem__.return_value = self.collection
        self.repo = MongoUserRepository(self.db)

    def test_uses_users_collection(self):
        self.db.__getitem__.assert_called_with(USERS_COLLECTION_NAME)


class TestCreate(MongoUserRepositoryTestCase):

    @patch('adapter.mongodb.user_repository.uuid')
    def test_create_password_user(self, mock_uuid):
        mock_uuid.uuid4.return_value.hex = 'new-user-id'

        user = self.repo.create(name='Ada', email='Ada@X.com', password_hash='$2b$10$hash')

        doc = self.collection.insert_one.call_args[0][0]
        self.assertEqual(doc['_id'], 'new-user-id')
        self.assertEqual(doc['email'], 'ada@x.com')
        self.assertEqual(doc['password_hash'], '$2b$10$hash')
        self.assertNotIn('federated_id', doc)
        self.assertNotIn('avatar_url', doc)
        self.assertEqual(user.id, 'new-user-id')
        self.assertEqual(user.provider, 'email')

    def test_create_federated_user_omits_password(self):
        user = self.repo.create(
            name='Ada', email='ada@x.com', federated_id='sub-1', avatar_url='https://img/a.png',
        )

        doc = self.collection.insert_one.call_args[0][0]
        self.assertNotIn('password_hash', doc)
        self.assertEqual(doc['federated_id'], 'sub-1')
        self.assertEqual(user.avatar_url, 'https://img/a.png')
        self.assertEqual(user.provider, 'google')

    def test_duplicate_key_raises_duplicate_email(self):
        self.collection.insert_one.side_effect = DuplicateKeyError('E11000 duplicate key error')

        with self.assertRaises(DuplicateEmailError):
            self.repo.create(name='Ada', email='ada@x.com')

    def test_other_errors_raise_storage_unavailable(self):
        self.collection.insert_one.side_effect = ServerSelectionTimeoutError('no servers')

        with self.assertRaises(StorageUnavailableError):
            self.repo.create(name='Ada', email='ada@x.com')


class TestReads(MongoUserRepositoryTestCase):

    def test_get_by_email_normalizes_query(self):
        self.collection.find_one.return_value = _doc(password_hash='$2b$10$hash')

        user = self.repo.get_by_email('  ADA@x.com')

        self.collection.find_one.assert_called_once_with({'email': 'ada@x.com'})
        self.assertEqual(user.id, 'user-1')
        self.assertEqual(user.password_hash, '$2b$10$hash')

    def test_get_by_email_not_found(self):
        self.collection.find_one.return_value = None
        self.assertIsNone(self.repo.get_by_email('nobody@x.com'))

    def test_get_by_email_outage_is_not_none(self):
        self.collection.find_one.side_effect = PyMongoError('connection reset')

        with self.assertRaises(StorageUnavailableError):
            self.repo.get_by_email('ada@x.com')

    def test_empty_legacy_password_reads_as_absent(self):
        """Documents written with password: '' for Google users."""
        self.collection.find_one.return_value = _doc(password_hash='', federated_id='sub-1')

        user = self.repo.get_by_id('user-1')

        self.assertIsNone(user.password_hash)
        self.assertFalse(user.has_password)

    def test_get_by_id(self):
        self.collection.find_one.return_value = _doc()
        self.assertEqual(self.repo.get_by_id('user-1').email, 'ada@x.com')
        self.collection.find_one.assert_called_once_with({'_id': 'user-1'})


class TestUpdate(MongoUserRepositoryTestCase):

    def test_each_field_updated_only_when_absent(self):
        self.collection.find_one.return_value = _doc(avatar_url='https://img/a.png')

        user = self.repo.update('user-1', {'avatar_url': 'https://img/a.png'})

        query, update = self.collection.update_one.call_args[0]
        self.assertEqual(query['_id'], 'user-1')
        self.assertIn({'avatar_url': None}, query['$or'])
        self.assertIn({'avatar_url': {'$exists': False}}, query['$or'])
        self.assertEqual(update['$set']['avatar_url'], 'https://img/a.png')
        self.assertEqual(user.avatar_url, 'https://img/a.png')

    def test_one_conditional_write_per_field(self):
        self.collection.find_one.return_value = _doc()

        self.repo.update('user-1', {'name': 'Ada', 'federated_id': 'sub-1', 'avatar_url': ''})

        self.assertEqual(self.collection.update_one.call_count, 2)

    def test_rejects_protected_fields(self):
        with self.assertRaises(ValueError):
            self.repo.update('user-1', {'password_hash': 'x'})
        self.collection.update_one.assert_not_called()

    def test_missing_user_returns_none(self):
        self.collection.find_one.return_value = None
        self.assertIsNone(self.repo.update('missing', {'name': 'x'}))

    def test_outage_raises(self):
        self.collection.update_one.side_effect = PyMongoError('down')
        with self.assertRaises(StorageUnavailableError):
            self.repo.update('user-1', {'name': 'x'})


class TestEnsureIndexes(MongoUserRepositoryTestCase):

    def test_creates_unique_email_index(self):
        self.assertTrue(self.repo.ensure_indexes())

        calls = self.collection.create_index.call_args_list
        email_call = next(c for c in calls if c.kwargs['name'] == 'idx_users_email')
        self.assertEqual(email_call.args[0], [('email', 1)])
        self.assertTrue(email_call.kwargs['unique'])

    def test_index_failure_returns_false(self):
        self.collection.create_index.side_effect = OperationFailure('not authorized')
        self.assertFalse(self.repo.ensure_indexes())


if __name__ == '__main__':
    unittest.main()
