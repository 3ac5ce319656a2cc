"""MongoDB implementation of UserRepository."""

import uuid
from datetime import datetime, timezone
from logging import getLogger
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb.connection import USERS_COLLECTION_NAME
from domain.model.errors import DuplicateEmailError, StorageUnavailableError
from domain.model.user import ENRICHABLE_FIELDS, User, normalize_email

logger = getLogger(__name__)


def _absent(field: str) -> dict:
    """Filter matching documents where `field` has no usable value."""
    return {'$or': [{field: {'$exists': False}}, {field: None}, {field: ''}]}


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('email', 1)], 'idx_users_email', unique=True)
            create_index_safe(self.collection, [('created_at', -1)], 'idx_users_created_at')
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            name=doc['name'],
            email=doc['email'],
            created_at=doc['created_at'],
            updated_at=doc.get('updated_at', doc['created_at']),
            password_hash=doc.get('password_hash') or None,
            federated_id=doc.get('federated_id') or None,
            avatar_url=doc.get('avatar_url') or None,
        )

    def create(
        self,
        name: str,
        email: str,
        password_hash: str | None = None,
        federated_id: str | None = None,
        avatar_url: str | None = None,
    ) -> User:
        """Insert a new user; the unique email index arbitrates concurrent creates."""
        email = normalize_email(email)
        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': user_id,
            'name': name,
            'email': email,
            'created_at': now,
            'updated_at': now,
        }
        # Absent credentials are omitted rather than stored as empty strings
        if password_hash:
            user_doc['password_hash'] = password_hash
        if federated_id:
            user_doc['federated_id'] = federated_id
        if avatar_url:
            user_doc['avatar_url'] = avatar_url

        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError as e:
            logger.warning("User creation failed: email already exists", extra={"email": email})
            raise DuplicateEmailError() from e
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": email, "error": str(e)})
            raise StorageUnavailableError("Failed to create user") from e

        user = self._to_domain(user_doc)
        logger.info("User created", extra={"userId": user_id, "email": email, "provider": user.provider})
        return user

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        email = normalize_email(email)
        try:
            doc = self.collection.find_one({'email': email})
        except PyMongoError as e:
            logger.error("Failed to get user by email", extra={"email": email, "error": str(e)})
            raise StorageUnavailableError("Failed to look up user") from e
        return self._to_domain(doc) if doc else None

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise StorageUnavailableError("Failed to look up user") from e
        return self._to_domain(doc) if doc else None

    def update(self, user_id: str, fields: dict[str, str]) -> User | None:
        """Enrich a user in place without overwriting populated fields.

        Each field is written by its own conditional update, so a concurrent
        writer that populated the field first always wins.
        """
        unknown = set(fields) - set(ENRICHABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")

        try:
            for field, value in fields.items():
                if not value:
                    continue
                result = self.collection.update_one(
                    {'_id': user_id, **_absent(field)},
                    {'$set': {field: value, 'updated_at': datetime.now(timezone.utc)}},
                )
                if result.modified_count:
                    logger.debug("Enriched user field", extra={"userId": user_id, "field": field})
            doc = self.collection.find_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"userId": user_id, "error": str(e)})
            raise StorageUnavailableError("Failed to update user") from e
        return self._to_domain(doc) if doc else None
