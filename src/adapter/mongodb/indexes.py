"""MongoDB index management utilities.

Shared index creation with conflict resolution, used by each MongoXxxRepository.
"""

from logging import getLogger

from pymongo.errors import OperationFailure, PyMongoError

logger = getLogger(__name__)

# Server error codes for an index that exists in an incompatible shape
INDEX_OPTIONS_CONFLICT = 85
INDEX_KEY_SPECS_CONFLICT = 86


def _is_conflict(error: PyMongoError) -> bool:
    if isinstance(error, OperationFailure) and error.code in (INDEX_OPTIONS_CONFLICT, INDEX_KEY_SPECS_CONFLICT):
        return True
    # Older servers only say so in the message
    return "already exists" in str(error) or "Conflict" in str(error)


def create_index_safe(collection, keys: list, name: str, **kwargs) -> bool:
    """Create index with conflict resolution.

    Handles three conflict scenarios:
    - Same name but different key spec (schema migration)
    - Same key spec but different name (rename)
    - Same name and keys but a different `unique` flag (e.g. an email
      index created before uniqueness was enforced)

    In all cases, drops the conflicting index and recreates with the desired spec.
    """
    try:
        collection.create_index(keys, name=name, **kwargs)
        return True
    except PyMongoError as e:
        if not _is_conflict(e):
            raise
        return _resolve_conflict(collection, keys, name, **kwargs)


def _resolve_conflict(collection, keys: list, name: str, **kwargs) -> bool:
    """Drop the conflicting index and recreate it."""
    wanted_keys = dict(keys)
    wanted_unique = bool(kwargs.get('unique', False))

    for idx_name, idx_info in collection.index_information().items():
        # The primary key index can never be dropped
        if idx_name == '_id_':
            continue

        same_name = idx_name == name
        same_keys = dict(idx_info.get('key', [])) == wanted_keys
        same_unique = bool(idx_info.get('unique', False)) == wanted_unique

        if same_name and same_keys and same_unique:
            # Another process won the race and created it already
            return True

        if same_name or same_keys:
            logger.warning("Dropping conflicting index", extra={"index": idx_name, "wanted": name})
            collection.drop_index(idx_name)
            collection.create_index(keys, name=name, **kwargs)
            logger.info("Recreated index", extra={"index": name})
            return True

    logger.error("Failed to resolve index conflict", extra={"index": name})
    return False


def ensure_all_indexes(db) -> bool:
    """Ensure indexes for all collections. Called at app startup.

    The unique email index is what keeps concurrent signups from creating
    two users, so the caller logs a failure here as an error.
    """
    # Imported here; the repositories import this module for create_index_safe
    from adapter.mongodb.score_repository import MongoScoreRepository
    from adapter.mongodb.user_repository import MongoUserRepository

    results = [
        MongoUserRepository(db).ensure_indexes(),
        MongoScoreRepository(db).ensure_indexes(),
    ]
    return all(results)
