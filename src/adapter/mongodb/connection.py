import os
import logging
from pymongo import MongoClient
from pymongo.errors import ConnectionFailure, PyMongoError

logger = logging.getLogger(__name__)

# Suppress verbose PyMongo logs
# Set pymongo logger to WARNING to reduce noise from driver-level logs
pymongo_logger = logging.getLogger('pymongo')
pymongo_logger.setLevel(logging.WARNING)

# Database and collection names; the connection string is read per attempt
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'quizauth')
USERS_COLLECTION_NAME = 'users'
SCORES_COLLECTION_NAME = 'scores'

_client_cache = None
_connection_attempted = False


def close_client():
    """Close the pooled client. Called once on application shutdown."""
    global _client_cache
    if _client_cache is not None:
        _client_cache.close()
        logger.info("[MONGODB] Connection pool closed")
    _client_cache = None


def get_mongodb_client() -> MongoClient | None:
    """Get MongoDB client with connection caching and reconnection logic.

    Connection strategy:
    1. Return cached client if healthy (ping succeeds)
    2. Otherwise build a new client; every call retries, so an outage
       (including one at startup) clears once the server is back
    3. Server selection timeout bounds how long a failed attempt takes

    Returns:
        MongoDB client or None if connection fails
    """
    global _client_cache, _connection_attempted

    # Fast path: return cached client if healthy
    if _client_cache:
        try:
            _client_cache.admin.command('ping')
            return _client_cache
        except PyMongoError:
            _client_cache.close()
            _client_cache = None
            logger.debug("[MONGODB] Cached client failed ping, attempting reconnection...")

    mongo_url = os.getenv('MONGO_URL')
    if not mongo_url:
        logger.error("[MONGODB] MONGO_URL not configured.")
        return None

    client = None
    try:
        client = MongoClient(
            mongo_url,
            serverSelectionTimeoutMS=5000,  # 5s timeout for server selection
            connectTimeoutMS=5000,  # 5s timeout for initial connection
            socketTimeoutMS=30000,  # 30s timeout for operations
            maxPoolSize=10,
            minPoolSize=0,   # Don't maintain idle connections
            maxIdleTimeMS=30000,  # Close idle connections after 30s
            waitQueueTimeoutMS=10000,  # Wait up to 10s for available connection
            retryWrites=True,  # Retry writes on network errors
            retryReads=True,   # Retry reads on network errors
        )
        client.admin.command('ping')  # Verify connection works
    except (ConnectionFailure, PyMongoError) as e:
        if client is not None:
            client.close()
        logger.error("[MONGODB] Connection failed", extra={"error": str(e)[:200]})
        return None

    # Log only on first connection
    if not _connection_attempted:
        logger.info(f"[MONGODB] Connected successfully to {DATABASE_NAME}")
    _connection_attempted = True

    _client_cache = client
    return client
