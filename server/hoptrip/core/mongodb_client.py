"""
MongoDB Client - Singleton Pattern
===================================

Purpose:
- Provides a single MongoDB connection instance across the application
- Connection pooling is left to the pymongo driver
- Creates the indexes the users/trips collections rely on

Usage:
    from hoptrip.core.mongodb_client import get_mongodb_client

    client = get_mongodb_client(Config)
    trips = client.get_collection("trips")
    trip = trips.find_one({"_id": ObjectId(trip_id)})
"""

from typing import Optional
from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.errors import ConfigurationError, PyMongoError
import logging

logger = logging.getLogger(__name__)


class MongoDBClient:
    """
    Singleton MongoDB client for application-wide use.

    Features:
    - Connection pooling (configurable via Config)
    - Health checking
    - Graceful degradation: an unreachable server does not stop the app,
      individual queries fail instead
    """

    _instance: Optional['MongoDBClient'] = None
    _client: Optional[MongoClient] = None
    _db: Optional[Database] = None

    def __new__(cls, config=None):
        """Ensure only one instance exists (Singleton pattern)."""
        if cls._instance is None:
            cls._instance = super(MongoDBClient, cls).__new__(cls)
        return cls._instance

    def __init__(self, config=None):
        """Initialize MongoDB client on first instantiation."""
        if self._client is None:
            self._config = config
            self._connect()

    def _connect(self):
        """
        Create the MongoClient. pymongo connects lazily, so this only fails on
        a malformed URI; an unreachable server surfaces on the first query.

        Config:
        - MONGODB_URI: Full connection string
        - MONGODB_DB_NAME: Database name
        - MONGODB_MAX_POOL_SIZE / MONGODB_MIN_POOL_SIZE: pool bounds
        - MONGODB_SERVER_SELECTION_TIMEOUT_MS / MONGODB_CONNECT_TIMEOUT_MS
        """
        config = self._config
        mongodb_uri = config.MONGODB_URI
        db_name = config.MONGODB_DB_NAME

        masked_uri = mongodb_uri.split('@')[-1] if '@' in mongodb_uri else mongodb_uri
        logger.info(f"Connecting to MongoDB: {masked_uri}")

        try:
            self._client = MongoClient(
                mongodb_uri,
                maxPoolSize=config.MONGODB_MAX_POOL_SIZE,
                minPoolSize=config.MONGODB_MIN_POOL_SIZE,
                serverSelectionTimeoutMS=config.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
                connectTimeoutMS=config.MONGODB_CONNECT_TIMEOUT_MS,
                retryWrites=True,
                tz_aware=True,
                retryReads=True
            )
            self._db = self._client[db_name]
        except ConfigurationError as e:
            logger.error(f"MongoDB configuration error: {e}")
            self._client = None
            self._db = None
            raise

    def get_database(self) -> Database:
        """Get MongoDB database instance."""
        return self._db

    def get_collection(self, collection_name: str):
        """
        Get a specific collection from the database.

        Args:
            collection_name: Name of the collection ("users", "trips")
        """
        return self._db[collection_name]

    def is_healthy(self) -> bool:
        """
        Check if MongoDB connection is healthy.

        Returns:
            True if the server answers a ping, False otherwise
        """
        if self._client is None:
            return False

        try:
            self._client.admin.command('ping')
            return True
        except PyMongoError as e:
            logger.warning(f"MongoDB health check failed: {e}")
            return False

    def close(self):
        """Close MongoDB connection. Should be called on application shutdown."""
        if self._client:
            logger.info("Closing MongoDB connection...")
            self._client.close()
            self._client = None
            self._db = None
            MongoDBClient._instance = None

    def create_indexes(self):
        """
        Create indexes for all collections.

        Collections:
        - users: googleId (unique), email (unique), isActive
        - trips: host, travelers, (visibility, createdAt), tags, status
        """
        db = self.get_database()
        logger.info("Creating MongoDB indexes...")

        users = db["users"]
        users.create_index("googleId", unique=True, name="idx_google_id")
        users.create_index("email", unique=True, name="idx_email")
        users.create_index("isActive", name="idx_is_active")

        trips = db["trips"]
        trips.create_index("host", name="idx_host")
        trips.create_index("travelers", name="idx_travelers")
        trips.create_index(
            [("visibility", ASCENDING), ("createdAt", DESCENDING)],
            name="idx_visibility_created_at"
        )
        trips.create_index("tags", name="idx_tags")
        trips.create_index("status", name="idx_status")

        logger.info("MongoDB indexes created/verified")


def get_mongodb_client(config=None) -> MongoDBClient:
    """
    Get the singleton MongoDB client instance.

    The first call must pass the application Config; later calls may omit it.
    """
    if MongoDBClient._instance is None and config is None:
        raise RuntimeError("MongoDB client not initialized: pass the application Config")
    return MongoDBClient(config)
