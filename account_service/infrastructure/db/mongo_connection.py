# Standard library imports
import logging
from typing import Optional

# External package imports
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase, AsyncIOMotorCollection
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

# Local application imports
from ...core.config import get_settings
from ...domain.constants import UserFields

logger = logging.getLogger(__name__)

# Global MongoDB connection instances (singleton pattern)
_mongo_client: Optional[AsyncIOMotorClient] = None
_mongo_database: Optional[AsyncIOMotorDatabase] = None


def get_database() -> AsyncIOMotorDatabase:
    """
    Get MongoDB database instance (singleton pattern)

    Returns:
        MongoDB database instance
    """
    global _mongo_client, _mongo_database

    if _mongo_database is not None:
        return _mongo_database

    settings = get_settings()
    _mongo_client = AsyncIOMotorClient(
        settings.mongo_uri,
        serverSelectionTimeoutMS=10000,
        tz_aware=True,
    )
    _mongo_database = _mongo_client[settings.mongo_database_name]
    logger.info(f"MongoDB client created for database '{settings.mongo_database_name}'")
    return _mongo_database


def get_user_collection() -> AsyncIOMotorCollection:
    """
    Get users collection from MongoDB

    Returns:
        MongoDB collection for users
    """
    return get_database()["users"]


async def ensure_user_indexes(user_collection: Optional[AsyncIOMotorCollection] = None) -> bool:
    """
    Create the unique indexes that back username/email uniqueness.

    Failures are logged and reported, not raised, so the API can still start
    while MongoDB is unreachable.

    Returns:
        True if the indexes exist after the call, False otherwise
    """
    collection = user_collection if user_collection is not None else get_user_collection()
    try:
        await collection.create_index([(UserFields.USERNAME, ASCENDING)], unique=True)
        await collection.create_index([(UserFields.EMAIL, ASCENDING)], unique=True)
    except PyMongoError as e:
        logger.warning(f"Could not ensure user indexes: {e}")
        return False
    return True


def close_mongo_connection() -> None:
    """Close the MongoDB client (call on application shutdown)."""
    global _mongo_client, _mongo_database

    if _mongo_client is not None:
        _mongo_client.close()
        logger.info("Closed MongoDB client")
    _mongo_client = None
    _mongo_database = None
