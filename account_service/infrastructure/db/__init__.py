from .mongo_connection import get_database, get_user_collection, ensure_user_indexes, close_mongo_connection
from .mongo_user_repository import MongoUserRepository

__all__ = [
    "get_database",
    "get_user_collection",
    "ensure_user_indexes",
    "close_mongo_connection",
    "MongoUserRepository",
]
