# Standard library imports
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

# External package imports
from motor.motor_asyncio import AsyncIOMotorCollection
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

# Local application imports
from ...core.exceptions import DuplicateUserError
from ...core.security import hash_password
from ...domain.repositories.user_repository import UserRepository
from ...domain.models.user import User
from ...domain.constants import UserFields
from .mongo_connection import get_user_collection


# Domain attribute name -> document field name
_FIELD_MAP: Dict[str, str] = {
    "username": UserFields.USERNAME,
    "email": UserFields.EMAIL,
    "full_name": UserFields.FULL_NAME,
    "password": UserFields.PASSWORD,
    "avatar": UserFields.AVATAR,
    "cover_image": UserFields.COVER_IMAGE,
    "refresh_token": UserFields.REFRESH_TOKEN,
}


def _to_object_id(user_id: str) -> Optional[ObjectId]:
    if not user_id:
        return None
    try:
        return ObjectId(user_id)
    except (InvalidId, ValueError, TypeError):
        return None


class MongoUserRepository(UserRepository):
    """MongoDB implementation of UserRepository"""

    def __init__(self, user_collection: Optional[AsyncIOMotorCollection] = None) -> None:
        self.user_collection = user_collection if user_collection is not None else get_user_collection()

    async def find_by_identity(
        self,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Optional[User]:
        """
        Find a user whose username OR email matches

        Args:
            username: Username to match (compared lower-cased)
            email: Email address to match

        Returns:
            User domain model if found, None otherwise
        """
        conditions = []
        if username:
            conditions.append({UserFields.USERNAME: username.lower()})
        if email:
            conditions.append({UserFields.EMAIL: email})
        if not conditions:
            return None

        try:
            document = await self.user_collection.find_one({"$or": conditions})
        except PyMongoError as e:
            raise RuntimeError(f"Error finding user by identity: {str(e)}")
        if document is None:
            return None
        return self._document_to_user(document)

    async def find_by_id(self, user_id: str, exclude: Iterable[str] = ()) -> Optional[User]:
        """
        Find user by ID

        Args:
            user_id: User ID to search for
            exclude: Document fields to leave out of the result

        Returns:
            User domain model if found, None otherwise
        """
        object_id = _to_object_id(user_id)
        if object_id is None:
            return None

        projection = {field: 0 for field in exclude} or None
        try:
            document = await self.user_collection.find_one(
                {UserFields.MONGO_ID: object_id}, projection
            )
        except PyMongoError as e:
            raise RuntimeError(f"Error finding user by ID: {str(e)}")
        if document is None:
            return None
        return self._document_to_user(document)

    async def create(self, fields: Dict[str, Any]) -> User:
        """
        Create a new user document

        The plaintext password is hashed here, right before persistence.

        Args:
            fields: Domain attribute values (username, email, full_name,
                password, avatar, cover_image)

        Returns:
            Created User domain model with ID set

        Raises:
            ValueError: If the fields violate User invariants
            DuplicateUserError: If username or email is already taken
        """
        password = fields.get("password")
        if not password:
            raise ValueError("Password is required")

        now = datetime.now(timezone.utc)
        document = self._patch_to_document({k: v for k, v in fields.items() if k != "password"})
        document[UserFields.PASSWORD] = hash_password(password)
        document.setdefault(UserFields.COVER_IMAGE, "")
        document[UserFields.CREATED_AT] = now
        document[UserFields.UPDATED_AT] = now

        # Run domain validations before touching the database
        self._document_to_user({**document, UserFields.MONGO_ID: ObjectId()})

        try:
            result = await self.user_collection.insert_one(document)
            new_document = await self.user_collection.find_one({UserFields.MONGO_ID: result.inserted_id})
        except DuplicateKeyError as e:
            raise DuplicateUserError(str(e))
        except PyMongoError as e:
            raise RuntimeError(f"Error creating user: {str(e)}")

        if new_document is None:
            raise RuntimeError("User was created but could not be retrieved")
        return self._document_to_user(new_document)

    async def update_fields(
        self,
        user_id: str,
        patch: Dict[str, Any],
        revalidate: bool = False,
    ) -> Optional[User]:
        """
        Apply a targeted patch to one user document

        Fields set to None are removed from the document. With
        revalidate=False the patch is written as-is, which lets the login
        flow store a refresh token without re-supplying the password.

        Args:
            user_id: ID of the user to patch
            patch: Domain attribute values to change
            revalidate: Re-run User invariants on the patched document first

        Returns:
            Updated User domain model, or None if no such user
        """
        object_id = _to_object_id(user_id)
        if object_id is None:
            return None

        document_patch = self._patch_to_document(patch)
        to_set = {k: v for k, v in document_patch.items() if v is not None}
        to_unset = {k: "" for k, v in document_patch.items() if v is None}
        to_set[UserFields.UPDATED_AT] = datetime.now(timezone.utc)

        try:
            if revalidate:
                current = await self.user_collection.find_one({UserFields.MONGO_ID: object_id})
                if current is None:
                    return None
                merged = {k: v for k, v in {**current, **to_set}.items() if k not in to_unset}
                self._document_to_user(merged)

            update: Dict[str, Any] = {"$set": to_set}
            if to_unset:
                update["$unset"] = to_unset
            document = await self.user_collection.find_one_and_update(
                {UserFields.MONGO_ID: object_id},
                update,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise DuplicateUserError(str(e))
        except PyMongoError as e:
            raise RuntimeError(f"Error updating user {user_id}: {str(e)}")

        if document is None:
            return None
        return self._document_to_user(document)

    def _patch_to_document(self, patch: Dict[str, Any]) -> Dict[str, Any]:
        document: Dict[str, Any] = {}
        for key, value in patch.items():
            if key not in _FIELD_MAP:
                raise ValueError(f"Unknown user field: {key}")
            if key == "password" and value is not None:
                value = hash_password(value)
            document[_FIELD_MAP[key]] = value
        return document

    def _document_to_user(self, document: dict) -> User:
        """
        Convert MongoDB document to User domain model

        Args:
            document: MongoDB document dictionary

        Returns:
            User domain model
        """
        if not document or UserFields.MONGO_ID not in document:
            raise ValueError("Invalid document: missing _id field")

        return User(
            id=str(document[UserFields.MONGO_ID]),
            username=document.get(UserFields.USERNAME, ""),
            email=document.get(UserFields.EMAIL, ""),
            full_name=document.get(UserFields.FULL_NAME, ""),
            avatar=document.get(UserFields.AVATAR, ""),
            cover_image=document.get(UserFields.COVER_IMAGE, ""),
            hashed_password=document.get(UserFields.PASSWORD),
            refresh_token=document.get(UserFields.REFRESH_TOKEN),
            created_at=document.get(UserFields.CREATED_AT),
            updated_at=document.get(UserFields.UPDATED_AT),
        )
