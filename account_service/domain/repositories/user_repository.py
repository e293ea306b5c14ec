from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional
from ..models.user import User


class UserRepository(ABC):
    """Repository interface - defines contract for user data access"""

    @abstractmethod
    async def find_by_identity(
        self,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Optional[User]:
        """Find a user matching the username OR the email"""
        pass

    @abstractmethod
    async def find_by_id(self, user_id: str, exclude: Iterable[str] = ()) -> Optional[User]:
        """Find user by ID, leaving the excluded document fields unset"""
        pass

    @abstractmethod
    async def create(self, fields: Dict[str, Any]) -> User:
        """Create a user; the plaintext password in fields is hashed before storage"""
        pass

    @abstractmethod
    async def update_fields(
        self,
        user_id: str,
        patch: Dict[str, Any],
        revalidate: bool = False,
    ) -> Optional[User]:
        """Apply a targeted patch; None values remove the field"""
        pass
