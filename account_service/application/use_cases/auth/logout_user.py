# Standard library imports
import logging

# Local application imports
from ....domain.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class LogoutUserUseCase:
    """Use case for revoking the stored refresh token of a user"""

    def __init__(self, user_repository: UserRepository) -> None:
        self.user_repository = user_repository

    async def execute(self, user_id: str) -> None:
        """
        Clear the user's refresh token. Calling it again is a no-op.

        Args:
            user_id: ID of the authenticated user
        """
        await self.user_repository.update_fields(user_id, {"refresh_token": None}, revalidate=False)
        logger.info(f"User {user_id} logged out")
