# Local application imports
from ....core.exceptions import UnauthorizedError
from ....domain.repositories.user_repository import UserRepository
from ....domain.constants import UserFields
from ...services.token_issuer import TokenIssuer
from ...dto.user_dto import UserResponse


class GetCurrentUserUseCase:
    """Use case for getting current authenticated user from an access token"""

    def __init__(self, user_repository: UserRepository, token_issuer: TokenIssuer) -> None:
        self.user_repository = user_repository
        self.token_issuer = token_issuer

    async def execute(self, token: str) -> UserResponse:
        """
        Get current user from access token

        Args:
            token: JWT access token

        Returns:
            UserResponse with user information

        Raises:
            UnauthorizedError: If token is invalid or user not found
        """
        try:
            payload = self.token_issuer.decode_access_token(token)
        except ValueError:
            raise UnauthorizedError("Invalid access token")

        user = await self.user_repository.find_by_id(payload["sub"], exclude=UserFields.SENSITIVE)
        if user is None:
            raise UnauthorizedError("Invalid access token")

        return UserResponse.from_user(user)
