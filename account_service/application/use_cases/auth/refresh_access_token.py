# Standard library imports
import logging
from typing import Optional

# Local application imports
from ....core.exceptions import InternalError, TokenIssuanceError, UnauthorizedError
from ....domain.repositories.user_repository import UserRepository
from ...services.token_issuer import TokenIssuer
from ...dto.auth_dto import TokenPair

logger = logging.getLogger(__name__)


class RefreshAccessTokenUseCase:
    """Use case for exchanging a valid refresh token for a new token pair"""

    def __init__(self, user_repository: UserRepository, token_issuer: TokenIssuer) -> None:
        self.user_repository = user_repository
        self.token_issuer = token_issuer

    async def execute(self, incoming_refresh_token: Optional[str]) -> TokenPair:
        """
        Rotate the session tokens

        The presented token must match the one stored on the user, so each
        refresh token can be used once.

        Raises:
            UnauthorizedError: If the token is missing, invalid, expired or used
            InternalError: If new tokens cannot be issued
        """
        if not incoming_refresh_token:
            raise UnauthorizedError("Unauthorized request")

        try:
            payload = self.token_issuer.decode_refresh_token(incoming_refresh_token)
        except ValueError:
            raise UnauthorizedError("Invalid refresh token")

        user = await self.user_repository.find_by_id(payload["sub"])
        if user is None:
            raise UnauthorizedError("Invalid refresh token")

        if incoming_refresh_token != user.refresh_token:
            logger.info(f"Rejected stale refresh token for user {user.id}")
            raise UnauthorizedError("Refresh token is expired or used")

        try:
            return await self.token_issuer.issue_tokens(user.id)
        except TokenIssuanceError as e:
            logger.error(f"Token issuance failed on refresh: {e}", exc_info=True)
            raise InternalError("Something went wrong while generating refresh and access token")
