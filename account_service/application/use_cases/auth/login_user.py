# Standard library imports
import logging

# Local application imports
from ....core.exceptions import (
    InternalError,
    NotFoundError,
    TokenIssuanceError,
    UnauthorizedError,
    ValidationError,
)
from ....core.security import verify_password
from ....domain.repositories.user_repository import UserRepository
from ....domain.constants import UserFields
from ...services.token_issuer import TokenIssuer
from ...dto.auth_dto import UserLoginRequest, LoginResponse
from ...dto.user_dto import UserResponse

logger = logging.getLogger(__name__)


def _blank(value) -> bool:
    return value is None or value.strip() == ""


class LoginUserUseCase:
    """Use case for authenticating a user and issuing session tokens"""

    def __init__(self, user_repository: UserRepository, token_issuer: TokenIssuer) -> None:
        self.user_repository = user_repository
        self.token_issuer = token_issuer

    async def execute(self, request: UserLoginRequest) -> LoginResponse:
        """
        Authenticate user by username or email and issue a token pair

        Args:
            request: Login request with username and/or email plus password

        Returns:
            LoginResponse with the sanitized user and both tokens

        Raises:
            ValidationError: If no identity or no password was given
            NotFoundError: If no user matches the identity
            UnauthorizedError: If the password does not match
            InternalError: If tokens cannot be issued
        """
        if _blank(request.username) and _blank(request.email):
            raise ValidationError("Username or email is required")
        if not request.password:
            raise ValidationError("Password is required")

        user = await self.user_repository.find_by_identity(
            username=None if _blank(request.username) else request.username.strip(),
            email=None if _blank(request.email) else request.email.strip(),
        )
        if user is None:
            raise NotFoundError("User does not exist")

        if not verify_password(request.password, user.hashed_password or ""):
            logger.info(f"Rejected login for user {user.id}: invalid password")
            raise UnauthorizedError("Invalid user credentials")

        try:
            tokens = await self.token_issuer.issue_tokens(user.id)
        except TokenIssuanceError as e:
            logger.error(f"Token issuance failed on login: {e}", exc_info=True)
            raise InternalError("Something went wrong while generating refresh and access token")

        logged_in_user = await self.user_repository.find_by_id(user.id, exclude=UserFields.SENSITIVE)
        if logged_in_user is None:
            raise InternalError()

        logger.info(f"User {user.id} logged in")
        return LoginResponse(
            user=UserResponse.from_user(logged_in_user),
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
        )
