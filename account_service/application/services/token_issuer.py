"""Access/refresh token issuance."""
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict

from ...core.config import Settings
from ...core.exceptions import TokenIssuanceError
from ...core.security import create_jwt_token, decode_jwt_token
from ...domain.constants import UserFields
from ...domain.repositories.user_repository import UserRepository
from ..dto.auth_dto import TokenPair

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(frozen=True)
class TokenSettings:
    """Signing secrets and expiry policy for issued tokens"""
    access_token_secret: str
    access_token_expire_minutes: int
    refresh_token_secret: str
    refresh_token_expire_days: int
    algorithm: str = "HS256"

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenSettings":
        return cls(
            access_token_secret=settings.access_token_secret,
            access_token_expire_minutes=settings.access_token_expire_minutes,
            refresh_token_secret=settings.refresh_token_secret,
            refresh_token_expire_days=settings.refresh_token_expire_days,
            algorithm=settings.jwt_algorithm,
        )


class TokenIssuer:
    """
    Issues access/refresh token pairs and mirrors the refresh token onto the
    user record.
    """

    def __init__(self, user_repository: UserRepository, token_settings: TokenSettings) -> None:
        self.user_repository = user_repository
        self.token_settings = token_settings

    async def issue_tokens(self, user_id: str) -> TokenPair:
        """
        Issue a new token pair for a user and persist the refresh token

        Args:
            user_id: ID of the user the tokens are bound to

        Returns:
            TokenPair with the signed access and refresh tokens

        Raises:
            TokenIssuanceError: If the user cannot be loaded, signing fails
                or the refresh token cannot be stored
        """
        try:
            user = await self.user_repository.find_by_id(
                user_id, exclude=(UserFields.PASSWORD, UserFields.REFRESH_TOKEN)
            )
            if user is None:
                raise TokenIssuanceError(f"User {user_id} not found")

            access_token = self._sign_access_token({
                "sub": user.id,
                UserFields.EMAIL: user.email,
                UserFields.USERNAME: user.username,
                UserFields.FULL_NAME: user.full_name,
            })
            refresh_token = self._sign_refresh_token(user.id)

            # Targeted write: the password is not re-supplied on login
            updated = await self.user_repository.update_fields(
                user.id, {"refresh_token": refresh_token}, revalidate=False
            )
            if updated is None:
                raise TokenIssuanceError(f"User {user_id} disappeared while storing refresh token")
        except TokenIssuanceError:
            raise
        except Exception as e:
            raise TokenIssuanceError(f"Could not issue tokens for user {user_id}: {e}") from e

        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    def decode_access_token(self, token: str) -> Dict[str, Any]:
        """Verify an access token and return its claims; raises ValueError"""
        return self._decode(token, self.token_settings.access_token_secret, ACCESS_TOKEN_TYPE)

    def decode_refresh_token(self, token: str) -> Dict[str, Any]:
        """Verify a refresh token and return its claims; raises ValueError"""
        return self._decode(token, self.token_settings.refresh_token_secret, REFRESH_TOKEN_TYPE)

    def _sign_access_token(self, claims: Dict[str, Any]) -> str:
        return create_jwt_token(
            {**claims, "type": ACCESS_TOKEN_TYPE},
            self.token_settings.access_token_secret,
            self.token_settings.access_token_expire_minutes * 60,
            algorithm=self.token_settings.algorithm,
        )

    def _sign_refresh_token(self, user_id: str) -> str:
        return create_jwt_token(
            {"sub": user_id, "type": REFRESH_TOKEN_TYPE, "jti": uuid.uuid4().hex},
            self.token_settings.refresh_token_secret,
            self.token_settings.refresh_token_expire_days * 24 * 60 * 60,
            algorithm=self.token_settings.algorithm,
        )

    def _decode(self, token: str, secret: str, expected_type: str) -> Dict[str, Any]:
        payload = decode_jwt_token(token, secret, algorithm=self.token_settings.algorithm)
        if payload.get("type") != expected_type:
            raise ValueError(f"Invalid token: expected {expected_type} token")
        if not payload.get("sub"):
            raise ValueError("Invalid token: missing subject")
        return payload
