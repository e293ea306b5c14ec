from .api_response import ApiResponse, ApiErrorResponse
from .auth_dto import (
    UserRegistrationRequest,
    UserLoginRequest,
    RefreshTokenRequest,
    TokenPair,
    LoginResponse,
)
from .user_dto import UserResponse

__all__ = [
    "ApiResponse",
    "ApiErrorResponse",
    "UserRegistrationRequest",
    "UserLoginRequest",
    "RefreshTokenRequest",
    "TokenPair",
    "LoginResponse",
    "UserResponse",
]
