from .register_user import RegisterUserUseCase
from .login_user import LoginUserUseCase
from .logout_user import LogoutUserUseCase
from .refresh_access_token import RefreshAccessTokenUseCase
from .get_current_user import GetCurrentUserUseCase

__all__ = [
    "RegisterUserUseCase",
    "LoginUserUseCase",
    "LogoutUserUseCase",
    "RefreshAccessTokenUseCase",
    "GetCurrentUserUseCase",
]
