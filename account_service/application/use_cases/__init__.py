from .auth import (
    RegisterUserUseCase,
    LoginUserUseCase,
    LogoutUserUseCase,
    RefreshAccessTokenUseCase,
    GetCurrentUserUseCase,
)

__all__ = [
    "RegisterUserUseCase",
    "LoginUserUseCase",
    "LogoutUserUseCase",
    "RefreshAccessTokenUseCase",
    "GetCurrentUserUseCase",
]
