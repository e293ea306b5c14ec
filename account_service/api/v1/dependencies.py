# Standard library imports
from typing import Optional

# External package imports
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

# Local application imports
from ...application.use_cases.auth.get_current_user import GetCurrentUserUseCase
from ...application.dto.user_dto import UserResponse
from ...core.exceptions import UnauthorizedError
from ...di.container import get_container
from .cookies import ACCESS_COOKIE


security_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
) -> UserResponse:
    """
    FastAPI dependency to get current authenticated user

    The access token is read from the accessToken cookie first, then from
    an Authorization: Bearer header.

    Raises:
        UnauthorizedError: If no token was sent, or it is invalid
    """
    token = request.cookies.get(ACCESS_COOKIE)
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        raise UnauthorizedError("Unauthorized request")

    container = get_container()
    get_current_user_use_case = container.get(GetCurrentUserUseCase)
    return await get_current_user_use_case.execute(token)
