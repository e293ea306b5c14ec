# Standard library imports
from typing import Any, Optional

# External package imports
from fastapi import APIRouter, Cookie, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse

# Local application imports
from ...application.dto.api_response import ApiResponse
from ...application.dto.auth_dto import RefreshTokenRequest, UserLoginRequest, UserRegistrationRequest
from ...application.dto.user_dto import UserResponse
from ...application.use_cases.auth.register_user import RegisterUserUseCase, check_registration_fields
from ...application.use_cases.auth.login_user import LoginUserUseCase
from ...application.use_cases.auth.logout_user import LogoutUserUseCase
from ...application.use_cases.auth.refresh_access_token import RefreshAccessTokenUseCase
from ...core.config import get_settings
from ...di.container import get_container
from ...infrastructure.storage.temp_uploads import remove_temp_files, save_upload_to_temp
from .cookies import REFRESH_COOKIE, clear_token_cookies, set_token_cookies
from .dependencies import get_current_user


router = APIRouter(tags=["users"])


def _respond(status_code: int, data: Any, message: str) -> JSONResponse:
    body = ApiResponse.of(status_code, data, message)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True, mode="json"))


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register_user(
    username: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    full_name: Optional[str] = Form(None, alias="fullname"),
    password: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
) -> JSONResponse:
    """
    Register a new user

    Multipart form with username, email, fullname and password, a required
    avatar file and an optional coverImage file.

    Returns:
        201 envelope with the sanitized user
    """
    # Field errors win over upload size errors
    check_registration_fields(username, email, full_name, password)

    settings = get_settings()
    avatar_path = None
    cover_image_path = None
    try:
        avatar_path = await save_upload_to_temp(avatar, settings.upload_temp_dir, settings.upload_max_mb)
        cover_image_path = await save_upload_to_temp(cover_image, settings.upload_temp_dir, settings.upload_max_mb)

        register_use_case = get_container().get(RegisterUserUseCase)
        user = await register_use_case.execute(
            UserRegistrationRequest(
                username=username,
                email=email,
                full_name=full_name,
                password=password,
                avatar_path=avatar_path,
                cover_image_path=cover_image_path,
            )
        )
    finally:
        remove_temp_files([avatar_path, cover_image_path])

    return _respond(
        status.HTTP_201_CREATED,
        user.model_dump(by_alias=True, mode="json"),
        "User registered successfully",
    )


@router.post("/login")
async def login_user(request: UserLoginRequest) -> JSONResponse:
    """
    Authenticate by username or email and password

    Returns:
        200 envelope with {user, accessToken, refreshToken}; both tokens are
        also set as HttpOnly cookies
    """
    login_use_case = get_container().get(LoginUserUseCase)
    result = await login_use_case.execute(request)

    response = _respond(
        status.HTTP_200_OK,
        result.model_dump(by_alias=True, mode="json"),
        "User logged in successfully",
    )
    set_token_cookies(response, result.access_token, result.refresh_token)
    return response


@router.post("/logout")
async def logout_user(current_user: UserResponse = Depends(get_current_user)) -> JSONResponse:
    """Revoke the stored refresh token and clear both session cookies"""
    logout_use_case = get_container().get(LogoutUserUseCase)
    await logout_use_case.execute(current_user.id)

    response = _respond(status.HTTP_200_OK, {}, "User logged out")
    clear_token_cookies(response)
    return response


@router.post("/refresh-token")
async def refresh_access_token(
    body: Optional[RefreshTokenRequest] = None,
    refresh_cookie: Optional[str] = Cookie(None, alias=REFRESH_COOKIE),
) -> JSONResponse:
    """Exchange the refresh token (cookie, or JSON body) for a new token pair"""
    incoming = refresh_cookie or (body.refresh_token if body else None)

    refresh_use_case = get_container().get(RefreshAccessTokenUseCase)
    tokens = await refresh_use_case.execute(incoming)

    response = _respond(
        status.HTTP_200_OK,
        tokens.model_dump(by_alias=True, mode="json"),
        "Access token refreshed",
    )
    set_token_cookies(response, tokens.access_token, tokens.refresh_token)
    return response


@router.get("/current-user")
async def get_me(current_user: UserResponse = Depends(get_current_user)) -> JSONResponse:
    """Return the authenticated user"""
    return _respond(
        status.HTTP_200_OK,
        current_user.model_dump(by_alias=True, mode="json"),
        "Current user fetched successfully",
    )
