from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .user_dto import UserResponse


class UserRegistrationRequest(BaseModel):
    """DTO for user registration request (form fields plus staged file paths)"""
    username: Optional[str] = None
    email: Optional[str] = None
    full_name: Optional[str] = None
    password: Optional[str] = None
    avatar_path: Optional[str] = None
    cover_image_path: Optional[str] = None


class UserLoginRequest(BaseModel):
    """DTO for user login request"""
    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class RefreshTokenRequest(BaseModel):
    """DTO for refresh-token request body"""
    model_config = ConfigDict(populate_by_name=True)

    refresh_token: Optional[str] = Field(default=None, alias="refreshToken")


class TokenPair(BaseModel):
    """Access/refresh token pair"""
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(serialization_alias="accessToken")
    refresh_token: str = Field(serialization_alias="refreshToken")


class LoginResponse(BaseModel):
    """DTO for successful login"""
    model_config = ConfigDict(populate_by_name=True)

    user: UserResponse
    access_token: str = Field(serialization_alias="accessToken")
    refresh_token: str = Field(serialization_alias="refreshToken")
