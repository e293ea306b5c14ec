from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ...domain.models.user import User


class UserResponse(BaseModel):
    """DTO for user response (no password, no refresh token)"""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(serialization_alias="_id")
    username: str
    email: str
    full_name: str = Field(serialization_alias="fullname")
    avatar: str = ""
    cover_image: str = Field(default="", serialization_alias="coverImage")
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, serialization_alias="updatedAt")

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id or "",
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            avatar=user.avatar,
            cover_image=user.cover_image,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
