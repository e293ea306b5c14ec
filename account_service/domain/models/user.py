from dataclasses import dataclass
from datetime import datetime
from typing import Optional


def validate_user_identity(username: str, email: str, full_name: str) -> None:
    """
    Business validations shared by the User entity and the registration
    pre-check. Raises ValueError with a client-safe message.
    """
    if not username or not username.strip():
        raise ValueError("Username is required")
    if username != username.lower():
        raise ValueError("Username must be lowercase")
    if not email or "@" not in email:
        raise ValueError("Invalid email format")
    if not full_name or not full_name.strip():
        raise ValueError("Full name is required")


@dataclass
class User:
    """Pure domain model for User entity - no external dependencies"""
    id: Optional[str]
    username: str
    email: str
    full_name: str
    avatar: str = ""
    cover_image: str = ""
    hashed_password: Optional[str] = None
    refresh_token: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        validate_user_identity(self.username, self.email, self.full_name)
