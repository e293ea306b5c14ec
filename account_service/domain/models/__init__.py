from .user import User, validate_user_identity

__all__ = ["User", "validate_user_identity"]
