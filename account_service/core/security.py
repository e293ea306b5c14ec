# Standard library imports
import time
from typing import Any, Dict

# External package imports
import jwt
import bcrypt
from jwt.exceptions import InvalidTokenError, DecodeError

# bcrypt only reads the first 72 bytes of a secret
BCRYPT_MAX_PASSWORD_BYTES = 72


def _password_bytes(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


def hash_password(plain_password: str) -> str:
    """
    Hash a plain password using bcrypt

    Args:
        plain_password: The plain text password to hash

    Returns:
        Hashed password string
    """
    salt = bcrypt.gensalt(rounds=10)
    hashed = bcrypt.hashpw(_password_bytes(plain_password), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password

    Args:
        plain_password: The plain text password to verify
        hashed_password: The hashed password to compare against

    Returns:
        True if passwords match, False otherwise
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            _password_bytes(plain_password),
            hashed_password.encode("utf-8")
        )
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_jwt_token(
    payload: Dict[str, Any],
    secret_key: str,
    expires_in_seconds: int,
    algorithm: str = "HS256",
) -> str:
    """
    Create a signed JWT token with expiration

    Args:
        payload: Dictionary containing token claims (e.g., sub, email)
        secret_key: Secret used to sign the token
        expires_in_seconds: Lifetime of the token
        algorithm: JWT signing algorithm

    Returns:
        Encoded JWT token string
    """
    issued_at = int(time.time())
    token_payload = {
        **payload,
        "iat": issued_at,
        "exp": issued_at + expires_in_seconds,
    }
    return jwt.encode(token_payload, secret_key, algorithm=algorithm)


def decode_jwt_token(token: str, secret_key: str, algorithm: str = "HS256") -> Dict[str, Any]:
    """
    Decode and validate a JWT token

    Args:
        token: The JWT token string to decode
        secret_key: Secret the token was signed with
        algorithm: Expected signing algorithm

    Returns:
        Dictionary containing decoded token claims

    Raises:
        ValueError: If token is invalid, tampered with or expired
    """
    try:
        return jwt.decode(token, secret_key, algorithms=[algorithm])
    except (InvalidTokenError, DecodeError) as e:
        raise ValueError(f"Invalid token: {str(e)}")
