"""
Exception hierarchy for the account service.

Every error that may reach a client inherits from ApiError and carries an
HTTP status code plus a user-facing message. The API layer renders them in
the standard error envelope; internal details never cross that boundary.
"""

# -----------------------------------------------------------------------------
# Standard library
# -----------------------------------------------------------------------------
from typing import Any, List, Optional


# -----------------------------------------------------------------------------
# Base
# -----------------------------------------------------------------------------


class ApiError(Exception):
    """Base exception for all client-facing errors."""

    status_code: int = 500
    default_message: str = "Something went wrong"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[Any]] = None,
    ):
        self.message = message or self.default_message
        super().__init__(self.message)
        self.errors = errors or []


# -----------------------------------------------------------------------------
# 4xx
# -----------------------------------------------------------------------------


class ValidationError(ApiError):
    """Raised when request input is missing or malformed."""
    status_code = 400
    default_message = "Invalid request"


class UnauthorizedError(ApiError):
    """Raised when credentials or tokens are rejected."""
    status_code = 401
    default_message = "Unauthorized request"


class NotFoundError(ApiError):
    """Raised when a requested user does not exist."""
    status_code = 404
    default_message = "Resource not found"


class ConflictError(ApiError):
    """Raised when a unique field is already taken."""
    status_code = 409
    default_message = "Resource already exists"


class PayloadTooLargeError(ApiError):
    """Raised when an uploaded file exceeds the configured size limit."""
    status_code = 413
    default_message = "File too large"


# -----------------------------------------------------------------------------
# 5xx
# -----------------------------------------------------------------------------


class InternalError(ApiError):
    """Raised for failures whose cause must not be shown to the client."""
    status_code = 500


# -----------------------------------------------------------------------------
# Internal (never rendered directly)
# -----------------------------------------------------------------------------


class TokenIssuanceError(Exception):
    """Raised by the token issuer when a token pair cannot be produced."""
    pass


class DuplicateUserError(Exception):
    """Raised by the user store when a unique index rejects an insert."""
    pass
