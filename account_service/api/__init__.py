"""
API layer for the account service.

Exposes the user account endpoints under /api/v1/users (register, login,
logout, refresh-token, current-user) and the error envelope handlers.
"""
