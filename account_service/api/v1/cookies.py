"""HTTP cookie helpers for session token transport."""

from typing import Optional

from fastapi import Response

from ...core.config import Settings, get_settings

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"
COOKIE_PATH = "/"


def set_token_cookies(
    response: Response,
    access_token: str,
    refresh_token: str,
    settings: Optional[Settings] = None,
) -> None:
    settings = settings or get_settings()

    response.set_cookie(
        key=ACCESS_COOKIE,
        value=access_token,
        httponly=True,
        secure=settings.cookie_secure,
        max_age=settings.access_token_expire_minutes * 60,
        path=COOKIE_PATH,
    )
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=refresh_token,
        httponly=True,
        secure=settings.cookie_secure,
        max_age=settings.refresh_token_expire_days * 24 * 60 * 60,
        path=COOKIE_PATH,
    )


def clear_token_cookies(response: Response, settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()

    for key in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(
            key=key,
            path=COOKIE_PATH,
            secure=settings.cookie_secure,
            httponly=True,
        )
