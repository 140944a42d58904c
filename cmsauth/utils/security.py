from fastapi import Response

from cmsauth.settings import settings


def set_auth_tokens(response: Response, access_token: str, refresh_token: str):
    """
    Set session tokens on response.

    Cookie mode (USE_COOKIE_AUTH=true):
        Sets HttpOnly cookies for access and refresh tokens.
        The access cookie lives ACCESS_COOKIE_MAX_AGE seconds (1 hour),
        the refresh cookie REFRESH_COOKIE_MAX_AGE seconds (30 days).

    Bearer mode (USE_COOKIE_AUTH=false):
        No cookies. The forwarded backend body already carries the tokens.
    """
    if not settings.USE_COOKIE_AUTH:
        return

    response.set_cookie(
        key=settings.COOKIE_ACCESS_NAME,
        value=access_token,
        httponly=settings.COOKIE_HTTPONLY,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
        domain=settings.COOKIE_DOMAIN,
        path="/",
        max_age=settings.ACCESS_COOKIE_MAX_AGE,
    )
    response.set_cookie(
        key=settings.COOKIE_REFRESH_NAME,
        value=refresh_token,
        httponly=settings.COOKIE_HTTPONLY,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
        domain=settings.COOKIE_DOMAIN,
        path="/",
        max_age=settings.REFRESH_COOKIE_MAX_AGE,
    )


def clear_auth_tokens(response: Response):
    """Clear session cookies on logout."""
    if settings.USE_COOKIE_AUTH:
        response.delete_cookie(settings.COOKIE_ACCESS_NAME, path="/", domain=settings.COOKIE_DOMAIN)
        response.delete_cookie(settings.COOKIE_REFRESH_NAME, path="/", domain=settings.COOKIE_DOMAIN)
