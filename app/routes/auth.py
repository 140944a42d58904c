import logging

from fastapi import APIRouter, Body, Cookie, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from cmsauth.dependencies import get_directus_client
from cmsauth.errors import (
    BackendError,
    DomainNotAllowed,
    InvalidCredentials,
    MissingToken,
    RefreshRejected,
)
from cmsauth.models.tokens import LoginFailure, LoginSuccess
from cmsauth.services.directus import DirectusClient
from cmsauth.services.session import REFRESH_REJECTED_STATUSES
from cmsauth.settings import settings
from cmsauth.utils.security import set_auth_tokens, clear_auth_tokens

from app.db import get_db_session
from app.schemas.auth import LoginRequest, LocalLoginResponse, RefreshRequest, UserResponse
from app.services.auth import authenticate_user, is_allowed_domain
from app.settings import settings as app_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def get_refresh_token(
    body: RefreshRequest | None,
    cookie_value: str | None,
) -> str | None:
    """
    Extract refresh token based on auth mode.
    Cookie mode: returns cookie value.
    Bearer mode: returns token from request body.
    """
    if app_settings.USE_COOKIE_AUTH:
        return cookie_value
    return body.refresh_token if body else None


def _forward_tokens(result: LoginSuccess) -> JSONResponse:
    """
    Forward the backend body verbatim and mirror the tokens into cookies.
    """
    response = JSONResponse(content=result.body, status_code=200)
    set_auth_tokens(response, result.tokens.access_token, result.tokens.refresh_token)
    return response


@router.post("", response_model=LocalLoginResponse)
async def local_login(data: LoginRequest, session: AsyncSession = Depends(get_db_session)):
    """
    Login against the locally provisioned user list.
    """
    if not is_allowed_domain(data.email):
        raise DomainNotAllowed()

    user = await authenticate_user(session, data.email, data.password)

    if not user:
        raise InvalidCredentials()

    return LocalLoginResponse(user=UserResponse(email=user.email, name=user.name))


@router.post("/proxy-login")
async def proxy_login(data: LoginRequest, client: DirectusClient = Depends(get_directus_client)):
    """
    Forward login to Directus and set session cookies on success.
    """
    result = await client.login(data.email, data.password)

    if isinstance(result, LoginFailure):
        raise InvalidCredentials(result.message, status_code=result.status_code, details=result.body)

    return _forward_tokens(result)


@router.post("/proxy-refresh")
async def proxy_refresh(
    body: RefreshRequest | None = Body(default=None),
    refresh_token_cookie: str | None = Cookie(default=None, alias=settings.COOKIE_REFRESH_NAME),
    client: DirectusClient = Depends(get_directus_client),
):
    """
    Refresh tokens via Directus using the refresh cookie (or body in Bearer mode).
    """
    refresh_token = get_refresh_token(body, refresh_token_cookie)

    if not refresh_token:
        logger.warning("Refresh token not found in request")
        raise MissingToken()

    result = await client.refresh(refresh_token)

    if isinstance(result, LoginFailure):
        if result.status_code in REFRESH_REJECTED_STATUSES:
            raise RefreshRejected(result.message, status_code=result.status_code, details=result.body)
        raise BackendError(result.message, status_code=result.status_code, details=result.body)

    return _forward_tokens(result)


@router.post("/logout")
async def logout():
    """
    Drop the session cookies. Directus tokens expire on their own.
    """
    response = JSONResponse(content={"detail": "Logged out"})
    clear_auth_tokens(response)
    return response
