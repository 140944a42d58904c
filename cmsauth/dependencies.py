from fastapi import Request, Cookie

from cmsauth.errors import Unauthorized
from cmsauth.services.directus import DirectusClient
from cmsauth.settings import settings


# Guard against oversized tokens (DoS protection)
MAX_TOKEN_LEN = 2048


# TOKEN EXTRACTOR

async def _extract_token(request: Request, access_cookie: str | None) -> str | None:
    """
    Access token lookup:
    • cookie mode → HttpOnly session cookie
    • bearer mode → Authorization: Bearer <token>
    """

    # Cookie-mode
    if settings.USE_COOKIE_AUTH:
        return access_cookie

    # Header-mode
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1]

    return None


# MAIN DEPENDENCIES

async def get_access_token(
    request: Request,
    access_token_cookie: str | None = Cookie(default=None, alias=settings.COOKIE_ACCESS_NAME),
) -> str:
    """
    Required access token for protected resource endpoints.
    The token is passed through to Directus, which validates it.
    """
    token = await _extract_token(request, access_token_cookie)

    if not token:
        raise Unauthorized()

    if len(token) > MAX_TOKEN_LEN:
        raise Unauthorized("Unauthorized: Invalid access token")

    return token


def get_directus_client(request: Request) -> DirectusClient:
    """The shared DirectusClient created in the application lifespan."""
    client = getattr(request.app.state, "directus", None)
    if client is None:
        raise RuntimeError(
            "cmsauth: DirectusClient is not registered. "
            "Set app.state.directus = DirectusClient() at startup."
        )
    return client
