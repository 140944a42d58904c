import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.routes.auth import router as auth_router
from app.routes.contacts import router as contacts_router
from app.settings import settings as app_settings
from cmsauth.errors import AuthError
from cmsauth.middleware import RouteGuardMiddleware
from cmsauth.services.directus import DirectusClient
from cmsauth.settings import settings as cmsauth_settings

logger = logging.getLogger(__name__)


def validate_auth_mode_consistency():
    """
    Validate that the app and cmsauth have consistent USE_COOKIE_AUTH setting.
    Both must read from the same environment variable, so a mismatch indicates
    a configuration problem (e.g., stale cache, different .env files).
    """
    app_mode = app_settings.USE_COOKIE_AUTH
    lib_mode = cmsauth_settings.USE_COOKIE_AUTH

    if app_mode != lib_mode:
        raise RuntimeError(
            f"Configuration mismatch detected!\n"
            f"  app.settings.USE_COOKIE_AUTH = {app_mode}\n"
            f"  cmsauth.settings.USE_COOKIE_AUTH = {lib_mode}\n\n"
            f"The app and the cmsauth library must use the same auth mode.\n"
            f"Fix: Ensure USE_COOKIE_AUTH is set once in your .env file and restart."
        )

    mode_name = "Cookie" if app_mode else "Bearer"
    logger.info(f"Auth mode: {mode_name} (USE_COOKIE_AUTH={app_mode})")


@asynccontextmanager
async def lifespan(app: FastAPI):
    validate_auth_mode_consistency()
    app.state.directus = DirectusClient()
    logger.info("Directus backend: %s", app.state.directus.base_url)
    try:
        yield
    finally:
        await app.state.directus.aclose()


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app = FastAPI(title="Contact Finder", lifespan=lifespan)

app.add_middleware(RouteGuardMiddleware)
app.add_exception_handler(AuthError, auth_error_handler)

app.include_router(auth_router)
app.include_router(contacts_router)
