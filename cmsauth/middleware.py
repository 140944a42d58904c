import logging
import re

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from cmsauth.settings import settings

logger = logging.getLogger("cmsauth.middleware")

# Paths that look like files (favicon.ico, robots.txt, app.js)
STATIC_FILE_RE = re.compile(r"/[\w-]+\.\w+$")

DEFAULT_EXEMPT_PREFIXES = ("/api/", "/static/", "/docs", "/redoc", "/openapi.json")


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """
    Gates page loads on the presence of a session cookie.

    - API and static paths pass through (API endpoints check tokens themselves)
    - anonymous user on a protected page → redirect to the login page
    - authenticated user on the login page → redirect home
    """

    def __init__(
        self,
        app,
        login_path: str | None = None,
        home_path: str | None = None,
        exempt_prefixes: tuple[str, ...] = DEFAULT_EXEMPT_PREFIXES,
    ):
        super().__init__(app)
        self.login_path = login_path or settings.LOGIN_PATH
        self.home_path = home_path or settings.HOME_PATH
        self.exempt_prefixes = exempt_prefixes

    def is_exempt(self, path: str) -> bool:
        return path.startswith(self.exempt_prefixes) or bool(STATIC_FILE_RE.search(path))

    @staticmethod
    def is_authenticated(request: Request) -> bool:
        return bool(
            request.cookies.get(settings.COOKIE_ACCESS_NAME)
            or request.cookies.get(settings.COOKIE_REFRESH_NAME)
        )

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if self.is_exempt(path):
            return await call_next(request)

        authenticated = self.is_authenticated(request)

        if path == self.login_path:
            if authenticated:
                return RedirectResponse(url=self.home_path)
            return await call_next(request)

        if not authenticated:
            logger.debug("Anonymous request to %s, redirecting to login", path)
            return RedirectResponse(url=self.login_path)

        return await call_next(request)
