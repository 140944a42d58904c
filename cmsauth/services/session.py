import logging
import time
from typing import Callable

from cmsauth.errors import InvalidCredentials, TransientFailure
from cmsauth.models.tokens import LoginFailure, LoginSuccess, TokenPair
from cmsauth.protocols import IdentityClient, KeyValueStore
from cmsauth.settings import settings
from cmsauth.storage import MemoryStore, TokenStore
from cmsauth.utils.single_flight import SingleFlight

logger = logging.getLogger("cmsauth.session")

# Refresh responses with these statuses mean the refresh token itself is dead
REFRESH_REJECTED_STATUSES = (400, 401)


def _now_ms() -> int:
    return int(time.time() * 1000)


class SessionManager:
    """
    Owns one session's access/refresh token pair.

    get_access_token() hands out the stored access token while it is
    fresh and refreshes it otherwise. Concurrent refreshes are collapsed
    by the manager's own SingleFlight, so separate managers never share
    refresh state.

    This is the client-side half of the session: a Python client keeps
    one manager per user, logging in and refreshing against the
    identity backend (Directus directly, or the proxy-login and
    proxy-refresh endpoints served by the app) and attaching
    get_access_token() to each query.
    """

    def __init__(
        self,
        client: IdentityClient,
        storage: KeyValueStore | None = None,
        *,
        buffer_seconds: int | None = None,
        clock: Callable[[], int] = _now_ms,
        prefix: str = "session_",
    ):
        buffer_seconds = settings.TOKEN_EXPIRY_BUFFER_SECONDS if buffer_seconds is None else buffer_seconds
        if buffer_seconds <= 0:
            raise ValueError("buffer_seconds must be positive")

        self.client = client
        self.tokens = TokenStore(storage if storage is not None else MemoryStore(), prefix=prefix)
        self.buffer_ms = buffer_seconds * 1000
        self.clock = clock
        self.refresh_flight = SingleFlight()

    @property
    def is_authenticated(self) -> bool:
        return self.tokens.load() is not None

    async def login(self, email: str, password: str) -> LoginSuccess:
        """Log in against the identity backend and store the token pair."""
        result = await self.client.login(email, password)

        if isinstance(result, LoginFailure):
            raise InvalidCredentials(result.message, status_code=result.status_code, details=result.body)

        self.tokens.save(result.tokens, self.clock())
        return result

    def logout(self) -> None:
        self.tokens.clear()
        logger.info("Session tokens removed")

    async def get_access_token(self) -> str | None:
        """
        Return a usable access token, or None when the user must log in.
        """
        pair = self.tokens.load()

        if pair is None:
            if self.tokens.has_any():
                logger.warning("Incomplete session token state, clearing it")
                self.tokens.clear()
            return None

        if pair.is_fresh(self.clock(), self.buffer_ms):
            return pair.access_token

        logger.info("Access token expired or nearing expiry, refreshing")
        return await self.refresh_flight.do(self._refresh)

    async def _refresh(self) -> str | None:
        pair = self.tokens.load()
        if pair is None:
            self.tokens.clear()
            return None

        try:
            result = await self.client.refresh(pair.refresh_token)
        except TransientFailure as e:
            logger.error("Token refresh failed, keeping stored tokens: %s", e.message)
            return None
        except Exception:
            logger.exception("Unexpected error during token refresh, keeping stored tokens")
            return None

        # logout() or a new login() while the request was out replaces the pair
        if not self._still_current(pair):
            logger.info("Session tokens changed during refresh, discarding result")
            return None

        if isinstance(result, LoginFailure):
            if result.status_code in REFRESH_REJECTED_STATUSES:
                logger.warning("Refresh token rejected (%s), clearing session tokens", result.status_code)
                self.tokens.clear()
            else:
                logger.error("Token refresh failed (%s): %s", result.status_code, result.message)
            return None

        new_pair = self.tokens.save(result.tokens, self.clock())
        logger.info("Token refresh successful")
        return new_pair.access_token

    def _still_current(self, pair: TokenPair) -> bool:
        current = self.tokens.load()
        return current is not None and current.refresh_token == pair.refresh_token
