import logging
from typing import Any

import httpx
from pydantic import ValidationError

from cmsauth.errors import BackendError, TransientFailure
from cmsauth.models.tokens import LoginFailure, LoginResult, LoginSuccess, TokenData
from cmsauth.settings import settings

logger = logging.getLogger("cmsauth.directus")


def error_message(body: Any, default: str) -> str:
    """Return errors[0].message from a Directus error body, or default."""
    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            message = errors[0].get("message")
            if message:
                return str(message)
    return default


def decode_auth_response(status_code: int, body: Any, default_error: str) -> LoginResult:
    """
    Decode a login/refresh response into LoginSuccess or LoginFailure.
    A 2xx body without a complete token payload is a failure with status 502.
    """
    if not 200 <= status_code < 300:
        return LoginFailure(
            message=error_message(body, default_error),
            status_code=status_code,
            body=body,
        )

    if isinstance(body, dict) and body.get("errors"):
        return LoginFailure(message=error_message(body, default_error), status_code=502, body=body)

    data = body.get("data") if isinstance(body, dict) else None
    try:
        tokens = TokenData.model_validate(data)
    except ValidationError:
        return LoginFailure(
            message="Unexpected response from identity service",
            status_code=502,
            body=body,
        )

    return LoginSuccess(tokens=tokens, body=body)


class DirectusClient:
    """
    Async client for the Directus auth and items endpoints.
    Owns one httpx.AsyncClient; close it with aclose() or `async with`.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.DIRECTUS_URL).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.DIRECTUS_TIMEOUT_SECONDS,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "DirectusClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> tuple[int, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Request to %s%s failed: %s", self.base_url, path, e)
            raise TransientFailure(f"Could not reach identity service: {e}")

        try:
            body = response.json()
        except ValueError:
            logger.error("Non-JSON response from %s (status %s)", path, response.status_code)
            raise TransientFailure("Invalid response from identity service")

        return response.status_code, body

    async def login(self, email: str, password: str) -> LoginResult:
        logger.info("Attempting login for %s to %s/auth/login", email, self.base_url)
        status_code, body = await self._request(
            "POST",
            "/auth/login",
            json={"email": email, "password": password, "mode": "json"},
        )
        result = decode_auth_response(status_code, body, "Directus authentication failed")

        if isinstance(result, LoginFailure):
            logger.warning("Directus login failed (%s): %s", result.status_code, result.message)
        else:
            logger.info("Directus login successful")
        return result

    async def refresh(self, refresh_token: str) -> LoginResult:
        logger.info("Attempting token refresh to %s/auth/refresh", self.base_url)
        status_code, body = await self._request(
            "POST",
            "/auth/refresh",
            json={"refresh_token": refresh_token, "mode": "json"},
        )
        result = decode_auth_response(status_code, body, "Directus token refresh failed")

        if isinstance(result, LoginFailure):
            logger.warning("Directus token refresh failed (%s): %s", result.status_code, result.message)
        else:
            logger.info("Directus token refresh successful")
        return result

    async def get_items(
        self,
        collection: str,
        params: list[tuple[str, str]] | dict[str, str],
        access_token: str,
    ) -> list[dict]:
        """Query a Directus collection and return its "data" list."""
        status_code, body = await self._request(
            "GET",
            f"/items/{collection}",
            params=params,
            headers={"Authorization": f"Bearer {access_token}"},
        )

        if not 200 <= status_code < 300:
            message = error_message(body, f"Failed to fetch {collection} from Directus")
            logger.error("Error from Directus for %s (%s): %s", collection, status_code, message)
            raise BackendError(message, status_code=status_code, details=body)

        data = body.get("data") if isinstance(body, dict) else None
        return data or []
