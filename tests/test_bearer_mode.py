"""
Tests for Bearer mode authentication flows.

Tests in this file focus on:
- Pydantic schema validation (RefreshRequest)
- Refresh token lookup per auth mode
- Cookie helpers being no-ops in Bearer mode
- The proxy refresh endpoint reading the token from the body
"""
import json
from unittest.mock import patch

import pytest
from fastapi.responses import JSONResponse
from pydantic import ValidationError

import app.routes.auth
import cmsauth.utils.security
from app.schemas.auth import RefreshRequest
from app.routes.auth import get_refresh_token
from cmsauth.utils.security import clear_auth_tokens, set_auth_tokens


class TestRefreshRequestSchema:
    """Tests for RefreshRequest Pydantic schema validation."""

    def test_valid_refresh_request(self):
        """Valid refresh_token is accepted."""
        request = RefreshRequest(refresh_token="valid_token_string")
        assert request.refresh_token == "valid_token_string"

    def test_missing_refresh_token_rejected(self):
        """Missing refresh_token raises validation error."""
        with pytest.raises(ValidationError) as exc_info:
            RefreshRequest()

        errors = exc_info.value.errors()
        assert any(e["loc"] == ("refresh_token",) for e in errors)

    def test_empty_refresh_token_rejected(self):
        with pytest.raises(ValidationError):
            RefreshRequest(refresh_token="")

    def test_oversized_refresh_token_rejected(self):
        """Token exceeding max_length is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            RefreshRequest(refresh_token="x" * 2049)

        errors = exc_info.value.errors()
        assert any("max_length" in str(e) or "2048" in str(e) for e in errors)

    def test_max_length_refresh_token_accepted(self):
        request = RefreshRequest(refresh_token="x" * 2048)
        assert len(request.refresh_token) == 2048


class TestGetRefreshToken:
    """get_refresh_token() picks the cookie or the body depending on mode."""

    def test_cookie_mode_uses_cookie(self):
        body = RefreshRequest(refresh_token="from_body")

        with patch.object(app.routes.auth.app_settings, "USE_COOKIE_AUTH", True):
            assert get_refresh_token(body, "from_cookie") == "from_cookie"

    def test_bearer_mode_uses_body(self):
        body = RefreshRequest(refresh_token="from_body")

        with patch.object(app.routes.auth.app_settings, "USE_COOKIE_AUTH", False):
            assert get_refresh_token(body, "from_cookie") == "from_body"

    def test_bearer_mode_without_body(self):
        with patch.object(app.routes.auth.app_settings, "USE_COOKIE_AUTH", False):
            assert get_refresh_token(None, "from_cookie") is None


class TestCookieHelpers:
    """Tests for set_auth_tokens() / clear_auth_tokens() in both modes."""

    def test_bearer_mode_preserves_original_content(self):
        """Bearer mode leaves the body alone and sets no cookies."""
        response = JSONResponse(content={"data": {"access_token": "a"}})

        with patch.object(cmsauth.utils.security.settings, "USE_COOKIE_AUTH", False):
            set_auth_tokens(response, "access_token_value", "refresh_token_value")

        assert json.loads(response.body) == {"data": {"access_token": "a"}}
        assert "set-cookie" not in response.headers

    def test_bearer_mode_clear_is_noop(self):
        response = JSONResponse(content={"detail": "Logged out"})

        with patch.object(cmsauth.utils.security.settings, "USE_COOKIE_AUTH", False):
            clear_auth_tokens(response)

        assert "set-cookie" not in response.headers

    def test_cookie_mode_sets_both_cookies(self):
        response = JSONResponse(content={})

        with patch.object(cmsauth.utils.security.settings, "USE_COOKIE_AUTH", True), \
                patch.object(cmsauth.utils.security.settings, "COOKIE_SECURE", True):
            set_auth_tokens(response, "access_token_value", "refresh_token_value")

        cookies = response.headers.getlist("set-cookie")
        assert len(cookies) == 2
        assert cookies[0].startswith("session_access_token=access_token_value;")
        assert cookies[1].startswith("session_refresh_token=refresh_token_value;")
        assert all("Secure" in c and "HttpOnly" in c for c in cookies)

    def test_content_length_unchanged_by_cookies(self):
        response = JSONResponse(content={"detail": "ok"})
        length = response.headers["content-length"]

        with patch.object(cmsauth.utils.security.settings, "USE_COOKIE_AUTH", True):
            set_auth_tokens(response, "a", "r")

        assert response.headers["content-length"] == length == str(len(response.body))


@pytest.mark.asyncio
async def test_proxy_refresh_reads_body_in_bearer_mode(async_client, directus):
    """In Bearer mode the refresh token comes from the JSON body."""
    with patch.object(app.routes.auth.app_settings, "USE_COOKIE_AUTH", False), \
            patch.object(cmsauth.utils.security.settings, "USE_COOKIE_AUTH", False):
        response = await async_client.post(
            "/api/auth/proxy-refresh",
            json={"refresh_token": "refresh-1"},
        )

    assert response.status_code == 200
    assert response.json()["data"]["access_token"] == "access-2"
    assert response.headers.get_list("set-cookie") == []

    sent = directus.calls_to("/auth/refresh")[0]
    assert json.loads(sent.content) == {"refresh_token": "refresh-1", "mode": "json"}
