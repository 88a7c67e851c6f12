"""Tests for the TMS token manager."""
import asyncio
import json
from datetime import timedelta

import httpx
import pytest

from exceptions import AuthError
from utils.date_helpers import get_current_utc


@pytest.mark.asyncio
async def test_get_token_requests_password_grant(token_manager, fake_tms):
    """Test the token request body and headers."""
    token = await token_manager.get_token()

    assert token == "token-1"
    assert len(fake_tms.token_requests) == 1

    request = fake_tms.token_requests[0]
    assert str(request.url) == "https://tms.test/v1/oauth/token"
    assert request.headers["x-api-key"] == "test-api-key"

    body = json.loads(request.content)
    assert body["grant_type"] == "password"
    assert body["client_id"] == "client-id"
    assert body["username"] == "dispatcher@example.com"
    assert body["scope"] == "read+trade"
    assert body["type"] == "business"


@pytest.mark.asyncio
async def test_get_token_reuses_cached_token(token_manager, fake_tms):
    """Test that a valid token is served from cache."""
    first = await token_manager.get_token()
    second = await token_manager.get_token()

    assert first == second
    assert len(fake_tms.token_requests) == 1


@pytest.mark.asyncio
async def test_seeded_token_makes_no_request(token_manager, fake_tms):
    """Test that a seeded, unexpired token needs no network call."""
    token_manager.set_token("seeded", get_current_utc() + timedelta(hours=1))

    assert await token_manager.get_token() == "seeded"
    assert fake_tms.requests == []


@pytest.mark.asyncio
async def test_expired_token_refreshes_once(token_manager, fake_tms):
    """Test refresh after expiry."""
    token_manager.set_token("stale", get_current_utc() - timedelta(seconds=1))

    assert await token_manager.get_token() == "token-1"
    assert await token_manager.get_token() == "token-1"
    assert len(fake_tms.token_requests) == 1


@pytest.mark.asyncio
async def test_expiry_keeps_sixty_second_buffer(token_manager):
    """Test that the cached expiry is pulled in by 60 seconds."""
    before = get_current_utc()
    await token_manager.get_token()
    after = get_current_utc()

    expires_at = token_manager.token_expires_at
    assert before + timedelta(seconds=3540) <= expires_at <= after + timedelta(seconds=3540)


@pytest.mark.asyncio
async def test_token_inside_buffer_is_not_reused(token_manager, fake_tms):
    """Test that a token living less than the buffer is refreshed every call."""
    fake_tms.route("POST", "/v1/oauth/token", json={"access_token": "short", "expires_in": 30})

    await token_manager.get_token()
    await token_manager.get_token()

    assert len(fake_tms.token_requests) == 2


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_refresh(token_manager, fake_tms):
    """Test single-flight refresh under concurrency."""
    fake_tms.token_delay = 0.05

    tokens = await asyncio.gather(*(token_manager.get_token() for _ in range(10)))

    assert set(tokens) == {"token-1"}
    assert len(fake_tms.token_requests) == 1


@pytest.mark.asyncio
async def test_non_200_raises_auth_error(token_manager, fake_tms):
    """Test OAuth rejection."""
    fake_tms.route("POST", "/v1/oauth/token", status_code=401, json={"error": "invalid_grant"})

    with pytest.raises(AuthError) as exc_info:
        await token_manager.get_token()

    assert exc_info.value.status_line == "401 Unauthorized"
    assert token_manager.token_expires_at is None


@pytest.mark.asyncio
async def test_failed_refresh_is_retried_on_next_call(token_manager, fake_tms):
    """Test that a failure caches nothing."""
    fake_tms.route("POST", "/v1/oauth/token", status_code=500, text="boom")
    with pytest.raises(AuthError):
        await token_manager.get_token()

    fake_tms.route("POST", "/v1/oauth/token", json={"access_token": "token-2", "expires_in": 3600})
    assert await token_manager.get_token() == "token-2"


@pytest.mark.asyncio
async def test_transport_error_raises_auth_error(token_manager, fake_tms):
    """Test network failure during token request."""
    fake_tms.route_error("POST", "/v1/oauth/token", httpx.ConnectError("refused"))

    with pytest.raises(AuthError):
        await token_manager.get_token()


@pytest.mark.asyncio
async def test_malformed_token_body_raises_auth_error(token_manager, fake_tms):
    """Test a 200 response without a usable token."""
    fake_tms.route("POST", "/v1/oauth/token", text="not json")

    with pytest.raises(AuthError):
        await token_manager.get_token()


def test_invalidate_clears_cache(token_manager):
    """Test invalidate."""
    token_manager.set_token("seeded", get_current_utc() + timedelta(hours=1))
    token_manager.invalidate()

    assert token_manager.token_expires_at is None


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_failed_refresh(token_manager, fake_tms):
    """Test that callers queued behind a failing refresh do not retry it."""
    fake_tms.token_delay = 0.05
    fake_tms.route("POST", "/v1/oauth/token", status_code=500, text="down")

    results = await asyncio.gather(
        *(token_manager.get_token() for _ in range(10)),
        return_exceptions=True,
    )

    assert len(fake_tms.token_requests) == 1
    assert all(isinstance(result, AuthError) for result in results)
    assert {result.status_line for result in results} == {"500 Internal Server Error"}


@pytest.mark.asyncio
async def test_concurrent_callers_share_short_lived_token(token_manager, fake_tms):
    """Test that waiters reuse a fresh token even inside the expiry buffer."""
    fake_tms.token_delay = 0.05
    fake_tms.route("POST", "/v1/oauth/token", json={"access_token": "short", "expires_in": 30})

    tokens = await asyncio.gather(*(token_manager.get_token() for _ in range(5)))

    assert set(tokens) == {"short"}
    assert len(fake_tms.token_requests) == 1
