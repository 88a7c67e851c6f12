"""OAuth session token cache for the TMS API."""
import asyncio
import logging
from datetime import datetime, timedelta
from typing import Optional

import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError

from config import TMSCredentials
from constants import OAUTH_GRANT_TYPE, OAUTH_TOKEN_PATH, TOKEN_EXPIRY_BUFFER_SECONDS
from exceptions import AuthError
from utils.date_helpers import get_current_utc, to_utc

logger = logging.getLogger(__name__)


class OAuthToken(BaseModel):
    """Bearer token and the instant it stops being usable."""
    access_token: str
    expires_at: datetime

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """Check whether the token can still be used."""
        return (now or get_current_utc()) < self.expires_at


class TokenResponse(BaseModel):
    """Body of a successful token request."""
    access_token: str
    expires_in: int


class TokenManager:
    """
    Owns the TMS bearer token.

    One instance is created at startup and shared by every client call.
    A valid cached token is returned without any locking or network I/O;
    refreshes are serialised so concurrent callers on a cache miss trigger a
    single OAuth request and all reuse its result.
    """

    def __init__(self, credentials: TMSCredentials, http_client: httpx.AsyncClient):
        """
        Initialize token manager.

        Args:
            credentials: TMS credentials
            http_client: Shared HTTP client
        """
        self.credentials = credentials
        self.http_client = http_client
        self._token: Optional[OAuthToken] = None
        self._refresh_lock = asyncio.Lock()
        # Bumped after every refresh attempt; the last failure is kept for waiters
        self._refresh_generation = 0
        self._refresh_error: Optional[AuthError] = None

    @property
    def token_expires_at(self) -> Optional[datetime]:
        """Expiry of the cached token, if any."""
        return self._token.expires_at if self._token else None

    def set_token(self, access_token: str, expires_at: datetime):
        """Seed the cache with a known token."""
        self._token = OAuthToken(access_token=access_token, expires_at=to_utc(expires_at))

    def invalidate(self):
        """Drop the cached token so the next call refreshes."""
        self._token = None

    async def get_token(self) -> str:
        """
        Get a valid bearer token, refreshing it if expired.

        Callers that queue behind an in-flight refresh share its outcome:
        they get its token, or an AuthError if it failed, without sending
        a request of their own.

        Returns:
            Access token string

        Raises:
            AuthError: If the token request fails
        """
        token = self._token
        if token is not None and token.is_valid():
            return token.access_token

        generation = self._refresh_generation

        async with self._refresh_lock:
            token = self._token
            if token is not None and token.is_valid():
                return token.access_token

            if self._refresh_generation != generation:
                # A refresh finished while we waited
                error = self._refresh_error
                if error is not None:
                    raise AuthError(str(error), status_line=error.status_line) from error
                if token is not None:
                    return token.access_token

            self._refresh_error = None
            try:
                self._token = await self._request_token()
            except AuthError as e:
                self._refresh_error = e
                raise
            finally:
                self._refresh_generation += 1

            return self._token.access_token

    async def _request_token(self) -> OAuthToken:
        """
        Request a new token with the password grant.

        Returns:
            OAuthToken

        Raises:
            AuthError: On transport failure, non-200 status or a bad body
        """
        payload = {
            "grant_type": OAUTH_GRANT_TYPE,
            "client_id": self.credentials.client_id,
            "client_secret": self.credentials.client_secret,
            "username": self.credentials.username,
            "password": self.credentials.password,
            "scope": self.credentials.scope,
            "type": self.credentials.auth_type,
        }
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.credentials.api_key,
        }

        try:
            response = await self.http_client.post(
                f"{self.credentials.base_url}{OAUTH_TOKEN_PATH}",
                headers=headers,
                json=payload,
            )
        except httpx.HTTPError as e:
            logger.error(f"HTTP error requesting TMS token: {e}")
            raise AuthError(f"TMS OAuth request failed: {e}") from e

        status_line = f"{response.status_code} {response.reason_phrase}".strip()
        if response.status_code != 200:
            logger.error(f"TMS OAuth error: {status_line}")
            raise AuthError(f"TMS OAuth error: {status_line}", status_line=status_line)

        try:
            token_data = TokenResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            logger.error(f"Invalid TMS token response: {e}")
            raise AuthError(f"Invalid TMS OAuth response: {e}", status_line=status_line) from e

        expires_at = get_current_utc() + timedelta(
            seconds=token_data.expires_in - TOKEN_EXPIRY_BUFFER_SECONDS
        )
        logger.info(f"Obtained new TMS token, expires in {token_data.expires_in} seconds")
        return OAuthToken(access_token=token_data.access_token, expires_at=expires_at)
