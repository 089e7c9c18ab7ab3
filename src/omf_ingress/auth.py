"""
Auth module — OAuth2 client-credentials token provider.

Tokens are cached per provider and refreshed lazily, 30 seconds before the
identity server says they expire. BearerAuth plugs the provider into httpx so
every OMF request carries a current token.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import AsyncGenerator, Callable, Optional

import httpx

from omf_ingress.errors import AuthError
from omf_ingress.transport.http import HttpClient

logger = logging.getLogger(__name__)

IDENTITY_ENDPOINT = "identity/connect/token"
ACCESS_TOKEN_KEY = "access_token"
EXPIRES_IN_KEY = "expires_in"
EXPIRY_SAFETY_MARGIN_S = 30


@dataclass(frozen=True)
class CachedToken:
    value: str
    expiry: float

    def valid_at(self, now: float) -> bool:
        return now < self.expiry


def _require(name: str, value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{name} cannot be empty or whitespace")
    return value


class TokenProvider:
    def __init__(
        self,
        http: HttpClient,
        client_id: str,
        client_secret: str,
        clock: Callable[[], float] = time.time,
    ):
        self._http = http
        self._client_id = _require("client_id", client_id)
        self._client_secret = _require("client_secret", client_secret)
        self._clock = clock
        self._cached: Optional[CachedToken] = None
        self._lock = asyncio.Lock()

    @property
    def cached(self) -> Optional[CachedToken]:
        return self._cached

    def invalidate(self) -> None:
        self._cached = None

    async def get_token(self, cancel_event: Optional[asyncio.Event] = None) -> str:
        """Return a valid bearer token, fetching a new one if the cache is stale."""
        cached = self._cached
        if cached is not None and cached.valid_at(self._clock()):
            return cached.value

        async with self._lock:
            # Another caller may have refreshed while we waited on the lock.
            cached = self._cached
            if cached is not None and cached.valid_at(self._clock()):
                return cached.value
            self._cached = await self._fetch(cancel_event)
            return self._cached.value

    async def _fetch(self, cancel_event: Optional[asyncio.Event]) -> CachedToken:
        logger.info(f"Requesting access token from {self._http.base_url}/{IDENTITY_ENDPOINT}")
        resp = await self._http.post_form(
            IDENTITY_ENDPOINT,
            {
                "grant_type": "client_credentials",
                "client_id": self._client_id,
                "client_secret": self._client_secret,
            },
            cancel_event=cancel_event,
        )
        if not resp.is_success:
            raise AuthError(
                f"Identity server rejected credentials: HTTP {resp.status_code}: {resp.text[:200]}",
                details={"status_code": resp.status_code},
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise AuthError(f"Malformed token response: {e}")
        if not isinstance(data, dict):
            raise AuthError("Malformed token response: expected a JSON object")

        token = data.get(ACCESS_TOKEN_KEY)
        if not isinstance(token, str) or not token:
            raise AuthError("Unable to get access token")
        if EXPIRES_IN_KEY not in data:
            raise AuthError("Unable to get token expiration")
        expires_in = data[EXPIRES_IN_KEY]
        if isinstance(expires_in, bool) or not isinstance(expires_in, int):
            raise AuthError(f"Invalid token expiration: {expires_in!r}")

        expiry = self._clock() + expires_in - EXPIRY_SAFETY_MARGIN_S
        logger.info(f"Access token acquired, expires in {expires_in}s")
        return CachedToken(value=token, expiry=expiry)


class BearerAuth(httpx.Auth):
    """httpx auth flow that fetches the token lazily, right before each request."""

    def __init__(self, provider: TokenProvider):
        self._provider = provider

    def sync_auth_flow(self, request: httpx.Request):
        raise RuntimeError("BearerAuth only supports httpx.AsyncClient")

    async def async_auth_flow(self, request: httpx.Request) -> AsyncGenerator[httpx.Request, httpx.Response]:
        request.headers.pop("Authorization", None)
        token = await self._provider.get_token()
        request.headers["Authorization"] = f"Bearer {token}"
        yield request
