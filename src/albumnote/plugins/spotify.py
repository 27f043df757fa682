"""
Spotify plugin for albumnote.

Features:
- OAuth2 client-credentials token, cached in memory until shortly before it
  expires (never persisted)
- Album search against the Web API with a fixed page size
- Every network failure ends in a notice plus a safe value (None / []), so
  the interactive search never crashes on a bad response
"""

import asyncio
import base64
import logging
import os
import time
from typing import List, Optional

import aiohttp
from pydantic import ValidationError

from ..core.config import get_settings, resolve_credentials
from ..core.errors import ConfigurationError
from ..core.models import AccessToken, SpotifyAlbum
from ..core.notify import Notifier
from .base import BasePlugin

TOKEN_URL = "https://accounts.spotify.com/api/token"
SEARCH_URL = "https://api.spotify.com/v1/search"

# Seconds subtracted from the server-declared lifetime so a token never
# expires mid-request.
TOKEN_EXPIRY_MARGIN = 60
SEARCH_TYPE = "album"
SEARCH_LIMIT = 20

MISSING_CREDENTIALS_MESSAGE = "Please set your Spotify client ID and secret in settings."

logger = logging.getLogger(__name__)


def _now() -> float:
    return time.time()


def _parse_albums(items: list) -> List[SpotifyAlbum]:
    """Validate search items one by one; malformed items are logged and skipped."""
    albums: List[SpotifyAlbum] = []
    for position, item in enumerate(items):
        if not item:
            continue
        try:
            albums.append(SpotifyAlbum.model_validate(item))
        except ValidationError as e:
            item_id = item.get("id") if isinstance(item, dict) else None
            logger.warning(
                "Skipping malformed album at position %d (id=%r): %s", position, item_id, e
            )
    return albums


def _http_timeout() -> aiohttp.ClientTimeout:
    try:
        total = float(os.getenv("ALB_HTTP_TIMEOUT", "10") or "10")
    except ValueError:
        total = 10.0
    return aiohttp.ClientTimeout(total=total)


class SpotifyTokenManager:
    """Obtains and caches a client-credentials bearer token."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        session: aiohttp.ClientSession | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.session = session
        self.notifier = notifier or Notifier()
        self._token: Optional[AccessToken] = None

    @property
    def cached(self) -> Optional[AccessToken]:
        return self._token

    def _basic_auth(self) -> str:
        raw = f"{self.client_id}:{self.client_secret}".encode("utf-8")
        return base64.b64encode(raw).decode("ascii")

    async def get_token(self) -> Optional[str]:
        """Return a valid access token, or None if one could not be obtained."""
        if self._token is not None and self._token.is_valid(_now()):
            logger.debug("spotify.token cache hit (expires_at=%s)", self._token.expires_at)
            return self._token.access_token

        if not self.client_id or not self.client_secret:
            self.notifier.notice(MISSING_CREDENTIALS_MESSAGE, "error")
            return None
        if self.session is None:
            raise RuntimeError("Token manager must be used within an active session.")

        headers = {
            "Authorization": f"Basic {self._basic_auth()}",
            "Content-Type": "application/x-www-form-urlencoded",
        }
        try:
            async with self.session.post(
                TOKEN_URL, data="grant_type=client_credentials", headers=headers
            ) as response:
                if response.status != 200:
                    body = await response.text()
                    logger.error(
                        "Spotify auth failed: HTTP %s %s", response.status, body[:300]
                    )
                    self.notifier.notice("Failed to authenticate with Spotify.", "error")
                    return None
                payload = await response.json()
                access_token = payload["access_token"]
                if not isinstance(access_token, str) or not access_token:
                    raise ValueError(
                        f"token response has no usable access_token ({type(access_token).__name__})"
                    )
                expires_in = float(payload["expires_in"])
        except (aiohttp.ClientError, asyncio.TimeoutError, KeyError, TypeError, ValueError) as e:
            logger.error("Spotify auth error: %r", e)
            self.notifier.notice("Error authenticating with Spotify.", "error")
            return None

        self._token = AccessToken(
            access_token=access_token,
            expires_at=_now() + (expires_in - TOKEN_EXPIRY_MARGIN),
        )
        logger.debug("spotify.token acquired (expires_in=%s)", expires_in)
        return self._token.access_token


class SpotifyPlugin(BasePlugin):
    """Album search against the Spotify Web API.

    Use as an async context manager; the aiohttp session is created on entry
    and closed on exit unless one was passed in.
    """

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.session = session
        self._owns_session = session is None
        self.notifier = notifier or Notifier()
        self.tokens: SpotifyTokenManager | None = None

    async def authenticate(self):
        if not self.client_id or not self.client_secret:
            settings_id, settings_secret = resolve_credentials(get_settings())
            self.client_id = self.client_id or settings_id
            self.client_secret = self.client_secret or settings_secret
        if not self.client_id or not self.client_secret:
            raise ConfigurationError(MISSING_CREDENTIALS_MESSAGE)
        if self.tokens is None:
            self.tokens = SpotifyTokenManager(
                self.client_id, self.client_secret, self.session, self.notifier
            )
        logger.debug("spotify.authenticate ok", extra={"provider": "spotify"})

    async def __aenter__(self):
        await self.authenticate()
        if self.session is None:
            self.session = aiohttp.ClientSession(
                headers={"Accept": "application/json"}, timeout=_http_timeout()
            )
            self._owns_session = True
        self.tokens.session = self.session
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session is not None and self._owns_session:
            await self.session.close()
            self.session = None

    async def search_album(self, query: str) -> List[SpotifyAlbum]:
        if query == "":
            return []
        if self.tokens is None:
            await self.authenticate()
        if self.session is None:
            raise RuntimeError("SpotifyPlugin must be used within an active session.")

        token = await self.tokens.get_token()
        if not token:
            return []

        params = {"q": query, "type": SEARCH_TYPE, "limit": str(SEARCH_LIMIT)}
        headers = {"Authorization": f"Bearer {token}"}
        try:
            async with self.session.get(SEARCH_URL, params=params, headers=headers) as response:
                if response.status != 200:
                    body = await response.text()
                    logger.warning(
                        "Spotify search failed: HTTP %s %s", response.status, body[:300]
                    )
                    self.notifier.notice("Failed to search Spotify.", "error")
                    return []
                payload = await response.json()
                items = ((payload or {}).get("albums") or {}).get("items") or []
                if not isinstance(items, list):
                    raise ValueError(f"albums.items is a {type(items).__name__}, not a list")
        except (aiohttp.ClientError, asyncio.TimeoutError, AttributeError, ValueError) as e:
            logger.error("Spotify search error for %r: %r", query, e)
            self.notifier.notice("Error searching Spotify.", "warning")
            return []

        albums = _parse_albums(items)
        logger.debug("spotify.search query=%r results=%d", query, len(albums))
        return albums
