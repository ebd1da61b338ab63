"""High-level async client for the listing API."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pyhousesigma._api import auth as _auth_api
from pyhousesigma._api import listings as _listings_api
from pyhousesigma._cache import ListingCache
from pyhousesigma._crypto.payload import PayloadCipher
from pyhousesigma._transport import HttpTransport, Transport
from pyhousesigma.config import HsConfig
from pyhousesigma.exceptions import HsError
from pyhousesigma.models.listing import ListingPreview, SearchCriteria
from pyhousesigma.session import Session

_logger = logging.getLogger(__name__)


class HsClient:
    """Async client for the listing API.

    Usage::

        async with HsClient(HsConfig()) as client:
            listings = await client.search(SearchCriteria(price_range=(2000, 3000)))
    """

    def __init__(
        self,
        config: HsConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config or HsConfig()
        self._external_session = session is not None
        self._http_session = session
        self._cipher = PayloadCipher(self._config.rsa_public_key_pem)
        self._cache = ListingCache()
        self._transport: Transport | None = None
        self._session: Session | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> HsClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None
        self._session = None

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self) -> None:
        """Obtain a new access token and secret key."""
        transport = self._require_transport()
        token = await _auth_api.fetch_token(self._config, transport)
        self._session = Session(
            access_token=token.access_token,
            secret_key=token.secret_key,
            expired_at=token.expired_at,
            margin=self._config.session_margin,
        )
        _logger.debug("Obtained access token valid for %.0fs", self._session.remaining)

    async def ensure_session(self) -> Session:
        """Return an active session, requesting a new token if expired."""
        if self._session is not None and not self._session.is_expired:
            return self._session
        await self.login()
        assert self._session is not None  # noqa: S101
        return self._session

    def invalidate_session(self) -> None:
        """Force session invalidation (next call will fetch a new token)."""
        self._session = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise HsError("Client not initialized. Use 'async with HsClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def search_listing_ids(self, criteria: SearchCriteria | None = None) -> list[str]:
        """Return listing ids in the configured map area matching *criteria*."""
        transport = self._require_transport()
        session = await self.ensure_session()
        return await _listings_api.search_listing_ids(
            self._config,
            session,
            transport,
            criteria or SearchCriteria(),
        )

    async def get_listing_previews(self, listing_ids: list[str]) -> list[ListingPreview]:
        """Fetch previews for *listing_ids*.

        With ``cache_enabled`` only ids this client has not returned before
        are requested, and an empty list comes back when all are known.
        """
        transport = self._require_transport()
        wanted = self._cache.filter_new_ids(listing_ids) if self._config.cache_enabled else list(listing_ids)
        if not wanted:
            _logger.debug("All %d listing ids already cached", len(listing_ids))
            return []

        session = await self.ensure_session()
        previews = await _listings_api.fetch_listing_previews(
            self._config,
            session,
            transport,
            self._cipher,
            wanted,
        )
        if self._config.cache_enabled:
            self._cache.add_many([preview.raw for preview in previews])
        return previews

    async def search(self, criteria: SearchCriteria | None = None) -> list[ListingPreview]:
        """Search the map area and return previews of new listings."""
        listing_ids = await self.search_listing_ids(criteria)
        return await self.get_listing_previews(listing_ids)

    def cache_stats(self) -> dict[str, Any]:
        return self._cache.stats()

    def clear_cache(self) -> None:
        self._cache.clear()
