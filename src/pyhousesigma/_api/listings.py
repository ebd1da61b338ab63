"""Listing search endpoints.

Endpoints:
  - /bkv2/api/search/mapsearchv3/listing   (plain JSON)
  - /bkv2/api/listing/preview/many         (encrypted)
"""

from __future__ import annotations

import logging
from typing import Any

from pyhousesigma._api._common import post_authorized_json, post_encrypted_json
from pyhousesigma._constants import MAP_SEARCH_ENDPOINT, PREVIEW_MANY_ENDPOINT
from pyhousesigma._crypto.payload import PayloadCipher
from pyhousesigma._transport import Transport
from pyhousesigma.config import HsConfig
from pyhousesigma.models.listing import ListingPreview, MapCluster, PreviewManyResponse, SearchCriteria
from pyhousesigma.session import Session

_logger = logging.getLogger(__name__)

DEFAULT_PRICE_RANGE: tuple[float, float] = (2400, 3200)
DEFAULT_MIN_SQUARE_FOOTAGE = 700
MAX_SQUARE_FOOTAGE = 4000


def _json_number(value: float) -> int | float:
    """Send whole numbers as JSON integers, as the web app does."""
    return int(value) if float(value).is_integer() else value


def build_map_search_request(config: HsConfig, criteria: SearchCriteria) -> dict[str, Any]:
    """Build the map search body for *criteria*.

    Field order and fixed values follow the web app's request.
    """
    price = criteria.price_range or DEFAULT_PRICE_RANGE
    min_sqft = criteria.min_square_footage or DEFAULT_MIN_SQUARE_FOOTAGE
    viewport = config.viewport

    return {
        "lang": config.language,
        "province": config.province,
        "house_type": ["all"],
        "list_type": [2],
        "rent_list_type": [2],
        "listing_days": 1,
        "sold_days": 90,
        "de_list_days": 90,
        "basement": [],
        "open_house_date": 0,
        "description": "",
        "listing_type": ["all"],
        "max_maintenance_fee": 0,
        "building_age_min": 999,
        "building_age_max": 0,
        "front_feet": [0, 100],
        "bedroom_range": [0],
        "bathroom_min": 0,
        "garage_min": 0,
        "id": "",
        "filter_name": "",
        "lat1": viewport.lat1,
        "lon1": viewport.lon1,
        "lat2": viewport.lat2,
        "lon2": viewport.lon2,
        "zoom": viewport.zoom,
        "price": [_json_number(price[0]), _json_number(price[1])],
        "square_footage": [min_sqft, MAX_SQUARE_FOOTAGE],
    }


def build_preview_request(config: HsConfig, listing_ids: list[str]) -> dict[str, Any]:
    return {
        "lang": config.language,
        "province": config.province,
        "id_listing": list(listing_ids),
    }


async def search_map_clusters(
    config: HsConfig,
    session: Session,
    transport: Transport,
    criteria: SearchCriteria,
) -> list[MapCluster]:
    """Run a map search and return the clusters."""
    data = await post_authorized_json(
        endpoint=MAP_SEARCH_ENDPOINT,
        session=session,
        transport=transport,
        body=build_map_search_request(config, criteria),
    )
    items = data.get("list")
    if not isinstance(items, list):
        return []
    return [MapCluster.model_validate(item) for item in items if isinstance(item, dict)]


async def search_listing_ids(
    config: HsConfig,
    session: Session,
    transport: Transport,
    criteria: SearchCriteria,
) -> list[str]:
    """Return the listing ids of every cluster, in response order."""
    clusters = await search_map_clusters(config, session, transport, criteria)
    ids = [listing_id for cluster in clusters for listing_id in cluster.ids]
    _logger.debug("Map search returned %d clusters, %d ids", len(clusters), len(ids))
    return ids


async def fetch_listing_previews(
    config: HsConfig,
    session: Session,
    transport: Transport,
    cipher: PayloadCipher,
    listing_ids: list[str],
) -> list[ListingPreview]:
    """Fetch previews for *listing_ids* through the encrypted endpoint."""
    if not listing_ids:
        return []
    decoded = await post_encrypted_json(
        endpoint=PREVIEW_MANY_ENDPOINT,
        session=session,
        transport=transport,
        cipher=cipher,
        payload=build_preview_request(config, listing_ids),
        model=PreviewManyResponse,
    )
    return decoded.house_list
