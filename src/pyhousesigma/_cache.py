"""In-memory cache of listing previews already returned to the caller."""

from __future__ import annotations

import copy
import time
from dataclasses import dataclass, field
from typing import Any


@dataclass
class CachedListing:
    """A cached listing preview keyed by ``id_listing``."""

    id_listing: str
    data: dict[str, Any]
    cached_at: float = field(default_factory=time.time)


class ListingCache:
    """Remember listing previews so repeated searches only return new ones."""

    def __init__(self) -> None:
        self._listings: dict[str, CachedListing] = {}

    def has(self, listing_id: str) -> bool:
        return listing_id in self._listings

    def get(self, listing_id: str) -> dict[str, Any] | None:
        entry = self._listings.get(listing_id)
        if entry is None:
            return None
        return copy.deepcopy(entry.data)

    def add(self, listing: dict[str, Any]) -> bool:
        """Cache *listing*; returns ``False`` when it has no ``id_listing``."""
        listing_id = listing.get("id_listing")
        if not listing_id:
            return False
        self._listings[str(listing_id)] = CachedListing(
            id_listing=str(listing_id),
            data=copy.deepcopy(listing),
        )
        return True

    def add_many(self, listings: list[dict[str, Any]]) -> None:
        for listing in listings:
            self.add(listing)

    def filter_new_ids(self, listing_ids: list[str]) -> list[str]:
        """Return the ids from *listing_ids* that are not cached, in order."""
        return [listing_id for listing_id in listing_ids if not self.has(listing_id)]

    def new_listings(self, listings: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Return listings that are not cached (id-less listings count as new)."""
        return [
            listing
            for listing in listings
            if not listing.get("id_listing") or not self.has(str(listing["id_listing"]))
        ]

    @property
    def size(self) -> int:
        return len(self._listings)

    def clear(self) -> None:
        self._listings.clear()

    def stats(self) -> dict[str, Any]:
        return {"size": self.size, "listings": list(self._listings)}
