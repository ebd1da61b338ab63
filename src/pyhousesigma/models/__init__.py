"""Models for listing API requests and responses."""

from __future__ import annotations

from pyhousesigma.models.envelope import EncryptedEnvelope
from pyhousesigma.models.listing import (
    GeoPoint,
    ListingPreview,
    MapCluster,
    PreviewManyResponse,
    SearchCriteria,
)
from pyhousesigma.models.token import AuthToken

__all__ = [
    "AuthToken",
    "EncryptedEnvelope",
    "GeoPoint",
    "ListingPreview",
    "MapCluster",
    "PreviewManyResponse",
    "SearchCriteria",
]
