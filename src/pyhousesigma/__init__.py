"""pyhousesigma - Async Python client for the HouseSigma listing API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyhousesigma")
except PackageNotFoundError:
    __version__ = "0+local"
from pyhousesigma._crypto import ContextStore, EncryptionContext, PayloadCipher, normalize_key
from pyhousesigma.client import HsClient
from pyhousesigma.config import HsConfig, MapViewport
from pyhousesigma.exceptions import (
    HsApiError,
    HsAuthenticationError,
    HsConfigError,
    HsCorruptResponseError,
    HsCryptoError,
    HsError,
    HsSequenceError,
    HsTransportError,
)
from pyhousesigma.models import (
    AuthToken,
    EncryptedEnvelope,
    ListingPreview,
    MapCluster,
    SearchCriteria,
)

__all__ = [
    "__version__",
    "AuthToken",
    "ContextStore",
    "EncryptedEnvelope",
    "EncryptionContext",
    "HsApiError",
    "HsAuthenticationError",
    "HsClient",
    "HsConfig",
    "HsConfigError",
    "HsCorruptResponseError",
    "HsCryptoError",
    "HsError",
    "HsSequenceError",
    "HsTransportError",
    "ListingPreview",
    "MapCluster",
    "MapViewport",
    "PayloadCipher",
    "SearchCriteria",
    "normalize_key",
]
