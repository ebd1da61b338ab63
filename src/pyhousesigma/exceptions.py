"""Custom exception hierarchy for pyhousesigma."""

from __future__ import annotations


class HsError(Exception):
    """Base exception for all pyhousesigma errors."""


class HsConfigError(HsError):
    """Invalid or missing configuration (e.g. no usable RSA public key)."""


class HsSequenceError(HsError):
    """A response was decrypted before any request context existed."""


class HsCryptoError(HsError):
    """Encryption or decryption failure at the cipher level."""


class HsCorruptResponseError(HsError):
    """Decrypted response could not be decompressed or parsed.

    The symmetric step always "succeeds" in counter mode, so a wrong
    counter/key pairing or a damaged body only shows up here.
    """


class HsTransportError(HsError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class HsApiError(HsError):
    """API returned ``status: false`` or an unusable body."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class HsAuthenticationError(HsApiError):
    """Access token request failed."""
