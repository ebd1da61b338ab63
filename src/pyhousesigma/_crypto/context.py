"""Cryptographic context linking an encrypted request to its response."""

from __future__ import annotations

from dataclasses import dataclass, field

from pyhousesigma._constants import COUNTER_SIZE
from pyhousesigma._crypto.keys import normalize_key
from pyhousesigma.exceptions import HsCryptoError


@dataclass(frozen=True, slots=True)
class EncryptionContext:
    """Material produced by one request encryption.

    The server encrypts its reply with the same key and counter, so this
    value is the only thing able to decrypt the matching response.
    Sensitive fields are excluded from ``repr`` so contexts can appear in
    tracebacks and logs without leaking key material.

    Parameters
    ----------
    counter : bytes
        16 random bytes used as the initial AES-CTR counter block.
    secret_key : str
        Un-normalized secret key the request was encrypted with.
    timestamp : str
        10-digit epoch seconds merged into the request body.
    """

    counter: bytes = field(repr=False)
    secret_key: str = field(repr=False)
    timestamp: str

    def __post_init__(self) -> None:
        if len(self.counter) != COUNTER_SIZE:
            raise HsCryptoError(f"Counter must be {COUNTER_SIZE} bytes (got {len(self.counter)})")

    @property
    def key(self) -> bytes:
        """Normalized 16-byte AES key."""
        return normalize_key(self.secret_key)


class ContextStore:
    """Single-slot holder for the most recent :class:`EncryptionContext`.

    ``set`` always overwrites, so a second request encrypted before the
    first response is decrypted makes that first response undecryptable.
    Callers that may have overlapping requests should keep the context
    returned by :meth:`PayloadCipher.encrypt_request` instead.
    """

    def __init__(self) -> None:
        self._context: EncryptionContext | None = None

    def set(self, context: EncryptionContext) -> None:
        self._context = context

    def get(self) -> EncryptionContext | None:
        return self._context

    def clear(self) -> None:
        """Drop the held context."""
        self._context = None

    def __bool__(self) -> bool:
        return self._context is not None
