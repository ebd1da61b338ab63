"""Symmetric key normalization for the encrypted payload protocol."""

from __future__ import annotations

from pyhousesigma._constants import AES_KEY_SIZE, KEY_PAD_BYTE


def normalize_key(secret: str) -> bytes:
    """Turn an arbitrary secret string into a 16-byte AES-128 key.

    The UTF-8 bytes of *secret* are right-padded with ``*`` up to 16
    bytes and then truncated to exactly 16 bytes.  An empty secret is
    valid and yields sixteen padding bytes.

    Parameters
    ----------
    secret : str
        Secret key as handed out by the access token endpoint.

    Returns
    -------
    bytes
        16-byte key.
    """
    raw = secret.encode("utf-8")
    if len(raw) < AES_KEY_SIZE:
        raw = raw + KEY_PAD_BYTE * (AES_KEY_SIZE - len(raw))
    return raw[:AES_KEY_SIZE]
