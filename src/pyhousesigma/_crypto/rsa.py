"""RSA-OAEP wrapping of the per-request AES counter."""

from __future__ import annotations

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey

from pyhousesigma.exceptions import HsConfigError, HsCryptoError

# The service decrypts with OAEP over SHA-1; this is not negotiable.
_OAEP = padding.OAEP(
    mgf=padding.MGF1(algorithm=hashes.SHA1()),
    algorithm=hashes.SHA1(),
    label=None,
)


def load_public_key(pem: str | None) -> RSAPublicKey:
    """Parse a PEM ``PUBLIC KEY`` block into an RSA public key.

    Leading/trailing whitespace around the block is ignored.

    Raises
    ------
    HsConfigError
        If *pem* is empty, unparseable, or not an RSA key.
    """
    if pem is None or not pem.strip():
        raise HsConfigError("RSA public key is required for counter encryption")
    try:
        key = serialization.load_pem_public_key(pem.strip().encode("ascii"))
    except (ValueError, TypeError, UnicodeEncodeError) as exc:
        raise HsConfigError(f"RSA public key is not a valid PEM public key: {exc}") from exc
    if not isinstance(key, RSAPublicKey):
        raise HsConfigError(f"Public key must be RSA, got {type(key).__name__}")
    return key


def oaep_wrap(public_key: RSAPublicKey, data: bytes) -> bytes:
    """Encrypt *data* with RSA-OAEP (MGF1-SHA1 / SHA1, no label).

    The result is always ``public_key.key_size // 8`` bytes long.
    """
    try:
        return public_key.encrypt(data, _OAEP)
    except ValueError as exc:
        raise HsCryptoError(f"RSA-OAEP encryption failed: {exc}") from exc
