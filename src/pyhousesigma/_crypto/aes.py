"""AES-128-CTR transform used in both directions of the payload protocol."""

from __future__ import annotations

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from pyhousesigma._constants import AES_KEY_SIZE, COUNTER_SIZE
from pyhousesigma.exceptions import HsCryptoError


def aes_ctr_transform(data: bytes, key: bytes, counter: bytes) -> bytes:
    """Run AES-CTR over *data*.

    Counter mode is symmetric, so the same call encrypts and decrypts.
    The output always has the same length as the input.

    Parameters
    ----------
    data : bytes
        Plaintext or ciphertext.
    key : bytes
        16-byte normalized key.
    counter : bytes
        16-byte initial counter block.

    Returns
    -------
    bytes
        Transformed bytes.

    Raises
    ------
    HsCryptoError
        If key or counter have the wrong size, or the primitive fails.
    """
    if len(key) != AES_KEY_SIZE:
        raise HsCryptoError(f"AES key must be {AES_KEY_SIZE} bytes (got {len(key)})")
    if len(counter) != COUNTER_SIZE:
        raise HsCryptoError(f"AES counter must be {COUNTER_SIZE} bytes (got {len(counter)})")
    try:
        cipher = Cipher(algorithms.AES(key), modes.CTR(counter))
        transformer = cipher.encryptor()
        return transformer.update(data) + transformer.finalize()
    except Exception as exc:
        raise HsCryptoError(f"AES-CTR transform failed: {exc}") from exc
