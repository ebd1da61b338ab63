"""Cryptographic primitives for the encrypted listing API."""

from __future__ import annotations

from pyhousesigma._crypto.aes import aes_ctr_transform
from pyhousesigma._crypto.context import ContextStore, EncryptionContext
from pyhousesigma._crypto.keys import normalize_key
from pyhousesigma._crypto.payload import PayloadCipher, serialize_request
from pyhousesigma._crypto.rsa import load_public_key, oaep_wrap

__all__ = [
    "ContextStore",
    "EncryptionContext",
    "PayloadCipher",
    "aes_ctr_transform",
    "load_public_key",
    "normalize_key",
    "oaep_wrap",
    "serialize_request",
]
