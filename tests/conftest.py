from __future__ import annotations

import base64
import gzip
import json
from typing import Any

import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from pyhousesigma._crypto.keys import normalize_key


class FakeServerCrypto:
    """Server half of the payload protocol, backed by a test key pair."""

    def __init__(self, private_key: rsa.RSAPrivateKey) -> None:
        self.private_key = private_key
        self.public_key_pem = (
            private_key.public_key()
            .public_bytes(serialization.Encoding.PEM, serialization.PublicFormat.SubjectPublicKeyInfo)
            .decode("ascii")
        )

    def unwrap_counter(self, ctr_b64: str) -> bytes:
        return self.private_key.decrypt(
            base64.b64decode(ctr_b64),
            padding.OAEP(mgf=padding.MGF1(algorithm=hashes.SHA1()), algorithm=hashes.SHA1(), label=None),
        )

    @staticmethod
    def ctr(data: bytes, secret_key: str, counter: bytes) -> bytes:
        transformer = Cipher(algorithms.AES(normalize_key(secret_key)), modes.CTR(counter)).encryptor()
        return transformer.update(data) + transformer.finalize()

    def decrypt_request(self, envelope: dict[str, str], secret_key: str) -> tuple[bytes, bytes]:
        """Return ``(plaintext, counter)`` for a client envelope."""
        counter = self.unwrap_counter(envelope["ctr"])
        plaintext = self.ctr(base64.b64decode(envelope["et_payload"]), secret_key, counter)
        return plaintext, counter

    def encrypt_response(self, value: Any, secret_key: str, counter: bytes) -> str:
        compressed = gzip.compress(json.dumps(value).encode("utf-8"))
        return base64.b64encode(self.ctr(compressed, secret_key, counter)).decode("ascii")


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    # Same modulus size as the service's published key.
    return rsa.generate_private_key(public_exponent=65537, key_size=1024)


@pytest.fixture
def server(rsa_private_key: rsa.RSAPrivateKey) -> FakeServerCrypto:
    return FakeServerCrypto(rsa_private_key)
