"""Hybrid AES-CTR / RSA-OAEP payload encryption.

Request path:  JSON -> AES-128-CTR -> base64, counter wrapped with RSA-OAEP.
Response path: base64 -> AES-128-CTR -> gunzip -> JSON.

Requests are never compressed while responses always are; both sides of
the protocol depend on that asymmetry.
"""

from __future__ import annotations

import base64
import binascii
import gzip
import json
import logging
import secrets
import time
import zlib
from collections.abc import Mapping
from typing import Any, TypeVar

from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey
from pydantic import BaseModel, ValidationError

from pyhousesigma._constants import COUNTER_SIZE, TIMESTAMP_FIELD
from pyhousesigma._crypto.aes import aes_ctr_transform
from pyhousesigma._crypto.context import ContextStore, EncryptionContext
from pyhousesigma._crypto.keys import normalize_key
from pyhousesigma._crypto.rsa import load_public_key, oaep_wrap
from pyhousesigma.exceptions import HsCorruptResponseError, HsCryptoError, HsSequenceError
from pyhousesigma.models.envelope import EncryptedEnvelope

_logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _request_timestamp() -> str:
    """Current epoch time in whole seconds as decimal text."""
    return str(int(time.time()))


def _payload_to_dict(payload: Mapping[str, Any] | BaseModel) -> dict[str, Any]:
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", by_alias=True)
    if isinstance(payload, Mapping):
        return dict(payload)
    raise TypeError(f"Request payload must be a mapping or pydantic model, got {type(payload).__name__}")


def serialize_request(payload: Mapping[str, Any] | BaseModel, timestamp: str) -> bytes:
    """Merge *timestamp* into *payload* and return compact UTF-8 JSON.

    The caller's mapping is left untouched.
    """
    body = {**_payload_to_dict(payload), TIMESTAMP_FIELD: timestamp}
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


class PayloadCipher:
    """Client side of the encrypted request/response protocol.

    Parameters
    ----------
    public_key_pem : str or None
        The service's RSA public key.  Parsed on first use; a missing or
        malformed key surfaces as :class:`HsConfigError` from
        :meth:`encrypt_request`.
    store : ContextStore or None
        Optional single-slot store.  When given, every request overwrites
        it and :meth:`decrypt_response` falls back to it when no explicit
        context is passed.
    """

    def __init__(self, public_key_pem: str | None, *, store: ContextStore | None = None) -> None:
        self._public_key_pem = public_key_pem
        self._public_key: RSAPublicKey | None = None
        self.store = store

    def _load_public_key(self) -> RSAPublicKey:
        if self._public_key is None:
            self._public_key = load_public_key(self._public_key_pem)
            _logger.debug("Loaded RSA public key (%d bits)", self._public_key.key_size)
        return self._public_key

    def encrypt_request(
        self,
        payload: Mapping[str, Any] | BaseModel,
        secret_key: str,
    ) -> tuple[EncryptedEnvelope, EncryptionContext]:
        """Encrypt a request body.

        Parameters
        ----------
        payload : Mapping or BaseModel
            JSON object to send.  ``hs_request_timestamp`` is added.
        secret_key : str
            Secret from the access token response, not pre-normalized.

        Returns
        -------
        tuple[EncryptedEnvelope, EncryptionContext]
            The wire envelope and the context needed to decrypt the reply.

        Raises
        ------
        HsConfigError
            If the RSA public key is missing or invalid.  Nothing else
            has happened at that point.
        """
        public_key = self._load_public_key()

        timestamp = _request_timestamp()
        plaintext = serialize_request(payload, timestamp)
        key = normalize_key(secret_key)
        counter = secrets.token_bytes(COUNTER_SIZE)

        ciphertext = aes_ctr_transform(plaintext, key, counter)
        wrapped_counter = oaep_wrap(public_key, counter)

        envelope = EncryptedEnvelope(
            ctr=base64.b64encode(wrapped_counter).decode("ascii"),
            et_payload=base64.b64encode(ciphertext).decode("ascii"),
        )
        context = EncryptionContext(counter=counter, secret_key=secret_key, timestamp=timestamp)
        if self.store is not None:
            self.store.set(context)

        _logger.debug(
            "Encrypted request ts=%s plaintext=%db ctr=%db",
            timestamp,
            len(plaintext),
            len(wrapped_counter),
        )
        return envelope, context

    def _resolve_context(self, context: EncryptionContext | None) -> EncryptionContext:
        if context is not None:
            return context
        stored = self.store.get() if self.store is not None else None
        if stored is None:
            raise HsSequenceError("No encryption context available. Must encrypt a request first.")
        return stored

    def decrypt_response(self, data: str, context: EncryptionContext | None = None) -> Any:
        """Decrypt a response body back into its JSON value.

        Parameters
        ----------
        data : str
            Base64 text from the response's ``data`` field.  Whitespace
            (e.g. line wrapping) is ignored; any other non-alphabet
            character is an error.
        context : EncryptionContext or None
            Context returned with the matching request.  Defaults to the
            store's current context.

        Raises
        ------
        HsSequenceError
            No context given and none stored.
        HsCryptoError
            Body is not base64, is empty, or the cipher fails.
        HsCorruptResponseError
            Decrypted bytes are not gzip-compressed UTF-8 JSON.
        """
        ctx = self._resolve_context(context)

        try:
            ciphertext = base64.b64decode("".join(data.split()), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise HsCryptoError(f"Invalid base64 in encrypted response: {exc}") from exc
        if not ciphertext:
            raise HsCryptoError("Encrypted response is empty")

        compressed = aes_ctr_transform(ciphertext, ctx.key, ctx.counter)

        try:
            decompressed = gzip.decompress(compressed)
        except (OSError, EOFError, zlib.error) as exc:
            raise HsCorruptResponseError(
                f"Response is not gzip data after decryption (wrong context or corrupted body): {exc}"
            ) from exc

        try:
            result = json.loads(decompressed.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise HsCorruptResponseError(f"Decrypted response is not JSON: {exc}") from exc

        _logger.debug("Decrypted response ts=%s payload=%db", ctx.timestamp, len(decompressed))
        return result

    def decrypt_response_as(
        self,
        data: str,
        model: type[ModelT],
        context: EncryptionContext | None = None,
    ) -> ModelT:
        """Decrypt a response and validate it into *model*."""
        value = self.decrypt_response(data, context)
        try:
            return model.model_validate(value)
        except ValidationError as exc:
            raise HsCorruptResponseError(
                f"Decrypted response does not match {model.__name__}: {exc.error_count()} error(s)"
            ) from exc
