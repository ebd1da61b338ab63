from __future__ import annotations

import base64
import gzip
import json

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from pydantic import BaseModel

from pyhousesigma._crypto import payload as payload_module
from pyhousesigma._crypto.context import ContextStore, EncryptionContext
from pyhousesigma._crypto.payload import PayloadCipher, serialize_request
from pyhousesigma.exceptions import (
    HsConfigError,
    HsCorruptResponseError,
    HsCryptoError,
    HsSequenceError,
)

SECRET = "abcdef"


@pytest.fixture
def cipher(server) -> PayloadCipher:
    return PayloadCipher(server.public_key_pem)


def test_request_plaintext_is_uncompressed_timestamped_json(cipher: PayloadCipher, server) -> None:
    payload = {"id_listing": ["X1", "X2"], "lang": "en_US"}
    envelope, context = cipher.encrypt_request(payload, SECRET)

    plaintext = server.ctr(base64.b64decode(envelope.et_payload), SECRET, context.counter)
    expected = json.dumps(
        {**payload, "hs_request_timestamp": context.timestamp},
        separators=(",", ":"),
    ).encode("utf-8")
    assert plaintext == expected


def test_wrapped_counter_unwraps_to_context_counter(cipher: PayloadCipher, server) -> None:
    envelope, context = cipher.encrypt_request({"a": 1}, SECRET)
    assert server.unwrap_counter(envelope.ctr) == context.counter
    assert len(context.counter) == 16


def test_envelope_sizes_match_key_and_plaintext(cipher: PayloadCipher, rsa_private_key) -> None:
    envelope, context = cipher.encrypt_request({"id_listing": ["X1", "X2"]}, SECRET)

    assert len(base64.b64decode(envelope.ctr)) == rsa_private_key.key_size // 8
    serialized = serialize_request({"id_listing": ["X1", "X2"]}, context.timestamp)
    assert len(base64.b64decode(envelope.et_payload)) == len(serialized)


def test_timestamp_is_ten_ascii_digits(cipher: PayloadCipher) -> None:
    _envelope, context = cipher.encrypt_request({}, SECRET)
    assert len(context.timestamp) == 10
    assert context.timestamp.isascii() and context.timestamp.isdigit()


def test_timestamp_comes_from_wall_clock_seconds(cipher: PayloadCipher, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(payload_module.time, "time", lambda: 1771234567.987)
    _envelope, context = cipher.encrypt_request({}, SECRET)
    assert context.timestamp == "1771234567"


def test_same_input_encrypts_differently_each_time(cipher: PayloadCipher) -> None:
    first, first_ctx = cipher.encrypt_request({"id_listing": ["X1"]}, SECRET)
    second, second_ctx = cipher.encrypt_request({"id_listing": ["X1"]}, SECRET)
    assert first.ctr != second.ctr
    assert first_ctx.counter != second_ctx.counter
    # Timestamps may match within the same second; counters alone must differ the ciphertext.
    assert first.et_payload != second.et_payload


def test_caller_payload_is_not_mutated(cipher: PayloadCipher) -> None:
    payload = {"id_listing": ["X1"]}
    cipher.encrypt_request(payload, SECRET)
    assert payload == {"id_listing": ["X1"]}


def test_pydantic_payload_is_dumped_by_alias(cipher: PayloadCipher, server) -> None:
    class Preview(BaseModel):
        ids: list[str]

    envelope, context = cipher.encrypt_request(Preview(ids=["X1"]), SECRET)
    plaintext = server.ctr(base64.b64decode(envelope.et_payload), SECRET, context.counter)
    assert json.loads(plaintext) == {"ids": ["X1"], "hs_request_timestamp": context.timestamp}


def test_non_ascii_payload_is_sent_as_utf8(cipher: PayloadCipher, server) -> None:
    envelope, context = cipher.encrypt_request({"city": "Montréal"}, SECRET)
    plaintext = server.ctr(base64.b64decode(envelope.et_payload), SECRET, context.counter)
    assert "Montréal".encode() in plaintext


def test_non_mapping_payload_is_rejected(cipher: PayloadCipher) -> None:
    with pytest.raises(TypeError, match="mapping"):
        cipher.encrypt_request(["not", "an", "object"], SECRET)  # type: ignore[arg-type]


@pytest.mark.parametrize("pem", [None, "", "   ", "-----BEGIN PUBLIC KEY-----\nnope\n-----END PUBLIC KEY-----\n"])
def test_missing_or_malformed_key_fails_before_any_state_change(
    pem: str | None,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def _no_randomness(_n: int) -> bytes:
        raise AssertionError("randomness generated before key validation")

    monkeypatch.setattr(payload_module.secrets, "token_bytes", _no_randomness)
    store = ContextStore()
    previous = EncryptionContext(counter=b"\x01" * 16, secret_key="old", timestamp="1700000000")
    store.set(previous)

    cipher = PayloadCipher(pem, store=store)
    with pytest.raises(HsConfigError):
        cipher.encrypt_request({"a": 1}, SECRET)
    assert store.get() is previous


def test_non_rsa_key_is_a_config_error() -> None:
    ec_pem = (
        ec.generate_private_key(ec.SECP256R1())
        .public_key()
        .public_bytes(serialization.Encoding.PEM, serialization.PublicFormat.SubjectPublicKeyInfo)
        .decode("ascii")
    )
    with pytest.raises(HsConfigError, match="RSA"):
        PayloadCipher(ec_pem).encrypt_request({}, SECRET)


def test_response_round_trip_with_returned_context(cipher: PayloadCipher, server) -> None:
    envelope, context = cipher.encrypt_request({"id_listing": ["X1"]}, SECRET)
    _plaintext, counter = server.decrypt_request(envelope.as_body(), SECRET)

    reply = server.encrypt_response({"houseList": [{"id_listing": "X1"}]}, SECRET, counter)
    assert cipher.decrypt_response(reply, context) == {"houseList": [{"id_listing": "X1"}]}


def test_decrypt_without_context_raises_sequence_error(cipher: PayloadCipher) -> None:
    with pytest.raises(HsSequenceError):
        cipher.decrypt_response("AAAA")


def test_decrypt_with_empty_store_raises_sequence_error(server) -> None:
    cipher = PayloadCipher(server.public_key_pem, store=ContextStore())
    with pytest.raises(HsSequenceError):
        cipher.decrypt_response("AAAA")


def test_store_tracks_latest_request(server) -> None:
    store = ContextStore()
    cipher = PayloadCipher(server.public_key_pem, store=store)

    _first, first_ctx = cipher.encrypt_request({"n": 1}, SECRET)
    envelope, second_ctx = cipher.encrypt_request({"n": 2}, SECRET)
    assert store.get() is second_ctx

    reply = server.encrypt_response({"ok": True}, SECRET, server.unwrap_counter(envelope.ctr))
    assert cipher.decrypt_response(reply) == {"ok": True}
    # Decrypting leaves the store as it was.
    assert store.get() is second_ctx
    assert first_ctx is not second_ctx


def test_explicit_context_wins_over_store(server) -> None:
    store = ContextStore()
    cipher = PayloadCipher(server.public_key_pem, store=store)

    first_env, first_ctx = cipher.encrypt_request({"n": 1}, SECRET)
    cipher.encrypt_request({"n": 2}, SECRET)

    reply = server.encrypt_response({"n": 1}, SECRET, server.unwrap_counter(first_env.ctr))
    assert cipher.decrypt_response(reply, first_ctx) == {"n": 1}
    with pytest.raises(HsCorruptResponseError):
        cipher.decrypt_response(reply)


def test_non_gzip_plaintext_is_corrupt_response_not_crypto_error(cipher: PayloadCipher, server) -> None:
    _envelope, context = cipher.encrypt_request({}, SECRET)
    reply = base64.b64encode(server.ctr(b'{"not":"gzipped"}', SECRET, context.counter)).decode("ascii")

    with pytest.raises(HsCorruptResponseError) as exc_info:
        cipher.decrypt_response(reply, context)
    assert not isinstance(exc_info.value, HsCryptoError)


def test_wrong_secret_is_corrupt_response(cipher: PayloadCipher, server) -> None:
    _envelope, context = cipher.encrypt_request({}, SECRET)
    reply = server.encrypt_response({"a": 1}, "another-secret", context.counter)
    with pytest.raises(HsCorruptResponseError):
        cipher.decrypt_response(reply, context)


def test_gzip_of_non_json_is_corrupt_response(cipher: PayloadCipher, server) -> None:
    _envelope, context = cipher.encrypt_request({}, SECRET)
    data = server.ctr(gzip.compress(b"<html>oops</html>"), SECRET, context.counter)
    with pytest.raises(HsCorruptResponseError, match="not JSON"):
        cipher.decrypt_response(base64.b64encode(data).decode("ascii"), context)


@pytest.mark.parametrize("body", ["not base64!!", "", "QQ"])
def test_malformed_ciphertext_is_crypto_error(cipher: PayloadCipher, body: str) -> None:
    _envelope, context = cipher.encrypt_request({}, SECRET)
    with pytest.raises(HsCryptoError):
        cipher.decrypt_response(body, context)


def test_line_wrapped_base64_reply_decrypts(cipher: PayloadCipher, server) -> None:
    _envelope, context = cipher.encrypt_request({}, SECRET)
    value = {"houseList": [{"id_listing": f"X{i}", "address": "1 Queen St W"} for i in range(20)]}
    reply = server.encrypt_response(value, SECRET, context.counter)
    assert len(reply) > 76
    wrapped = "\n".join(reply[i : i + 76] for i in range(0, len(reply), 76)) + "\r\n"
    assert cipher.decrypt_response(wrapped, context) == value


def test_decrypt_response_as_validates_model(cipher: PayloadCipher, server) -> None:
    class Reply(BaseModel):
        count: int

    _envelope, context = cipher.encrypt_request({}, SECRET)
    good = server.encrypt_response({"count": 3}, SECRET, context.counter)
    assert cipher.decrypt_response_as(good, Reply, context).count == 3

    bad = server.encrypt_response({"count": "many"}, SECRET, context.counter)
    with pytest.raises(HsCorruptResponseError, match="Reply"):
        cipher.decrypt_response_as(bad, Reply, context)
