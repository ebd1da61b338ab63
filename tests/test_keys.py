from __future__ import annotations

from pyhousesigma._crypto.keys import normalize_key


def test_short_secret_is_padded_with_asterisks() -> None:
    key = normalize_key("abc")
    assert len(key) == 16
    assert key[:3] == b"abc"
    assert key[3:] == b"*" * 13


def test_long_secret_is_truncated_to_first_16_bytes() -> None:
    secret = "0123456789abcdefWXYZ"
    assert normalize_key(secret) == b"0123456789abcdef"


def test_exact_length_secret_is_unchanged() -> None:
    assert normalize_key("0123456789abcdef") == b"0123456789abcdef"


def test_empty_secret_is_all_padding() -> None:
    assert normalize_key("") == b"*" * 16


def test_multibyte_secret_truncates_on_bytes_not_characters() -> None:
    # 6 x 3-byte characters = 18 bytes; truncation may split a character.
    secret = "€" * 6
    key = normalize_key(secret)
    assert len(key) == 16
    assert key == secret.encode("utf-8")[:16]
