"""Helpers for safe debug logging.

The listing API hands out bearer tokens and AES secrets, and its encrypted
endpoints exchange wrapped counters and ciphertext.  Credentials are
replaced outright; ciphertext is reduced to its length so a log still
shows that an envelope was present and roughly how large it was.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

#: Keys whose values are credentials and never logged in any form.
_CREDENTIAL_KEYS: frozenset[str] = frozenset(
    {
        "access_token",
        "secret_key",
        "token",
        "authorization",
        "cookie",
    }
)

#: Keys of the request envelope; always ciphertext.
_ENVELOPE_KEYS: frozenset[str] = frozenset({"ctr", "et_payload"})

#: Response field holding the encrypted reply as a string, or plain data
#: as an object on unencrypted endpoints.
_RESPONSE_DATA_KEY = "data"

_MAX_DEPTH = 20


def _ciphertext_marker(value: Any) -> str:
    size = len(value) if isinstance(value, (str, bytes, bytearray)) else 0
    return f"<ciphertext:{size}b64>"


def _redact_field(key: str, value: Any, max_string: int, depth: int) -> Any:
    lowered = key.lower()
    if lowered in _CREDENTIAL_KEYS:
        return "<redacted>"
    if lowered in _ENVELOPE_KEYS:
        return _ciphertext_marker(value)
    if lowered == _RESPONSE_DATA_KEY and isinstance(value, str):
        return _ciphertext_marker(value)
    return redact_for_log(value, max_string=max_string, _depth=depth + 1)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a copy of *value* that is safe to emit in DEBUG logs.

    * credential fields become ``"<redacted>"``
    * ``ctr``/``et_payload`` and string ``data`` fields become
      ``"<ciphertext:Nb64>"``; object ``data`` fields are walked normally
    * raw bytes become ``"<bytes:Nb>"`` and long strings are truncated
    """
    if _depth > _MAX_DEPTH:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        return {str(k): _redact_field(str(k), v, max_string, _depth) for k, v in value.items()}

    if isinstance(value, Sequence):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]

    return f"<{type(value).__name__}>"
