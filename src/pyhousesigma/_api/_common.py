"""Shared helpers for listing API endpoint modules.

This module centralizes the repeated patterns:
- checking the ``status``/``error`` wrapper every endpoint returns
- posting a bearer-authenticated plain JSON request
- posting an encrypted request and decrypting its ``data`` field

It is internal to pyhousesigma and may change at any time.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from pyhousesigma._constants import TIMESTAMP_HEADER
from pyhousesigma._crypto.payload import ModelT, PayloadCipher
from pyhousesigma._redact import redact_for_log
from pyhousesigma._transport import Transport
from pyhousesigma.exceptions import HsApiError
from pyhousesigma.session import Session

_logger = logging.getLogger(__name__)


def raise_for_status(
    *,
    endpoint: str,
    response: Mapping[str, Any],
    error_cls: type[HsApiError] = HsApiError,
) -> None:
    """Raise *error_cls* unless the response reports ``status: true``."""
    if response.get("status") is True:
        return
    error = response.get("error")
    if not isinstance(error, Mapping):
        error = {}
    code = str(error.get("code", ""))
    message = str(error.get("message", ""))
    raise error_cls(
        f"{endpoint} failed: code={code} message={message}",
        code=code,
        endpoint=endpoint,
    )


async def post_authorized_json(
    *,
    endpoint: str,
    session: Session,
    transport: Transport,
    body: Mapping[str, Any],
) -> dict[str, Any]:
    """POST a plain JSON body with bearer auth and return the ``data`` dict."""
    response = await transport.post_json(
        endpoint,
        body,
        headers={"authorization": session.authorization()},
    )
    _logger.debug("%s response=%s", endpoint, redact_for_log(response, max_string=128))
    raise_for_status(endpoint=endpoint, response=response)

    data = response.get("data")
    if not isinstance(data, dict):
        raise HsApiError(f"{endpoint} response missing data", code="missing_data", endpoint=endpoint)
    return data


async def post_encrypted_json(
    *,
    endpoint: str,
    session: Session,
    transport: Transport,
    cipher: PayloadCipher,
    payload: Mapping[str, Any] | BaseModel,
    model: type[ModelT],
) -> ModelT:
    """Encrypt *payload*, POST it and decrypt the reply into *model*.

    The context returned by the cipher is used only for this exchange,
    so concurrent calls never decrypt with each other's counters.
    """
    envelope, context = cipher.encrypt_request(payload, session.secret_key)
    response = await transport.post_json(
        endpoint,
        envelope.as_body(),
        headers={
            "authorization": session.authorization(),
            TIMESTAMP_HEADER: context.timestamp,
        },
    )
    _logger.debug("%s response=%s", endpoint, redact_for_log(response, max_string=128))

    if response.get("status") is False:
        raise_for_status(endpoint=endpoint, response=response)

    encrypted = response.get("data")
    if not isinstance(encrypted, str) or not encrypted:
        raise HsApiError(
            f"No encrypted data received from {endpoint}",
            code="missing_data",
            endpoint=endpoint,
        )
    return cipher.decrypt_response_as(encrypted, model, context)
