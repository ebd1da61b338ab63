"""Access token endpoint.

Endpoint:
  - /bkv2/api/init/accesstoken/new
"""

from __future__ import annotations

import logging
from typing import Any

from pyhousesigma._api._common import raise_for_status
from pyhousesigma._constants import TOKEN_ENDPOINT
from pyhousesigma._redact import redact_for_log
from pyhousesigma._transport import Transport
from pyhousesigma.config import HsConfig
from pyhousesigma.exceptions import HsAuthenticationError
from pyhousesigma.models.token import AuthToken

_logger = logging.getLogger(__name__)


def build_token_request(config: HsConfig) -> dict[str, str]:
    return {"lang": config.language, "province": config.province}


def _optional_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_token_response(response: dict[str, Any]) -> AuthToken:
    """Extract the access token and secret from a token response.

    Parameters
    ----------
    response : dict
        Decoded JSON body of the token endpoint.

    Returns
    -------
    AuthToken
        Parsed token.

    Raises
    ------
    HsAuthenticationError
        If the service reported failure or a required field is missing.
    """
    raise_for_status(endpoint=TOKEN_ENDPOINT, response=response, error_cls=HsAuthenticationError)

    data = response.get("data")
    if not isinstance(data, dict):
        raise HsAuthenticationError("Token response missing data", endpoint=TOKEN_ENDPOINT)
    _logger.debug("Token response parsed=%s", redact_for_log(data))

    secret = data.get("secret")
    if not isinstance(secret, dict):
        secret = {}
    access_token = data.get("access_token")
    secret_key = secret.get("secret_key")
    expired_at = _optional_int(secret.get("expired_at"))

    if not access_token or not secret_key or expired_at is None:
        raise HsAuthenticationError("Token response missing token fields", endpoint=TOKEN_ENDPOINT)

    version = secret.get("version")
    return AuthToken(
        access_token=str(access_token),
        secret_key=str(secret_key),
        expired_at=expired_at,
        created_at=_optional_int(secret.get("created_at")),
        version=str(version) if version is not None else None,
        raw=data,
    )


async def fetch_token(config: HsConfig, transport: Transport) -> AuthToken:
    """Request a fresh access token and secret."""
    response = await transport.post_json(TOKEN_ENDPOINT, build_token_request(config))
    return parse_token_response(response)
