"""Access token model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class AuthToken(BaseModel):
    """Token returned by the access token endpoint.

    Parameters
    ----------
    access_token : str
        Bearer token for authenticated endpoints.
    secret_key : str
        Secret used as the AES key source for encrypted endpoints.
    expired_at : int
        Epoch seconds after which both values are no longer accepted.
    created_at : int or None
        Epoch seconds the secret was issued.
    version : str or None
        Secret version reported by the service.
    raw : dict
        Full decoded ``data`` dict for access to additional fields.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str
    secret_key: str
    expired_at: int
    created_at: int | None = None
    version: str | None = None
    raw: dict[str, Any]
