"""Session state for authenticated API calls."""

from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field

#: Seconds before ``expired_at`` at which a session counts as expired.
DEFAULT_SESSION_MARGIN: float = 30.0


class Session(BaseModel):
    """Access token and secret obtained from the token endpoint.

    Parameters
    ----------
    access_token : str
        Bearer token for authenticated endpoints.
    secret_key : str
        Secret the encrypted endpoints derive their AES key from.
    expired_at : float
        Epoch seconds (wall clock) at which the service stops accepting
        the token.
    margin : float
        Refresh this many seconds before ``expired_at``.
    """

    # secret_key is stored verbatim; it feeds the AES key derivation.
    model_config = ConfigDict(frozen=True, extra="forbid")

    access_token: str
    secret_key: str = Field(repr=False)
    expired_at: float
    margin: float = DEFAULT_SESSION_MARGIN

    @property
    def is_expired(self) -> bool:
        """Whether the token is at (or within ``margin`` of) its expiry."""
        return time.time() >= self.expired_at - self.margin

    @property
    def remaining(self) -> float:
        """Seconds until ``expired_at`` (negative once past it)."""
        return self.expired_at - time.time()

    def authorization(self) -> str:
        return f"Bearer {self.access_token}"
