"""Client configuration for pyhousesigma."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyhousesigma._constants import BASE_URL, DEFAULT_RSA_PUBLIC_KEY_PEM


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class MapViewport:
    """Bounding box and zoom sent with every map search.

    ``(lat1, lon1)`` is the north-east corner and ``(lat2, lon2)`` the
    south-west corner.  The defaults cover central Toronto.
    """

    lat1: float = 43.685727740437414
    lon1: float = -79.31676821124077
    lat2: float = 43.63263652332526
    lon2: float = -79.42242578875548
    zoom: int = 14


@dataclasses.dataclass(frozen=True)
class HsConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        API base URL.
    language : str
        Language code sent as ``lang`` (e.g. ``"en_US"``).
    province : str
        Two-letter province code (e.g. ``"ON"``).
    rsa_public_key_pem : str or None
        RSA public key of the service, used to wrap the per-request AES
        counter.  Defaults to the key the service currently publishes.
    session_margin : float
        Seconds before the token's ``expired_at`` at which the session is
        already treated as expired and refreshed.
    cache_enabled : bool
        Skip listing ids that were already returned by this client.
    viewport : MapViewport
        Map area for listing searches.
    """

    base_url: str = BASE_URL
    language: str = "en_US"
    province: str = "ON"
    rsa_public_key_pem: str | None = DEFAULT_RSA_PUBLIC_KEY_PEM
    session_margin: float = 30.0
    cache_enabled: bool = True
    viewport: MapViewport = dataclasses.field(default_factory=MapViewport)

    @classmethod
    def from_env(cls, **overrides: Any) -> HsConfig:
        """Create configuration from ``HS_*`` environment variables.

        Explicit keyword arguments override environment values.
        ``HS_RSA_PUBLIC_KEY_FILE`` is read when ``HS_RSA_PUBLIC_KEY`` is
        not set.
        """
        env = os.environ

        viewport_kwargs: dict[str, Any] = {}
        _ENV_VIEWPORT_MAP = {
            "HS_LAT1": "lat1",
            "HS_LON1": "lon1",
            "HS_LAT2": "lat2",
            "HS_LON2": "lon2",
        }
        for env_key, field_name in _ENV_VIEWPORT_MAP.items():
            val = env.get(env_key)
            if val is not None:
                viewport_kwargs[field_name] = float(val)
        zoom_env = env.get("HS_ZOOM")
        if zoom_env is not None:
            viewport_kwargs["zoom"] = int(zoom_env)

        viewport_overrides = overrides.pop("viewport", None)
        if isinstance(viewport_overrides, dict):
            viewport_kwargs.update(viewport_overrides)
        elif isinstance(viewport_overrides, MapViewport):
            viewport_kwargs = dataclasses.asdict(viewport_overrides)

        config_kwargs: dict[str, Any] = {"viewport": MapViewport(**viewport_kwargs)}

        _ENV_CONFIG_MAP = {
            "HS_BASE_URL": "base_url",
            "HS_LANGUAGE": "language",
            "HS_PROVINCE": "province",
            "HS_RSA_PUBLIC_KEY": "rsa_public_key_pem",
        }
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        key_file = env.get("HS_RSA_PUBLIC_KEY_FILE")
        if key_file and "rsa_public_key_pem" not in config_kwargs:
            with open(key_file, encoding="ascii") as fh:
                config_kwargs["rsa_public_key_pem"] = fh.read()

        margin_env = env.get("HS_SESSION_MARGIN")
        if margin_env is not None and "session_margin" not in overrides:
            config_kwargs["session_margin"] = float(margin_env)

        if "cache_enabled" not in overrides:
            config_kwargs["cache_enabled"] = _env_bool(env.get("HS_CACHE_ENABLED"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
