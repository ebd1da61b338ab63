"""HTTP transport for the listing API."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyhousesigma._constants import USER_AGENT
from pyhousesigma.config import HsConfig
from pyhousesigma.exceptions import HsTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Endpoint modules only need to POST a JSON object and get a JSON
    object back, so tests can pass a fake backend in place of
    :class:`HttpTransport`.
    """

    async def post_json(
        self,
        endpoint: str,
        body: Mapping[str, Any],
        *,
        headers: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        ...


class HttpTransport:
    """aiohttp-backed JSON transport.

    Encryption happens above this layer; the transport only moves JSON
    bodies and extra headers.  No retries or timeouts are applied here
    beyond what the caller configured on the ``aiohttp.ClientSession``.
    """

    def __init__(self, config: HsConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    async def post_json(
        self,
        endpoint: str,
        body: Mapping[str, Any],
        *,
        headers: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        """POST *body* as JSON and return the decoded JSON object.

        Raises
        ------
        HsTransportError
            On connection errors, non-200 status, or a body that is not
            a JSON object.
        """
        request_headers: dict[str, str] = {
            "accept": "application/json, text/plain, */*",
            "content-type": "application/json",
            "user-agent": USER_AGENT,
        }
        if headers:
            request_headers.update(headers)

        url = f"{self._config.base_url}{endpoint}"
        data = json.dumps(body, separators=(",", ":"), ensure_ascii=False)

        _logger.debug("POST %s (%d bytes)", url, len(data))

        try:
            async with self._http.post(url, data=data.encode("utf-8"), headers=request_headers) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise HsTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except HsTransportError:
            raise
        except aiohttp.ClientError as exc:
            raise HsTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            result = json.loads(text)
        except json.JSONDecodeError as exc:
            raise HsTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if not isinstance(result, dict):
            raise HsTransportError(
                f"Expected a JSON object from {endpoint}, got {type(result).__name__}",
                endpoint=endpoint,
            )
        return result
