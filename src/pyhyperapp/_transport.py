"""HTTP transport for the app's API binding."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp

from pyhyperapp._constants import USER_AGENT
from pyhyperapp._redact import redact_body
from pyhyperapp.config import HyperappConfig
from pyhyperapp.exceptions import HyperappTransportError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RawResponse:
    """Status and body text of an HTTP response, uninterpreted."""

    status: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    """Structural transport interface used by the remote client.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def post_json(self, path: str, body: Mapping[str, Any]) -> RawResponse:
        ...


class HttpTransport:
    """POSTs JSON bodies to paths under the configured base URL."""

    def __init__(
        self,
        config: HyperappConfig,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._http = http_session
        timeout = config.request_timeout if config.request_timeout > 0 else None
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def post_json(self, path: str, body: Mapping[str, Any]) -> RawResponse:
        """POST *body* as JSON and return the response without interpreting it.

        Only network-level failures raise; any HTTP status is returned. Body
        bytes that do not decode are replaced rather than rejected.
        """
        url = f"{self._config.base_url.rstrip('/')}{path}"
        data = json.dumps(body, separators=(",", ":"))
        headers = {
            "content-type": "application/json",
            "user-agent": USER_AGENT,
        }

        _logger.debug("POST %s", url)
        if self._config.api_trace_enabled:
            _logger.debug("POST %s body=%s", url, redact_body(data))

        try:
            async with self._http.post(url, data=data, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text(errors="replace")
                status = resp.status
        except TimeoutError as exc:
            raise HyperappTransportError(f"Request to {path} timed out", endpoint=path) from exc
        except aiohttp.ClientError as exc:
            raise HyperappTransportError(f"Request to {path} failed: {exc}", endpoint=path) from exc

        _logger.debug("POST %s -> %d", url, status)
        if self._config.api_trace_enabled:
            _logger.debug("POST %s response=%s", url, redact_body(text))
        return RawResponse(status=status, text=text)
