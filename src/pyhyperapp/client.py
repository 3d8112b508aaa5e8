"""High-level async client for a Hyperware counter app."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

from pyhyperapp._constants import EMPTY_PAYLOAD, OP_GET_COUNTERS, OP_PING_HTTP, OP_SEND_MESSAGE
from pyhyperapp._transport import HttpTransport, RawResponse
from pyhyperapp.config import HyperappConfig
from pyhyperapp.exceptions import HyperappError
from pyhyperapp.identity import IdentityProvider, StaticIdentityProvider
from pyhyperapp.models.counters import CounterSnapshot
from pyhyperapp.models.requests import PingRequest, SendMessageRequest, SendMode
from pyhyperapp.remote import HyperappRemoteClient
from pyhyperapp.state.store import CounterStore

_logger = logging.getLogger(__name__)


class HyperappClient:
    """Async client for the app's HTTP API.

    Usage::

        async with HyperappClient(config) as client:
            store = client.create_store()
            await store.initialize()
    """

    def __init__(
        self,
        config: HyperappConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._remote: HyperappRemoteClient | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> HyperappClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        transport = HttpTransport(self._config, self._http_session)
        self._remote = HyperappRemoteClient(self._config, transport)
        _logger.debug("Client opened for %s", self._config.api_url)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._remote = None

    def _require_remote(self) -> HyperappRemoteClient:
        if self._remote is None:
            raise HyperappError("Client not initialized. Use 'async with HyperappClient(...) as client:'")
        return self._remote

    # ------------------------------------------------------------------
    # RemoteClient / RawPoster
    # ------------------------------------------------------------------

    async def call(self, operation: str, payload: str) -> CounterSnapshot:
        return await self._require_remote().call(operation, payload)

    async def post_raw(self, body: Mapping[str, Any]) -> RawResponse:
        return await self._require_remote().post_raw(body)

    # ------------------------------------------------------------------
    # Typed operations
    # ------------------------------------------------------------------

    async def get_counters(self) -> CounterSnapshot:
        """Fetch the current counters."""
        return await self.call(OP_GET_COUNTERS, EMPTY_PAYLOAD)

    async def ping_http(self, message: str) -> CounterSnapshot:
        """Count an HTTP message; returns the updated counters."""
        return await self.call(OP_PING_HTTP, PingRequest(message=message).to_payload())

    async def send_message(
        self,
        message: str,
        *,
        mode: SendMode | str = SendMode.LOCAL,
        target_node: str | None = None,
    ) -> CounterSnapshot:
        """Send a message locally or to another node."""
        request = SendMessageRequest(mode=SendMode(mode), message=message, target_node=target_node)
        return await self.call(OP_SEND_MESSAGE, request.to_payload())

    # ------------------------------------------------------------------
    # Store
    # ------------------------------------------------------------------

    def create_store(self, identity: IdentityProvider | None = None) -> CounterStore:
        """Build a store backed by this client.

        The identity defaults to ``config.node_id``.
        """
        if identity is None:
            identity = StaticIdentityProvider(self._config.node_id)
        return CounterStore(self, self, identity)
