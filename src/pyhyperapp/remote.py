"""Remote client for the app's HTTP API binding.

The app exposes each HTTP handler through a single ``/api`` path.  A call
is a POST whose body is a one-key object naming the handler variant, for
example ``{"PingHttp": "{\\"message\\":\\"hi\\"}"}``.  Handlers returning a
``Result`` answer with ``{"Ok": ...}`` or ``{"Err": "..."}``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

from pydantic import ValidationError

from pyhyperapp._transport import RawResponse, Transport
from pyhyperapp.config import HyperappConfig
from pyhyperapp.exceptions import HyperappApiError, HyperappTransportError
from pyhyperapp.models.counters import CounterSnapshot

_logger = logging.getLogger(__name__)


class RemoteClient(Protocol):
    """Executes a named operation and resolves to the latest counters."""

    async def call(self, operation: str, payload: str) -> CounterSnapshot:
        ...


class RawPoster(Protocol):
    """Sends an arbitrary body to the API path without interpreting the reply."""

    async def post_raw(self, body: Mapping[str, Any]) -> RawResponse:
        ...


def variant_name(operation: str) -> str:
    """Map a handler name to its request variant (``ping_http`` -> ``PingHttp``)."""
    return "".join(part[:1].upper() + part[1:] for part in operation.split("_") if part)


class HyperappRemoteClient:
    """`RemoteClient` and `RawPoster` over an HTTP transport."""

    def __init__(self, config: HyperappConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    async def post_raw(self, body: Mapping[str, Any]) -> RawResponse:
        return await self._transport.post_json(self._config.api_path, body)

    async def call(self, operation: str, payload: str) -> CounterSnapshot:
        """Invoke *operation* with a serialized *payload*.

        Raises
        ------
        HyperappApiError
            The app rejected the call (non-2xx status or an ``Err`` result).
        HyperappTransportError
            The request failed or the reply was not a counter snapshot.
        """
        endpoint = self._config.api_path
        response = await self._transport.post_json(endpoint, {variant_name(operation): payload})

        if not response.ok:
            raise HyperappApiError(
                f"HTTP request failed with status {response.status}",
                details=response.text or None,
                operation=operation,
                status_code=response.status,
            )

        try:
            decoded = json.loads(response.text)
        except json.JSONDecodeError as exc:
            raise HyperappTransportError(
                f"Invalid JSON from {operation}: {response.text[:200]}",
                status_code=response.status,
                endpoint=endpoint,
            ) from exc

        # Result-returning handlers wrap their value.
        if isinstance(decoded, dict) and len(decoded) == 1:
            if "Err" in decoded:
                err = decoded["Err"]
                raise HyperappApiError(
                    f"{operation} failed",
                    details=err if isinstance(err, str) else json.dumps(err),
                    operation=operation,
                    status_code=response.status,
                )
            if "Ok" in decoded:
                decoded = decoded["Ok"]

        # Handlers that return JSON as a string are decoded once more.
        if isinstance(decoded, str):
            try:
                decoded = json.loads(decoded)
            except json.JSONDecodeError as exc:
                raise HyperappTransportError(
                    f"{operation} returned a non-JSON string: {decoded[:200]}",
                    status_code=response.status,
                    endpoint=endpoint,
                ) from exc

        if not isinstance(decoded, dict):
            raise HyperappTransportError(
                f"{operation} returned {type(decoded).__name__}, expected an object",
                status_code=response.status,
                endpoint=endpoint,
            )

        try:
            snapshot = CounterSnapshot.model_validate(decoded)
        except ValidationError as exc:
            raise HyperappTransportError(
                f"{operation} returned an invalid counter snapshot: {exc.error_count()} error(s)",
                status_code=response.status,
                endpoint=endpoint,
            ) from exc

        _logger.debug("%s -> %r", operation, snapshot)
        return snapshot
