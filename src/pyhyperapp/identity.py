"""Node identity providers."""

from __future__ import annotations

from typing import Protocol


class IdentityProvider(Protocol):
    """Reports the node the client acts for, or ``None`` when disconnected."""

    def current_identity(self) -> str | None:
        ...


class StaticIdentityProvider:
    """Identity fixed at construction (e.g. from ``HyperappConfig.node_id``)."""

    def __init__(self, node_id: str | None) -> None:
        node_id = node_id.strip() if node_id is not None else None
        self._node_id = node_id or None

    def current_identity(self) -> str | None:
        return self._node_id
