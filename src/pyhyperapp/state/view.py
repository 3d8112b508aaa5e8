"""Immutable, render-ready view of the store."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from pyhyperapp.models.counters import CounterSnapshot
from pyhyperapp.models.requests import SendMode


class Flow(StrEnum):
    """Request flows the store runs, each guarded by its own busy flag."""

    REFRESH = "refresh"
    PING = "ping"
    PING_MISMATCH = "ping_mismatch"
    SEND = "send"
    MISMATCH = "mismatch"

    @property
    def lock_field(self) -> str:
        return _LOCK_FIELDS[self]


_LOCK_FIELDS: dict[Flow, str] = {
    Flow.REFRESH: "is_refreshing",
    Flow.PING: "is_pinging",
    Flow.PING_MISMATCH: "is_ping_mismatch_submitting",
    Flow.SEND: "is_sending",
    Flow.MISMATCH: "is_mismatch_submitting",
}


class StoreState(BaseModel):
    """Everything a UI needs to render the counter app.

    Instances are frozen; the store replaces its state on every change so a
    listener can compare the new state with the previous one.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    node_id: str | None = None
    is_connected: bool = False
    counters: CounterSnapshot | None = None

    ping_message: str = ""
    message: str = ""
    send_mode: SendMode = SendMode.LOCAL
    remote_node: str = ""
    mismatch_node: str = ""
    mismatch_message: str = ""

    is_refreshing: bool = False
    is_pinging: bool = False
    is_ping_mismatch_submitting: bool = False
    is_sending: bool = False
    is_mismatch_submitting: bool = False

    error: str | None = None

    def is_locked(self, flow: Flow) -> bool:
        return bool(getattr(self, flow.lock_field))

    @property
    def busy_flows(self) -> frozenset[Flow]:
        return frozenset(flow for flow in Flow if self.is_locked(flow))

    @property
    def is_busy(self) -> bool:
        return bool(self.busy_flows)
