"""Counter snapshot model."""

from __future__ import annotations

from typing import NamedTuple

from pydantic import Field

from pyhyperapp.models._base import HyperappBaseModel


class CounterReading(NamedTuple):
    """One counter: how many messages arrived and the latest of them."""

    count: int
    last_message: str | None


class CounterSnapshot(HyperappBaseModel):
    """All counters held by the app at one point in time.

    The app reports three independent counters: messages received over
    HTTP, messages sent to the local process, and messages received from
    remote nodes. Every field is required: a reply missing any of them is
    not a snapshot.
    """

    http_count: int = Field(ge=0)
    http_last_message: str | None
    local_count: int = Field(ge=0)
    local_last_message: str | None
    remote_count: int = Field(ge=0)
    remote_last_message: str | None

    @property
    def http(self) -> CounterReading:
        return CounterReading(self.http_count, self.http_last_message)

    @property
    def local(self) -> CounterReading:
        return CounterReading(self.local_count, self.local_last_message)

    @property
    def remote(self) -> CounterReading:
        return CounterReading(self.remote_count, self.remote_last_message)
