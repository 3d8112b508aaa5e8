"""Data models for app responses and request payloads."""

from pyhyperapp.models._base import HyperappBaseModel, PayloadModel
from pyhyperapp.models.counters import CounterReading, CounterSnapshot
from pyhyperapp.models.requests import PingRequest, SendMessageRequest, SendMode

__all__ = [
    "CounterReading",
    "CounterSnapshot",
    "HyperappBaseModel",
    "PayloadModel",
    "PingRequest",
    "SendMessageRequest",
    "SendMode",
]
