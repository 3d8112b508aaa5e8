"""Pydantic request payloads for the app's API operations.

These models provide a consistent "validate -> normalize -> serialize" flow
for everything the client sends.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field, field_validator, model_validator

from pyhyperapp.models._base import PayloadModel


class SendMode(StrEnum):
    """Where ``send_message`` delivers a message."""

    LOCAL = "local"
    REMOTE = "remote"
    REMOTE_MISMATCH = "remote-mismatch"

    @property
    def requires_target(self) -> bool:
        return self is not SendMode.LOCAL


def _non_empty(value: str, name: str) -> str:
    if not value:
        raise ValueError(f"{name} must be non-empty")
    return value


class PingRequest(PayloadModel):
    """Body of a ``ping_http`` call."""

    message: str

    @field_validator("message")
    @classmethod
    def _message_non_empty(cls, value: str) -> str:
        return _non_empty(value, "message")


class SendMessageRequest(PayloadModel):
    """Body of a ``send_message`` call."""

    mode: SendMode
    message: str
    target_node: str | None = Field(default=None)

    @field_validator("message")
    @classmethod
    def _message_non_empty(cls, value: str) -> str:
        return _non_empty(value, "message")

    @model_validator(mode="after")
    def _target_matches_mode(self) -> SendMessageRequest:
        if self.mode.requires_target:
            if not self.target_node:
                raise ValueError(f"target_node is required for mode {self.mode.value!r}")
        elif self.target_node is not None:
            raise ValueError("target_node is only allowed for remote modes")
        return self
