"""Base model for app responses and request payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class HyperappBaseModel(BaseModel):
    """Base for response models.

    * Frozen: instances are replaced, never mutated.
    * Unknown keys are ignored so newer app versions stay readable.
    * ``raw`` keeps the original response dict.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _stash_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict) or "raw" in values:
            return values
        return {**values, "raw": dict(values)}


class PayloadModel(BaseModel):
    """Base for request payloads sent to the app.

    Payloads are validated on construction and serialized with
    :meth:`to_payload`, which drops unset optional fields.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    def to_payload(self) -> str:
        """JSON-encode the payload the way the app expects it."""
        return self.model_dump_json(exclude_none=True)
