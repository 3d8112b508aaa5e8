"""Custom exception hierarchy for pyhyperapp."""

from __future__ import annotations


class HyperappError(Exception):
    """Base exception for all pyhyperapp errors."""


class HyperappConfigError(HyperappError):
    """Invalid or missing configuration."""


class HyperappTransportError(HyperappError):
    """HTTP-level failure (network, timeout, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class HyperappApiError(HyperappError):
    """The app answered a call with a structured failure.

    ``details`` carries the machine-supplied reason (usually the ``Err``
    string returned by the process, or the body of a non-2xx response).
    """

    def __init__(
        self,
        message: str,
        *,
        details: str | None = None,
        operation: str = "",
        status_code: int | None = None,
    ) -> None:
        self.details = details
        self.operation = operation
        self.status_code = status_code
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)
