"""Client configuration for pyhyperapp."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyhyperapp._constants import API_PATH, BASE_URL
from pyhyperapp.exceptions import HyperappConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise HyperappConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class HyperappConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        URL the app is served from, including its mount prefix
        (e.g. ``"http://localhost:8080/skeleton-app:skeleton-app:os"``).
    api_path : str
        Path of the app's HTTP API binding, relative to ``base_url``.
    node_id : str or None
        Identity of the node the client acts for. ``None`` means the
        client is not connected to a node.
    request_timeout : float
        Total timeout in seconds for a single HTTP request.  Set to ``0``
        to disable the timeout.
    api_trace_enabled : bool
        Log (redacted) request and response bodies at DEBUG level.
    """

    base_url: str = BASE_URL
    api_path: str = API_PATH
    node_id: str | None = None
    request_timeout: float = 30.0
    api_trace_enabled: bool = False

    def __post_init__(self) -> None:
        if self.request_timeout < 0:
            raise HyperappConfigError("request_timeout must be >= 0")
        if not self.api_path.startswith("/"):
            raise HyperappConfigError(f"api_path must start with '/', got {self.api_path!r}")

    @property
    def api_url(self) -> str:
        """Absolute URL of the API binding."""
        return f"{self.base_url.rstrip('/')}{self.api_path}"

    @classmethod
    def from_env(cls, **overrides: Any) -> HyperappConfig:
        """Create configuration from environment variables.

        Reads ``HYPERAPP_BASE_URL``, ``HYPERAPP_API_PATH``,
        ``HYPERAPP_NODE_ID``, ``HYPERAPP_REQUEST_TIMEOUT`` and
        ``HYPERAPP_API_TRACE_ENABLED``. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        HyperappConfig
            Populated configuration.

        Raises
        ------
        HyperappConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "HYPERAPP_BASE_URL": "base_url",
            "HYPERAPP_API_PATH": "api_path",
            "HYPERAPP_NODE_ID": "node_id",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val.strip()

        timeout_env = env.get("HYPERAPP_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = _env_float("HYPERAPP_REQUEST_TIMEOUT", timeout_env)

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("HYPERAPP_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
