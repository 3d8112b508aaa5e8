"""pyhyperapp - Async Python client and state store for a Hyperware counter app."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyhyperapp")
except PackageNotFoundError:
    __version__ = "0+local"
from pyhyperapp._transport import RawResponse
from pyhyperapp.client import HyperappClient
from pyhyperapp.config import HyperappConfig
from pyhyperapp.errors import error_message
from pyhyperapp.exceptions import (
    HyperappApiError,
    HyperappConfigError,
    HyperappError,
    HyperappTransportError,
)
from pyhyperapp.identity import IdentityProvider, StaticIdentityProvider
from pyhyperapp.models import CounterReading, CounterSnapshot, SendMode
from pyhyperapp.remote import HyperappRemoteClient, RawPoster, RemoteClient
from pyhyperapp.state import CounterStore, Flow, StoreState

__all__ = [
    "__version__",
    "CounterReading",
    "CounterSnapshot",
    "CounterStore",
    "Flow",
    "HyperappApiError",
    "HyperappClient",
    "HyperappConfig",
    "HyperappConfigError",
    "HyperappError",
    "HyperappRemoteClient",
    "HyperappTransportError",
    "IdentityProvider",
    "RawPoster",
    "RawResponse",
    "RemoteClient",
    "SendMode",
    "StaticIdentityProvider",
    "StoreState",
    "error_message",
]
