"""State/store layer.

This package is the single source of truth for client-side state: every
request flow reads its inputs from, and writes its outcome to, the
:class:`CounterStore`.
"""

from pyhyperapp.state.store import CounterStore, Listener
from pyhyperapp.state.view import Flow, StoreState

__all__ = ["CounterStore", "Flow", "Listener", "StoreState"]
