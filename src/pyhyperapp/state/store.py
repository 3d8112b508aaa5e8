"""Orchestration store for the counter app.

The store owns every piece of client state (connection status, the latest
counter snapshot, per-flow form fields, per-flow busy flags and the current
error) and exposes async commands that validate input, mark their flow busy,
call the app, and fold the outcome back into state.

Commands never raise for failures of the app or the network.  They report
through ``StoreState.error`` and always clear their busy flag before
returning.

Two rules govern concurrent commands:

* Different flows may be in flight at the same time.  Each of them may
  replace ``counters``; whichever resolves last wins.
* The store does not reject a second invocation of a flow that is already
  busy.  Callers gate their triggers on the flow's busy flag.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable, Iterator
from typing import Any

from pyhyperapp._constants import (
    EMPTY_PAYLOAD,
    MSG_MESSAGE_REQUIRED,
    MSG_MISMATCH_MESSAGE_REQUIRED,
    MSG_MISMATCH_NODE_REQUIRED,
    MSG_NOT_CONNECTED,
    MSG_PING_REQUIRED,
    MSG_REMOTE_NODE_REQUIRED,
    OP_GET_COUNTERS,
    OP_PING_HTTP,
    OP_SEND_MESSAGE,
    PING_LOCAL_VARIANT,
    PING_MISMATCH_FALLBACK,
)
from pyhyperapp.errors import error_message
from pyhyperapp.identity import IdentityProvider
from pyhyperapp.models.requests import PingRequest, SendMessageRequest, SendMode
from pyhyperapp.remote import RawPoster, RemoteClient
from pyhyperapp.state.view import Flow, StoreState

_logger = logging.getLogger(__name__)

Listener = Callable[[StoreState, StoreState], None]


class _FlowRun:
    """Outcome of one flow execution inside :meth:`CounterStore._run`."""

    __slots__ = ("changes", "failed")

    def __init__(self) -> None:
        self.changes: dict[str, Any] = {}
        self.failed = False

    def commit(self, **changes: Any) -> None:
        """Stage state changes applied together with releasing the flow."""
        self.changes.update(changes)


class CounterStore:
    """Reactive store coordinating the app's request flows.

    Usage::

        store = CounterStore(remote, raw, identity)
        store.subscribe(lambda state, previous: render(state))
        await store.initialize()
        store.set_ping_message("hello")
        await store.send_ping()
    """

    def __init__(
        self,
        remote: RemoteClient,
        raw: RawPoster,
        identity: IdentityProvider,
    ) -> None:
        self._remote = remote
        self._raw = raw
        self._identity = identity
        self._state = StoreState()
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def state(self) -> StoreState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with ``(state, previous)`` after every change.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return _unsubscribe

    def _set(self, **changes: Any) -> None:
        previous = self._state
        state = previous.model_copy(update=changes)
        if state == previous:
            return
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state, previous)
            except Exception:
                _logger.debug("Store listener failed", exc_info=True)

    def _reject(self, flow: Flow, message: str) -> None:
        _logger.debug("%s rejected: %s", flow, message)
        self._set(error=message)

    @contextlib.contextmanager
    def _run(self, flow: Flow, *, clear_error: bool = True) -> Iterator[_FlowRun]:
        """Hold *flow* busy for the duration of the block.

        Exceptions raised in the block become the store's error.  The busy
        flag is released on every exit path.
        """
        run = _FlowRun()
        lock = flow.lock_field
        if clear_error:
            self._set(**{lock: True, "error": None})
        else:
            self._set(**{lock: True})
        _logger.debug("%s started", flow)
        try:
            yield run
        except Exception as exc:
            run.failed = True
            message = error_message(exc)
            _logger.debug("%s failed: %s", flow, message)
            self._set(**{lock: False, "error": message})
        except BaseException:
            self._set(**{lock: False})
            raise
        else:
            _logger.debug("%s finished", flow)
            self._set(**run.changes, **{lock: False})

    # ------------------------------------------------------------------
    # Field setters
    # ------------------------------------------------------------------

    def set_ping_message(self, value: str) -> None:
        self._set(ping_message=value)

    def set_message(self, value: str) -> None:
        self._set(message=value)

    def set_send_mode(self, mode: SendMode | str) -> None:
        """Store the dispatch mode.

        Unlike the other setters this one coerces its argument to
        :class:`SendMode`, so an unknown mode string raises ``ValueError``
        and leaves the state untouched.
        """
        self._set(send_mode=SendMode(mode))

    def set_remote_node(self, value: str) -> None:
        self._set(remote_node=value)

    def set_mismatch_node(self, value: str) -> None:
        self._set(mismatch_node=value)

    def set_mismatch_message(self, value: str) -> None:
        self._set(mismatch_message=value)

    def dismiss_error(self) -> None:
        self._set(error=None)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Resolve the node identity and load counters when connected."""
        node_id = self._identity.current_identity()
        self._set(node_id=node_id, is_connected=bool(node_id))
        if not node_id:
            self._set(error=MSG_NOT_CONNECTED)
            return
        await self.refresh()

    async def refresh(self) -> None:
        """Replace the counter snapshot with the app's current one.

        On failure the previous snapshot is kept.
        """
        await self._refresh(clear_error=True)

    async def _refresh(self, *, clear_error: bool) -> None:
        with self._run(Flow.REFRESH, clear_error=clear_error) as run:
            snapshot = await self._remote.call(OP_GET_COUNTERS, EMPTY_PAYLOAD)
            run.commit(counters=snapshot)

    async def send_ping(self) -> None:
        """Send the ping message over HTTP; the reply is the new snapshot."""
        message = self._state.ping_message.strip()
        if not message:
            self._reject(Flow.PING, MSG_PING_REQUIRED)
            return

        request = PingRequest(message=message)
        with self._run(Flow.PING) as run:
            snapshot = await self._remote.call(OP_PING_HTTP, request.to_payload())
            run.commit(counters=snapshot, ping_message="")

    async def trigger_ping_mismatch(self) -> None:
        """Post a ``PingLocal`` body to the API path, which has no such handler.

        An empty ping message falls back to a fixed literal instead of being
        rejected.  A non-2xx reply's body becomes the error verbatim and the
        counters are refreshed afterwards; that refresh keeps the error.  A
        network failure skips the refresh.
        """
        message = self._state.ping_message.strip() or PING_MISMATCH_FALLBACK

        with self._run(Flow.PING_MISMATCH) as run:
            response = await self._raw.post_raw({PING_LOCAL_VARIANT: message})
            if not response.ok:
                run.commit(error=response.text or f"HTTP {response.status}")

        if run.failed:
            return
        await self._refresh(clear_error=False)

    async def send_message(self) -> None:
        """Dispatch the message in the selected mode, then re-read counters.

        The dispatch reply is not used as the snapshot; a separate
        :meth:`refresh` follows every successful dispatch.
        """
        state = self._state
        message = state.message.strip()
        if not message:
            self._reject(Flow.SEND, MSG_MESSAGE_REQUIRED)
            return

        target: str | None = None
        if state.send_mode.requires_target:
            target = state.remote_node.strip()
            if not target:
                self._reject(Flow.SEND, MSG_REMOTE_NODE_REQUIRED)
                return

        request = SendMessageRequest(mode=state.send_mode, message=message, target_node=target)
        with self._run(Flow.SEND) as run:
            await self._remote.call(OP_SEND_MESSAGE, request.to_payload())
            run.commit(message="")

        if run.failed:
            return
        await self.refresh()

    async def trigger_mismatch(self) -> None:
        """Send a ``remote-mismatch`` message to provoke a remote failure.

        Uses its own target and message fields.  No refresh follows, since
        the expected outcome is an error rather than a counter change.
        """
        state = self._state
        target = state.mismatch_node.strip()
        if not target:
            self._reject(Flow.MISMATCH, MSG_MISMATCH_NODE_REQUIRED)
            return
        message = state.mismatch_message.strip()
        if not message:
            self._reject(Flow.MISMATCH, MSG_MISMATCH_MESSAGE_REQUIRED)
            return

        request = SendMessageRequest(mode=SendMode.REMOTE_MISMATCH, message=message, target_node=target)
        with self._run(Flow.MISMATCH) as run:
            await self._remote.call(OP_SEND_MESSAGE, request.to_payload())
            run.commit(mismatch_message="")
