"""
Inbound event stream: binding and mode events from sway/i3.
"""

import logging
import threading
from typing import Callable, Optional

import i3ipc

from .bindings import BindingEvent, BindingInterpreter
from .config import Config
from .state import StateStore

log = logging.getLogger(__name__)


class EventDecodeError(ValueError):
    """An IPC event didn't have the shape we expect."""


def binding_event_from_ipc(ipc_event) -> BindingEvent:
    """Convert an i3ipc BindingEvent into our BindingEvent."""
    binding = getattr(ipc_event, 'binding', None)
    if binding is None:
        raise EventDecodeError("binding event without binding info")

    command = getattr(binding, 'command', None)
    if not isinstance(command, str):
        raise EventDecodeError(f"binding command is {command!r}")

    symbol = getattr(binding, 'symbol', None)
    modifiers = getattr(binding, 'event_state_mask', None) or []

    return BindingEvent(
        command=command.strip(),
        symbol=symbol or None,
        modifiers=frozenset(modifiers),
    )


class EventReceiver:
    """
    Runs the i3ipc event loop on its own thread.

    Losing the event stream is fatal: without it we can't see key releases,
    so instead of moving the cursor on stale state `on_fatal` is called and
    the daemon shuts down.
    """

    def __init__(
        self,
        config: Config,
        store: StateStore,
        interpreter: BindingInterpreter,
        connection,
        on_fatal: Optional[Callable[[], None]] = None,
    ):
        self._config = config
        self._store = store
        self._interpreter = interpreter
        self._connection = connection
        self._on_fatal = on_fatal
        self._thread: Optional[threading.Thread] = None
        self._stopping = threading.Event()

        self._connection.on(i3ipc.Event.BINDING, self._on_binding)
        if config.required_mode:
            self._connection.on(i3ipc.Event.MODE, self._on_mode)

    def _on_binding(self, connection, ipc_event):
        try:
            event = binding_event_from_ipc(ipc_event)
        except EventDecodeError as e:
            log.warning(f"Ignoring malformed binding event: {e}")
            return

        log.debug(f"Binding: {event.command} symbol={event.symbol} mods={sorted(event.modifiers)}")
        self._interpreter.handle(event)
        self._store.notify()

    def _on_mode(self, connection, ipc_event):
        mode = getattr(ipc_event, 'change', None)
        if not isinstance(mode, str):
            log.warning(f"Ignoring mode event without a mode name: {mode!r}")
            return
        log.info(f"Mode changed to '{mode}'")
        self._store.apply_mode_change(mode)

    def run(self):
        """Process events until stop() is called or the stream fails."""
        log.info("Event receiver started")
        try:
            self._connection.main()
        except Exception as e:
            if not self._stopping.is_set():
                log.exception(f"Event stream failed: {e}")
                self._fail()
            return

        if not self._stopping.is_set():
            log.error("Event stream closed by the window manager")
            self._fail()
        else:
            log.info("Event receiver stopped")

    def _fail(self):
        if self._on_fatal:
            self._on_fatal()

    def start(self):
        self._thread = threading.Thread(target=self.run, name='event-receiver', daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 1.0):
        self._stopping.set()
        self._connection.main_quit()
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)
        self._thread = None
