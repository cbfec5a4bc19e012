"""
Shared state between the event receiver and the motion scheduler.

The receiver thread writes key and mode transitions, the scheduler thread
reads a snapshot once per tick. Everything goes through one lock, and each
transition is computed in full while holding it, so a snapshot never shows
half of a transition.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from .keys import Key, DIRECTION_OPPOSITES

log = logging.getLogger(__name__)

DEFAULT_MODE = 'default'


@dataclass(frozen=True)
class State:
    """Immutable view of the held keys and the active mode."""
    mode: str = DEFAULT_MODE
    down_keys: FrozenSet[Key] = field(default_factory=frozenset)

    def is_down(self, key: Key) -> bool:
        return key in self.down_keys


def next_down_keys(down_keys: FrozenSet[Key], key: Key, down: bool) -> FrozenSet[Key]:
    """
    Compute the held key set after `key` goes down or up.

    Pressing a direction drops its opposite first. Releasing a key clears
    everything: sway doesn't send release events for bindings that get
    reassigned mid-press, so a stale key could otherwise stay held forever.
    That includes the modifier going up when an event carries the wrong mask.
    """
    if down:
        opposite = DIRECTION_OPPOSITES.get(key)
        keys = set(down_keys)
        if opposite is not None:
            keys.discard(opposite)
        keys.add(key)
        return frozenset(keys)

    return frozenset()


class StateStore:
    """
    Owns the single mutable State.

    The condition doubles as a change notification. It is advisory: the
    scheduler polls on its own timer as well, so a missed or spurious
    wakeup only costs one tick.
    """

    def __init__(self, mode: str = DEFAULT_MODE):
        self._state = State(mode=mode)
        self._lock = threading.Lock()
        self._changed = threading.Condition(self._lock)
        self._version = 0
        self._closed = False

    def apply_key_transition(self, key: Key, down: bool):
        """Press or release a key."""
        with self._lock:
            down_keys = next_down_keys(self._state.down_keys, key, down)
            if down_keys != self._state.down_keys:
                log.debug(f"Keys {'+' if down else '-'}{key.name}: {sorted(k.name for k in down_keys)}")
            self._state = State(mode=self._state.mode, down_keys=down_keys)
            self._version += 1
            self._changed.notify_all()

    def apply_mode_change(self, new_mode: str):
        """Record that the window manager switched to another mode."""
        with self._lock:
            log.debug(f"Mode: {self._state.mode!r} -> {new_mode!r}")
            self._state = State(mode=new_mode, down_keys=self._state.down_keys)
            self._version += 1
            self._changed.notify_all()

    def snapshot(self) -> State:
        """Current state. Safe to keep, it's never mutated."""
        with self._lock:
            return self._state

    def notify(self):
        """Wake anyone waiting for a change."""
        with self._lock:
            self._version += 1
            self._changed.notify_all()

    def wait_for_change(self, timeout: Optional[float] = None,
                        cancel: Optional[threading.Event] = None) -> bool:
        """
        Block until notified, closed, `cancel` is set, or `timeout` seconds pass.

        Whoever sets `cancel` must call notify() afterwards to wake the wait.
        Returns False only on timeout.
        """
        with self._lock:
            version = self._version
            return self._changed.wait_for(
                lambda: (self._closed or self._version != version
                         or (cancel is not None and cancel.is_set())),
                timeout=timeout,
            )

    def close(self):
        """Release all waiters, used on shutdown."""
        with self._lock:
            self._closed = True
            self._changed.notify_all()

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed
