"""
Cursor motion scheduler.

Every tick the scheduler looks at which direction keys are held and moves the
cursor by velocity * time since the previous tick, normalized so diagonals
are as fast as straight lines.
"""

import math
import time
import logging
import threading
from enum import Enum, auto
from typing import Callable, FrozenSet, Optional, Tuple

from .config import Config
from .gateway import CommandGateway, cursor_move
from .keys import Key
from .state import State, StateStore

log = logging.getLogger(__name__)

Vector = Tuple[int, int]


class SchedulerPhase(Enum):
    IDLE_WAIT = auto()
    COMPUTE = auto()
    EMIT = auto()
    SLEEP = auto()


def direction_vector(down_keys: FrozenSet[Key]) -> Vector:
    """Screen-space direction of the held keys (y grows downwards)."""
    x = y = 0
    if Key.UP in down_keys:
        y -= 1
    if Key.DOWN in down_keys:
        y += 1
    if Key.RIGHT in down_keys:
        x += 1
    if Key.LEFT in down_keys:
        x -= 1
    return x, y


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero (round() ties to even)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def displacement(direction: Vector, elapsed: float, velocity: float) -> Vector:
    """
    Pixels to move in `elapsed` seconds along `direction` at `velocity` px/s.
    """
    x, y = direction
    length = math.hypot(x, y)
    if length == 0:
        # Nothing held, or opposite keys cancelled out: no direction to normalize
        return 0, 0
    distance = elapsed * velocity
    return (
        round_half_away(x / length * distance),
        round_half_away(y / length * distance),
    )


def sleep_duration(interval: float, spent: float) -> float:
    """Time left in the tick. Never negative, an overrun tick just doesn't sleep."""
    return max(0.0, interval - spent)


class MotionScheduler:
    """
    Fixed-interval loop that turns the held keys into cursor moves.

    Runs on its own thread with its own gateway. A rejected command is logged
    by the gateway and the loop carries on.
    """

    def __init__(
        self,
        config: Config,
        store: StateStore,
        gateway: CommandGateway,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._config = config
        self._store = store
        self._gateway = gateway
        self._clock = clock

        self._previous: Optional[State] = None
        self._previous_start = 0.0
        self.phase = SchedulerPhase.IDLE_WAIT

        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()

    def _is_active(self, state: State) -> bool:
        if self._config.mod_key and not state.is_down(Key.MODIFIER):
            return False
        if self._config.required_mode and state.mode != self._config.required_mode:
            return False
        return True

    def tick(self, now: float) -> Optional[Vector]:
        """
        Run one iteration started at `now`.

        Returns the displacement that was computed, or None if nothing could
        move (gated off or no direction held).
        """
        self.phase = SchedulerPhase.COMPUTE
        state = self._store.snapshot()

        # Time before a key transition must not count towards the movement
        if state == self._previous:
            elapsed = now - self._previous_start
        else:
            elapsed = 0.0
        self._previous = state
        self._previous_start = now

        if not self._is_active(state):
            return None

        direction = direction_vector(state.down_keys)
        if direction == (0, 0):
            return None

        dx, dy = displacement(direction, elapsed, self._config.cursor_velocity)
        if dx or dy:
            self.phase = SchedulerPhase.EMIT
            self._gateway.send(cursor_move(dx, dy))
        return dx, dy

    def run(self):
        """Tick until stop() is called."""
        log.info(
            f"Motion scheduler started (interval={self._config.tick_interval_ms}ms, "
            f"velocity={self._config.cursor_velocity}px/s)"
        )
        interval = self._config.tick_interval
        while not self._stop.is_set():
            start = self._clock()
            moved = self.tick(start)
            delay = sleep_duration(interval, self._clock() - start)

            if moved is None:
                # Nothing to do until the state changes, but keep polling
                self.phase = SchedulerPhase.IDLE_WAIT
                self._store.wait_for_change(delay, cancel=self._stop)
            else:
                self.phase = SchedulerPhase.SLEEP
                self._stop.wait(delay)
        log.info("Motion scheduler stopped")

    def start(self):
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, name='motion-scheduler', daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 1.0):
        self._stop.set()
        # Wake the idle wait
        self._store.notify()
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)
        self._thread = None
