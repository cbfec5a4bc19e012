"""
Binding event interpretation.

sway reports every triggered binding together with the command it ran. Our
bindings all run one of two no-op marker commands, so the command tells us
whether the chord went down or up and the symbol tells us which key it was.
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from .config import Config
from .gateway import CommandGateway, cursor_press, cursor_release
from .keys import Key, CLICK_BUTTONS
from .state import StateStore

log = logging.getLogger(__name__)

PRESS_COMMAND = 'nop unmoved-mover press'
RELEASE_COMMAND = 'nop unmoved-mover release'
MARKER_COMMANDS = (PRESS_COMMAND, RELEASE_COMMAND)


@dataclass(frozen=True)
class BindingEvent:
    """A binding that sway reported as triggered."""
    command: str
    symbol: Optional[str] = None
    modifiers: FrozenSet[str] = field(default_factory=frozenset)


class BindingInterpreter:
    """Turns binding events into key transitions on the StateStore."""

    def __init__(self, config: Config, store: StateStore, gateway: CommandGateway):
        self._config = config
        self._store = store
        self._gateway = gateway
        self._key_table = config.key_table
        self._mod_mask = frozenset([config.mod_key]) if config.mod_key else None

    def handle(self, event: BindingEvent) -> Optional[Key]:
        """
        Apply one binding event. Returns the key it resolved to, if any.
        """
        if event.command not in MARKER_COMMANDS:
            # Someone else's binding, or one of ours was edited by hand
            log.warning(f"Ignoring binding with foreign command '{event.command}'")
            return None

        key_down = event.command == PRESS_COMMAND

        if self._mod_mask is not None:
            # Exact match: Mod4+Shift+h is not our chord, so the modifier counts as up
            self._store.apply_key_transition(Key.MODIFIER, event.modifiers == self._mod_mask)

        key = self._key_table.get(event.symbol) if event.symbol else None
        if key is None:
            log.debug(f"No key bound to symbol {event.symbol!r}")
            return None

        self._store.apply_key_transition(key, key_down)

        button = CLICK_BUTTONS.get(key)
        if button is not None:
            command = cursor_press(button) if key_down else cursor_release(button)
            if not self._gateway.send(command):
                log.warning(f"{key.name} {'press' if key_down else 'release'} was not applied")

        return key
