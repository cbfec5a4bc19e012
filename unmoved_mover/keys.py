"""
Logical keys tracked by the daemon.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Dict


class ConfigError(ValueError):
    """Raised when the configuration cannot be turned into a usable setup."""


class Key(Enum):
    MODIFIER = auto()
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    LEFT_CLICK = auto()
    RIGHT_CLICK = auto()


# Pressing one of these drops the other from the held set
DIRECTION_OPPOSITES = {
    Key.UP: Key.DOWN,
    Key.DOWN: Key.UP,
    Key.LEFT: Key.RIGHT,
    Key.RIGHT: Key.LEFT,
}

# sway seat cursor button names
CLICK_BUTTONS = {
    Key.LEFT_CLICK: 'button1',
    Key.RIGHT_CLICK: 'button3',
}


@dataclass(frozen=True)
class KeyNames:
    """Symbol names (xkb keysyms) bound to each chordable key."""
    up: str
    down: str
    left: str
    right: str
    left_click: str
    right_click: str

    def by_key(self) -> Dict[Key, str]:
        return {
            Key.UP: self.up,
            Key.DOWN: self.down,
            Key.LEFT: self.left,
            Key.RIGHT: self.right,
            Key.LEFT_CLICK: self.left_click,
            Key.RIGHT_CLICK: self.right_click,
        }


def build_key_table(names: KeyNames) -> Dict[str, Key]:
    """
    Build the symbol -> Key lookup used when dispatching binding events.

    The mapping must be injective: two keys sharing a symbol would make
    dispatch ambiguous, so that is rejected here instead of at runtime.
    """
    table: Dict[str, Key] = {}
    for key, name in names.by_key().items():
        if not name:
            raise ConfigError(f"No symbol configured for {key.name.lower()}")
        if name in table:
            other = table[name]
            raise ConfigError(
                f"Symbol '{name}' is used for both {other.name.lower()} and {key.name.lower()}"
            )
        table[name] = key
    return table
