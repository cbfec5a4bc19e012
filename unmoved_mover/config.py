"""
Configuration loading and management.
"""

import os
import yaml
from pathlib import Path
from dataclasses import dataclass, fields
from typing import Dict, Optional

from .keys import ConfigError, Key, KeyNames, build_key_table


@dataclass(frozen=True)
class Config:
    """Main application configuration. Immutable once loaded."""
    # Mode the window manager must be in for motion to happen (None = any mode)
    required_mode: Optional[str] = None
    enter_mode_combo: Optional[str] = None
    exit_mode_combo: Optional[str] = 'Escape'

    # Modifier that must be held alone for motion ('' disables the check)
    mod_key: str = 'Mod4'

    up: str = 'k'
    down: str = 'j'
    left: str = 'h'
    right: str = 'l'
    left_click: str = 'semicolon'
    right_click: str = 'apostrophe'

    tick_interval_ms: int = 10
    cursor_velocity: int = 1000  # pixels per second

    # Don't touch the window manager's bindings, assume they're set up already
    skip_configuration: bool = False

    def __post_init__(self):
        if self.tick_interval_ms <= 0:
            raise ConfigError(f"tick_interval_ms must be positive, got {self.tick_interval_ms}")
        if self.cursor_velocity < 0:
            raise ConfigError(f"cursor_velocity must not be negative, got {self.cursor_velocity}")
        if self.enter_mode_combo and not self.required_mode:
            raise ConfigError("enter_mode_combo requires required_mode to be set")
        # Fail on ambiguous key names now rather than on the first event
        build_key_table(self.key_names)

    @property
    def key_names(self) -> KeyNames:
        return KeyNames(
            up=self.up,
            down=self.down,
            left=self.left,
            right=self.right,
            left_click=self.left_click,
            right_click=self.right_click,
        )

    @property
    def key_table(self) -> Dict[str, Key]:
        """Symbol -> Key lookup."""
        return build_key_table(self.key_names)

    @property
    def tick_interval(self) -> float:
        """Tick interval in seconds."""
        return self.tick_interval_ms / 1000.0


def get_config_path() -> Path:
    """Get the configuration file path."""
    base = Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / '.config'))
    return base / 'unmoved-mover' / 'config.yaml'


def parse_config(data: Dict) -> Config:
    """Build a Config from parsed YAML data."""
    known = {f.name for f in fields(Config)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    values = {}
    for name, value in data.items():
        if name in ('tick_interval_ms', 'cursor_velocity'):
            try:
                value = int(value)
            except (TypeError, ValueError):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
        elif name == 'skip_configuration':
            if not isinstance(value, bool):
                raise ConfigError(f"{name} must be true or false, got {value!r}")
        elif name in ('required_mode', 'enter_mode_combo', 'exit_mode_combo'):
            value = str(value) if value not in (None, '') else None
        else:
            # mod_key and the key symbols; YAML turns e.g. `1` into an int
            value = '' if value is None else str(value)
        values[name] = value

    return Config(**values)


def load_config(path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file."""
    if path is None:
        path = get_config_path()

    if not path.exists():
        return create_default_config(path)

    with open(path, 'r') as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Cannot parse {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")

    return parse_config(data)


def create_default_config(path: Path) -> Config:
    """Create and save a default configuration."""
    default_yaml = """# unmoved-mover configuration

# Only move the cursor while sway is in this mode (comment out to allow any mode)
# required_mode: cursor
# enter_mode_combo: Mod4+m
exit_mode_combo: Escape

# Modifier that must be held, on its own, together with the keys below.
# Set to '' to use the keys without a modifier (useful with required_mode).
mod_key: Mod4

# Key symbols (xkb keysym names)
up: k
down: j
left: h
right: l
left_click: semicolon
right_click: apostrophe

# Milliseconds between cursor updates
tick_interval_ms: 10

# Cursor speed in pixels per second
cursor_velocity: 1000

# Set to true if the bindings are already in your sway config
skip_configuration: false
"""

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        f.write(default_yaml)

    return load_config(path)
