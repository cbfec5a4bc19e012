"""
Installing and removing our key bindings in the running window manager.
"""

import logging
from typing import List

from .bindings import PRESS_COMMAND, RELEASE_COMMAND
from .config import Config
from .gateway import CommandGateway

log = logging.getLogger(__name__)


def binding_combo(config: Config, symbol: str) -> str:
    """Key combo for `symbol`, prefixed with the configured modifier."""
    if config.mod_key:
        return f'{config.mod_key}+{symbol}'
    return symbol


def _scoped(config: Config, command: str) -> str:
    if config.required_mode:
        return f'mode "{config.required_mode}" {command}'
    return command


def registration_commands(config: Config) -> List[str]:
    """Commands that set up every binding the daemon listens for."""
    commands = []
    for symbol in config.key_names.by_key().values():
        combo = binding_combo(config, symbol)
        commands.append(_scoped(config, f'bindsym --no-repeat {combo} {PRESS_COMMAND}'))
        commands.append(_scoped(config, f'bindsym --release {combo} {RELEASE_COMMAND}'))

    if config.required_mode:
        if config.enter_mode_combo:
            commands.append(f'bindsym {config.enter_mode_combo} mode "{config.required_mode}"')
        if config.exit_mode_combo:
            commands.append(_scoped(config, f'bindsym {config.exit_mode_combo} mode default'))

    return commands


def unregistration_commands(config: Config) -> List[str]:
    """Commands that undo registration_commands()."""
    commands = []
    for symbol in config.key_names.by_key().values():
        combo = binding_combo(config, symbol)
        commands.append(_scoped(config, f'unbindsym {combo}'))
        commands.append(_scoped(config, f'unbindsym --release {combo}'))

    if config.required_mode:
        if config.enter_mode_combo:
            commands.append(f'unbindsym {config.enter_mode_combo}')
        if config.exit_mode_combo:
            commands.append(_scoped(config, f'unbindsym {config.exit_mode_combo}'))

    return commands


def _send_all(gateway: CommandGateway, commands: List[str]) -> int:
    failed = 0
    for command in commands:
        if not gateway.send(command):
            failed += 1
    return failed


def register(gateway: CommandGateway, config: Config) -> int:
    """Install our bindings. Returns how many commands failed."""
    if config.skip_configuration:
        log.info("Skipping binding registration (skip_configuration)")
        return 0

    commands = registration_commands(config)
    failed = _send_all(gateway, commands)
    if failed:
        log.warning(f"{failed} of {len(commands)} binding commands failed")
    else:
        log.info(f"Registered {len(commands)} bindings")
    return failed


def unregister(gateway: CommandGateway, config: Config) -> int:
    """Remove our bindings. Returns how many commands failed."""
    if config.skip_configuration:
        return 0

    commands = unregistration_commands(config)
    failed = _send_all(gateway, commands)
    if failed:
        log.warning(f"{failed} of {len(commands)} unbind commands failed")
    else:
        log.info("Removed bindings")
    return failed
