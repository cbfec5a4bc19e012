"""
Outbound command channel to sway/i3.

Every thread that sends commands owns its own CommandGateway, i3ipc
connections are not shared between threads.
"""

import logging
from typing import Optional

import i3ipc

log = logging.getLogger(__name__)


class GatewayError(ConnectionError):
    """The window manager's IPC socket could not be reached."""


def cursor_move(dx: int, dy: int) -> str:
    return f'seat - cursor move {dx} {dy}'


def cursor_press(button: str) -> str:
    return f'seat - cursor press {button}'


def cursor_release(button: str) -> str:
    return f'seat - cursor release {button}'


class CommandGateway:
    """Sends textual commands and reports whether the WM accepted them."""

    def __init__(self, connection):
        self._connection = connection

    @classmethod
    def connect(cls, socket_path: Optional[str] = None) -> 'CommandGateway':
        """Open a fresh IPC connection. Raises GatewayError if sway isn't reachable."""
        return cls(open_connection(socket_path))

    def send(self, command: str) -> bool:
        """
        Run one command synchronously.

        Rejections and socket errors are logged and reported as False, they
        never raise: a single bad command must not take down the caller's loop.
        """
        try:
            replies = self._connection.command(command)
        except OSError as e:
            log.error(f"Failed to send '{command}': {e}")
            return False

        if not replies:
            # i3ipc returns no replies once the socket is closed
            log.warning(f"No reply to '{command}', IPC connection lost?")
            return False

        ok = True
        for reply in replies:
            if not reply.success:
                log.warning(f"Command '{command}' rejected: {reply.error}")
                ok = False
        if ok:
            log.debug(f"Sent '{command}'")
        return ok


def open_connection(socket_path: Optional[str] = None):
    """Connect to sway/i3 IPC without automatic reconnects."""
    try:
        return i3ipc.Connection(socket_path=socket_path, auto_reconnect=False)
    except Exception as e:
        # i3ipc raises a bare Exception when it can't find the socket path
        raise GatewayError(f"Cannot connect to window manager IPC: {e}")
