"""
unmoved-mover - Main entry point and daemon controller.
"""

import sys
import signal
import logging
import argparse
import threading
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .bindings import BindingInterpreter
from .config import Config, ConfigError, get_config_path, load_config
from .gateway import CommandGateway, GatewayError, open_connection
from .motion import MotionScheduler
from .receiver import EventReceiver
from .registration import register, unregister
from .state import StateStore

log = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='unmoved-mover',
        description='Move the mouse pointer with held keyboard chords in sway/i3.',
    )
    parser.add_argument('-c', '--config', type=Path, default=None,
                        help=f'configuration file (default: {get_config_path()})')
    parser.add_argument('--skip-configuration', action='store_true',
                        help="don't add or remove bindings in the window manager")
    parser.add_argument('--mode', default=None,
                        help='only move the cursor while the window manager is in this mode')
    parser.add_argument('-v', '--verbose', action='store_true', help='debug logging')
    return parser.parse_args(argv)


class UnmovedMover:
    """Main application controller."""

    def __init__(self, config: Config):
        self.config = config
        self.store: Optional[StateStore] = None
        self.receiver: Optional[EventReceiver] = None
        self.scheduler: Optional[MotionScheduler] = None
        self._gateway: Optional[CommandGateway] = None
        self._running = False
        self._exit_code = 0
        self._lock = threading.Lock()

    def _connect(self):
        """Open the event connection and the scheduler's own command connection."""
        events = open_connection()
        self._gateway = CommandGateway(events)
        motion_gateway = CommandGateway.connect()

        self.store = StateStore()
        interpreter = BindingInterpreter(self.config, self.store, self._gateway)
        self.receiver = EventReceiver(
            self.config, self.store, interpreter, events,
            on_fatal=self._on_receiver_failed,
        )
        self.scheduler = MotionScheduler(self.config, self.store, motion_gateway)

    def _on_receiver_failed(self):
        log.error("Lost the window manager event stream, exiting")
        self.stop(exit_code=1)

    def start(self) -> int:
        """Start the daemon and block until it stops. Returns the exit status."""
        self._running = True

        log.info("=" * 60)
        log.info("unmoved-mover starting...")
        log.info("=" * 60)

        try:
            self._connect()
        except GatewayError as e:
            log.error(f"Cannot start: {e}")
            return 1

        register(self._gateway, self.config)

        self.scheduler.start()
        self.receiver.start()

        if self.config.required_mode:
            log.info(f"Active in mode '{self.config.required_mode}'")
        log.info(f"Ready: hold {self.config.mod_key or '(no modifier)'} with "
                 f"{self.config.up}/{self.config.down}/{self.config.left}/{self.config.right}")

        try:
            while self._running:
                threading.Event().wait(1)
        except KeyboardInterrupt:
            pass

        self._shutdown()
        return self._exit_code

    def stop(self, exit_code: int = 0):
        """Ask the daemon to stop. Safe to call from any thread, more than once."""
        with self._lock:
            if not self._running:
                return
            log.info("Stopping unmoved-mover...")
            self._running = False
            self._exit_code = exit_code

    def _shutdown(self):
        self._running = False

        if self.scheduler:
            self.scheduler.stop()

        if self._gateway:
            unregister(self._gateway, self.config)

        if self.receiver:
            self.receiver.stop()

        if self.store:
            self.store.close()

        log.info("unmoved-mover stopped")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = load_config(args.config)
        if args.skip_configuration:
            config = replace(config, skip_configuration=True)
        if args.mode:
            config = replace(config, required_mode=args.mode)
    except ConfigError as e:
        log.error(f"Invalid configuration: {e}")
        return 2

    app = UnmovedMover(config)

    def signal_handler(signum, frame):
        log.info(f"Received signal {signum}, shutting down...")
        app.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        return app.start()
    except Exception as e:
        log.exception(f"Fatal error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
