"""Follow daemon: event loop, compositor selection and logging setup.

The daemon subscribes to the compositor event stream, seeds the tracker from
the current window list, then feeds every event to the tracker and forwards
the resulting move commands.
"""

import asyncio
import logging
import os
import signal
import sys
from typing import Optional

try:
    from systemd import journal
    SYSTEMD_AVAILABLE = True
except ImportError:
    SYSTEMD_AVAILABLE = False

from .config import FollowConfig
from .errors import CommandError, CompositorConnectionError, RequestError, SubscriptionError
from .ipc import CompositorConnection, NiriConnection, SwayConnection
from .models import Event
from .tracker import WindowTracker

logger = logging.getLogger(__name__)

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def setup_logging(level: str = "info") -> None:
    """Setup logging to the systemd journal or stderr."""
    root_logger = logging.getLogger()
    root_logger.setLevel(LOG_LEVELS[level])

    if SYSTEMD_AVAILABLE and not sys.stderr.isatty():
        handler = journal.JournalHandler(SYSLOG_IDENTIFIER="pip-follow")
    else:
        handler = logging.StreamHandler(sys.stderr)

    formatter = logging.Formatter(
        "%(levelname)s [%(name)s] %(message)s"
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logger.debug(f"Logging configured: level={level}")


def create_connection(config: FollowConfig) -> CompositorConnection:
    """
    Pick the compositor backend.

    With backend "auto", niri wins when NIRI_SOCKET is set, then sway when
    SWAYSOCK is set.

    Raises:
        CompositorConnectionError: If no supported compositor is detected
    """
    backend = config.backend

    if backend == "auto":
        if config.socket_path is not None:
            raise CompositorConnectionError(
                "A socket path needs an explicit backend (niri or sway)",
                socket_path=str(config.socket_path),
            )
        if os.environ.get("NIRI_SOCKET"):
            backend = "niri"
        elif os.environ.get("SWAYSOCK"):
            backend = "sway"
        else:
            raise CompositorConnectionError("Neither NIRI_SOCKET nor SWAYSOCK is set")

    if backend == "niri":
        return NiriConnection(config.socket_path)
    return SwayConnection(config.socket_path)


class FollowDaemon:
    """Drives a WindowTracker from a compositor connection."""

    def __init__(self, connection: CompositorConnection, tracker: WindowTracker):
        """
        Initialize daemon.

        Args:
            connection: Connected compositor event/request channels
            tracker: Tracker receiving the events
        """
        self.connection = connection
        self.tracker = tracker
        self.running = False
        self.events_handled = 0
        self.moves_sent = 0
        self.moves_failed = 0

    async def run(self) -> bool:
        """
        Follow the tracked window until the event stream ends.

        Returns:
            False if the event stream could not be started (nothing tracked),
            True once a started stream has ended
        """
        try:
            await self.connection.subscribe_events()
        except SubscriptionError as e:
            logger.info(f"Event stream unavailable, not following any window: {e.message}")
            return False

        await self.seed()

        logger.info("Starting read of events")
        self.running = True

        try:
            while self.running:
                event = await self.connection.next_event()
                if event is None:
                    logger.info(f"{self.connection.name} event stream ended")
                    break

                await self.dispatch(event)
        finally:
            self.running = False

        return True

    async def seed(self) -> Optional[int]:
        """Pick the initial window from the compositor's window list."""
        logger.info("Trying to fetch existing windows...")

        try:
            windows = await self.connection.list_windows()
        except RequestError as e:
            logger.warning(f"Could not fetch existing windows: {e.message}")
            return None

        return self.tracker.seed(windows)

    async def dispatch(self, event: Event) -> None:
        """Handle one event and send the move command it produces, if any."""
        self.events_handled += 1
        logger.log(TRACE, f"Event: {event!r}")

        command = self.tracker.handle(event)
        if command is None:
            return

        try:
            await self.connection.move_window(command.window_id, command.workspace_id, focus=command.focus)
            self.moves_sent += 1
        except CommandError as e:
            # Tracked ID stays; the next focused workspace retries naturally
            self.moves_failed += 1
            logger.error(f"Move failed: {e.message}")

    def stop(self) -> None:
        self.running = False


async def main_async(config: FollowConfig) -> int:
    """Async main function.

    Returns:
        Exit code (0 = success, non-zero = error)
    """
    try:
        connection = create_connection(config)
        await connection.connect()
    except CompositorConnectionError as e:
        logger.error(e.message)
        if e.suggestion:
            logger.error(e.suggestion)
        return 1

    daemon = FollowDaemon(connection, WindowTracker(config.build_matcher()))

    shutdown_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def signal_handler():
        logger.info("Received shutdown signal")
        daemon.stop()
        shutdown_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler)

    try:
        run_task = asyncio.create_task(daemon.run())
        shutdown_task = asyncio.create_task(shutdown_event.wait())

        # Wait for either stream end or shutdown signal
        done, pending = await asyncio.wait(
            [run_task, shutdown_task], return_when=asyncio.FIRST_COMPLETED
        )

        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

        if run_task in done:
            run_task.result()

        return 0

    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)
        await connection.close()
        logger.debug(
            f"Handled {daemon.events_handled} events, "
            f"{daemon.moves_sent} moves sent, {daemon.moves_failed} failed"
        )
