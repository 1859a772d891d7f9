"""sway IPC backend built on i3ipc.aio.

i3ipc dispatches events to callbacks, so the handlers below normalize each
event and queue it; next_event() pulls from that queue in arrival order.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

from i3ipc import Event as I3Event
from i3ipc.aio import Con, Connection

from ..errors import (
    CommandError,
    CompositorConnectionError,
    RequestError,
    SubscriptionError,
    connect_error_code,
)
from ..models import (
    Event,
    WindowClosed,
    WindowDescriptor,
    WindowId,
    WindowOpenedOrChanged,
    WorkspaceActivated,
    WorkspaceId,
)
from .base import CompositorConnection

logger = logging.getLogger(__name__)

WINDOW_CON_TYPES = ("con", "floating_con")


def is_window(con) -> bool:
    """True for containers holding an application window (Wayland or XWayland)."""
    if con.type not in WINDOW_CON_TYPES:
        return False
    return bool(getattr(con, "app_id", None) or getattr(con, "window", None))


def window_from_con(con) -> WindowDescriptor:
    """Build a descriptor from a sway container.

    Native Wayland windows report app_id; XWayland windows only have a class.
    """
    app_id = getattr(con, "app_id", None) or getattr(con, "window_class", None) or None
    return WindowDescriptor(id=con.id, title=con.name, app_id=app_id)


def collect_windows(root) -> List[WindowDescriptor]:
    """All windows below root in tree order, tiling before floating per node."""
    windows = []

    def visit(node):
        if is_window(node):
            windows.append(window_from_con(node))
        for child in node.nodes:
            visit(child)
        for child in node.floating_nodes:
            visit(child)

    visit(root)
    return windows


def quote_workspace(name: str) -> str:
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def move_window_command(window_id: WindowId, workspace_id: WorkspaceId) -> str:
    """sway command moving a container to a workspace by name, focus stays put."""
    return f"[con_id={window_id}] move container to workspace --no-auto-back-and-forth {quote_workspace(str(workspace_id))}"


class SwayConnection(CompositorConnection):
    """Event and command connections to sway."""

    name = "sway"

    def __init__(self, socket_path: Optional[Path] = None):
        """
        Initialize sway connection.

        Args:
            socket_path: sway IPC socket (i3ipc falls back to $SWAYSOCK)
        """
        self.socket_path = socket_path
        self.events: Optional[Connection] = None
        self.requests: Optional[Connection] = None
        self._queue: asyncio.Queue = asyncio.Queue()
        self._main_task: Optional[asyncio.Task] = None

    def _new_connection(self) -> Connection:
        socket_path = str(self.socket_path) if self.socket_path else None
        return Connection(socket_path=socket_path, auto_reconnect=False)

    async def connect(self) -> None:
        try:
            self.events = await self._new_connection().connect()
            self.requests = await self._new_connection().connect()
        except Exception as e:
            await self.close()
            raise CompositorConnectionError(
                f"Failed to connect to sway IPC: {e}",
                socket_path=str(self.socket_path) if self.socket_path else None,
                code=connect_error_code(e),
            )

        logger.info("Connected to sway IPC")

    async def subscribe_events(self) -> None:
        if self.events is None:
            raise SubscriptionError("Cannot subscribe to events: not connected")

        self.events.on(I3Event.WINDOW_NEW, self._on_window_changed)
        self.events.on(I3Event.WINDOW_TITLE, self._on_window_changed)
        self.events.on(I3Event.WINDOW_CLOSE, self._on_window_close)
        self.events.on(I3Event.WORKSPACE_FOCUS, self._on_workspace_focus)
        self.events.on(I3Event.SHUTDOWN, self._on_shutdown)

        try:
            await self.events.subscribe([I3Event.WINDOW, I3Event.WORKSPACE, I3Event.SHUTDOWN])
        except Exception as e:
            raise SubscriptionError(f"Failed to subscribe to sway events: {e}")

        self._main_task = asyncio.create_task(self.events.main())
        self._main_task.add_done_callback(self._on_main_done)

        logger.debug("Subscribed to sway event stream (window, workspace, shutdown)")

    def _on_window_changed(self, conn, event) -> None:
        self._queue.put_nowait(WindowOpenedOrChanged(window=window_from_con(event.container)))

    def _on_window_close(self, conn, event) -> None:
        self._queue.put_nowait(WindowClosed(id=event.container.id))

    def _on_workspace_focus(self, conn, event) -> None:
        if event.current is None:
            return
        self._queue.put_nowait(WorkspaceActivated(workspace_id=event.current.name, focused=True))

    def _on_shutdown(self, conn, event) -> None:
        logger.info("sway is shutting down")
        self._queue.put_nowait(None)

    def _on_main_done(self, task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.warning(f"sway event loop ended: {task.exception()}")
        self._queue.put_nowait(None)

    async def list_windows(self) -> List[WindowDescriptor]:
        if self.requests is None:
            raise RequestError("Cannot list windows: not connected", request="get_tree")

        try:
            tree: Con = await self.requests.get_tree()
        except Exception as e:
            raise RequestError(f"get_tree request failed: {e}", request="get_tree")

        return collect_windows(tree)

    async def move_window(self, window_id: WindowId, workspace_id: WorkspaceId, focus: bool = False) -> None:
        if self.requests is None:
            raise CommandError("Cannot move window: not connected", window_id=window_id, workspace_id=workspace_id)

        command = move_window_command(window_id, workspace_id)
        if focus:
            command += f"; [con_id={window_id}] focus"

        try:
            replies = await self.requests.command(command)
        except Exception as e:
            raise CommandError(
                f"Failed to move window {window_id}: {e}",
                window_id=window_id,
                workspace_id=workspace_id,
            )

        failed = [reply.error for reply in replies if not reply.success]
        if failed:
            raise CommandError(
                f"sway rejected moving window {window_id}: {'; '.join(str(e) for e in failed)}",
                window_id=window_id,
                workspace_id=workspace_id,
            )

    async def next_event(self) -> Optional[Event]:
        return await self._queue.get()

    async def close(self) -> None:
        if self._main_task is not None and not self._main_task.done():
            self._main_task.cancel()

        for conn in (self.events, self.requests):
            if conn is not None:
                conn.main_quit()
