"""niri IPC backend.

niri listens on the Unix socket named by $NIRI_SOCKET and speaks
newline-delimited JSON: every request is one JSON value per line and gets one
reply line, ``{"Ok": ...}`` or ``{"Err": "..."}``. After an ``"EventStream"``
request the connection switches to pushing one event object per line.
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import ValidationError

from ..errors import (
    CommandError,
    CompositorConnectionError,
    RequestError,
    SubscriptionError,
    connect_error_code,
)
from ..models import (
    Event,
    UnrecognizedEvent,
    WindowClosed,
    WindowDescriptor,
    WindowId,
    WindowOpenedOrChanged,
    WorkspaceActivated,
    WorkspaceId,
)
from .base import CompositorConnection

logger = logging.getLogger(__name__)

# Window lists from busy sessions easily exceed asyncio's 64 KiB line default
STREAM_LIMIT = 4 * 1024 * 1024

HANDLED = "Handled"


class NiriSocket:
    """A single JSON-lines connection to niri."""

    def __init__(self, path: Path):
        self.path = path
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None

    @property
    def is_open(self) -> bool:
        return self.writer is not None

    async def open(self) -> None:
        self.reader, self.writer = await asyncio.open_unix_connection(str(self.path), limit=STREAM_LIMIT)

    async def send(self, request: Union[str, dict]) -> dict:
        """
        Send one request and read its reply.

        Raises:
            ConnectionError: If the socket is closed or closes before replying
            ValueError: If the reply is not a JSON object
        """
        if self.writer is None or self.reader is None:
            raise ConnectionError("niri socket is not open")

        self.writer.write((json.dumps(request) + "\n").encode())
        await self.writer.drain()

        line = await self.reader.readline()
        if not line:
            raise ConnectionError("niri IPC socket closed")

        reply = json.loads(line)
        if not isinstance(reply, dict):
            raise ValueError(f"Unexpected reply from niri: {reply!r}")
        return reply

    async def read_line(self) -> Optional[bytes]:
        """Next line from the socket, or None at end of stream."""
        if self.reader is None:
            return None

        line = await self.reader.readline()
        return line or None

    async def close(self) -> None:
        if self.writer is None:
            return

        writer = self.writer
        self.reader = None
        self.writer = None
        writer.close()
        try:
            await writer.wait_closed()
        except (ConnectionError, OSError) as e:
            logger.debug(f"Error while closing niri socket: {e}")


def parse_window(data: Any) -> WindowDescriptor:
    """Build a descriptor from a niri Window object."""
    return WindowDescriptor.model_validate(data)


def parse_event(line: Union[bytes, str]) -> Event:
    """
    Decode one event line from the niri event stream.

    Events the tracker does not consume, and lines that cannot be decoded,
    become UnrecognizedEvent.
    """
    try:
        payload = json.loads(line)
    except ValueError:
        logger.debug(f"Ignoring undecodable event line: {line!r}")
        return UnrecognizedEvent(kind="malformed")

    if not isinstance(payload, dict) or len(payload) != 1:
        return UnrecognizedEvent(kind="malformed")

    kind, body = next(iter(payload.items()))

    try:
        if kind == "WorkspaceActivated":
            return WorkspaceActivated(workspace_id=body["id"], focused=body["focused"])
        elif kind == "WindowOpenedOrChanged":
            return WindowOpenedOrChanged(window=parse_window(body["window"]))
        elif kind == "WindowClosed":
            return WindowClosed(id=body["id"])
    except (KeyError, TypeError, ValidationError) as e:
        logger.debug(f"Ignoring malformed {kind} event: {e}")

    return UnrecognizedEvent(kind=kind)


def move_window_request(window_id: WindowId, workspace_id: WorkspaceId, focus: bool = False) -> dict:
    """niri action moving a window to a workspace by ID."""
    return {
        "Action": {
            "MoveWindowToWorkspace": {
                "window_id": window_id,
                "reference": {"Id": workspace_id},
                "focus": focus,
            }
        }
    }


class NiriConnection(CompositorConnection):
    """Event and request sockets to niri."""

    name = "niri"

    def __init__(self, socket_path: Optional[Path] = None):
        """
        Initialize niri connection.

        Args:
            socket_path: niri IPC socket (defaults to $NIRI_SOCKET)
        """
        if socket_path is None:
            env_path = os.environ.get("NIRI_SOCKET")
            socket_path = Path(env_path) if env_path else None

        self.socket_path = socket_path
        self.events: Optional[NiriSocket] = None
        self.requests: Optional[NiriSocket] = None

    async def connect(self) -> None:
        if self.socket_path is None:
            raise CompositorConnectionError("NIRI_SOCKET is not set")

        self.events = NiriSocket(self.socket_path)
        self.requests = NiriSocket(self.socket_path)

        try:
            await self.events.open()
            await self.requests.open()
        except OSError as e:
            await self.close()
            raise CompositorConnectionError(
                f"Failed to connect to niri IPC: {e}",
                socket_path=str(self.socket_path),
                code=connect_error_code(e),
            )

        logger.info(f"Connected to niri IPC at {self.socket_path}")

    async def subscribe_events(self) -> None:
        if self.events is None:
            raise SubscriptionError("Cannot subscribe to events: not connected")

        try:
            reply = await self.events.send("EventStream")
        except (OSError, ValueError) as e:
            raise SubscriptionError(f"EventStream request failed: {e}")

        if reply.get("Ok") != HANDLED:
            raise SubscriptionError(f"niri refused EventStream request: {reply.get('Err', reply)}")

        logger.debug("Subscribed to niri event stream")

    async def _request(self, request: Union[str, dict]) -> dict:
        """Send on the request socket, re-opening it if it dropped earlier."""
        if self.requests is None:
            self.requests = NiriSocket(self.socket_path)

        if not self.requests.is_open:
            logger.debug("Re-opening niri request socket")
            await self.requests.open()

        try:
            return await self.requests.send(request)
        except (OSError, ValueError):
            # A garbled reply leaves the line framing unknown
            await self.requests.close()
            raise

    async def list_windows(self) -> List[WindowDescriptor]:
        try:
            reply = await self._request("Windows")
        except (OSError, ValueError) as e:
            raise RequestError(f"Windows request failed: {e}", request="Windows")

        if "Ok" not in reply:
            raise RequestError(f"niri refused Windows request: {reply.get('Err', reply)}", request="Windows")

        ok = reply["Ok"]
        if not isinstance(ok, dict) or not isinstance(ok.get("Windows"), list):
            raise RequestError(f"Unexpected reply to Windows request: {ok!r}", request="Windows")

        try:
            return [parse_window(window) for window in ok["Windows"]]
        except ValidationError as e:
            raise RequestError(f"Invalid window in Windows reply: {e}", request="Windows")

    async def move_window(self, window_id: WindowId, workspace_id: WorkspaceId, focus: bool = False) -> None:
        request = move_window_request(window_id, workspace_id, focus)

        try:
            reply = await self._request(request)
        except (OSError, ValueError) as e:
            raise CommandError(
                f"Failed to move window {window_id}: {e}",
                window_id=window_id,
                workspace_id=workspace_id,
            )

        if reply.get("Ok") != HANDLED:
            raise CommandError(
                f"niri rejected moving window {window_id}: {reply.get('Err', reply)}",
                window_id=window_id,
                workspace_id=workspace_id,
            )

    async def next_event(self) -> Optional[Event]:
        if self.events is None:
            return None

        try:
            line = await self.events.read_line()
        except (OSError, ValueError) as e:
            logger.warning(f"niri event stream failed: {e}")
            return None

        if line is None:
            return None

        return parse_event(line)

    async def close(self) -> None:
        for sock in (self.events, self.requests):
            if sock is not None:
                await sock.close()
