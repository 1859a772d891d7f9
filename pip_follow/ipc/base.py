"""Abstract connection pair to a compositor."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import Event, WindowDescriptor, WindowId, WorkspaceId


class CompositorConnection(ABC):
    """
    Event channel plus request channel to a compositor.

    The event channel delivers an ordered stream of events once subscribed.
    The request channel answers one-off requests (window snapshot, actions).
    """

    name = "compositor"

    @abstractmethod
    async def connect(self) -> None:
        """
        Open both channels.

        Raises:
            CompositorConnectionError: If the compositor socket cannot be opened
        """

    @abstractmethod
    async def subscribe_events(self) -> None:
        """
        Start the event stream on the event channel.

        Raises:
            SubscriptionError: If the compositor refuses the subscription
        """

    @abstractmethod
    async def list_windows(self) -> List[WindowDescriptor]:
        """
        Snapshot of all open windows.

        Raises:
            RequestError: If the request fails
        """

    @abstractmethod
    async def move_window(self, window_id: WindowId, workspace_id: WorkspaceId, focus: bool = False) -> None:
        """
        Move a window to a workspace.

        Raises:
            CommandError: If the command is not delivered or is rejected
        """

    @abstractmethod
    async def next_event(self) -> Optional[Event]:
        """
        Wait for the next event.

        Returns:
            Next event, or None once the stream has ended
        """

    @abstractmethod
    async def close(self) -> None:
        """Close both channels."""

    async def __aenter__(self) -> "CompositorConnection":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
