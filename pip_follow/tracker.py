"""
Window tracking state machine.

Holds the ID of the followed window and turns compositor events into at most
one move command each.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .matcher import WindowMatcher
from .models import (
    Event,
    MoveWindowCommand,
    WindowClosed,
    WindowDescriptor,
    WindowId,
    WindowOpenedOrChanged,
    WorkspaceActivated,
)

logger = logging.getLogger(__name__)


@dataclass
class TrackerState:
    """ID of the followed window, or None while idle."""

    tracked: Optional[WindowId] = None

    @property
    def is_tracking(self) -> bool:
        return self.tracked is not None


class WindowTracker:
    """Follows a single matching window across workspace focus changes."""

    def __init__(self, matcher: WindowMatcher, state: Optional[TrackerState] = None):
        """
        Initialize tracker.

        Args:
            matcher: Predicate selecting the window to follow
            state: Initial state (idle if None)
        """
        self.matcher = matcher
        self.state = state if state is not None else TrackerState()

    @property
    def tracked(self) -> Optional[WindowId]:
        return self.state.tracked

    def seed(self, windows: Iterable[WindowDescriptor]) -> Optional[WindowId]:
        """
        Pick the followed window from a snapshot of existing windows.

        The first matching window wins; later ones are not inspected.

        Args:
            windows: Windows in compositor order

        Returns:
            ID of the window now tracked, or None
        """
        for window in windows:
            if self.matcher.matches(window):
                logger.info(f"Found a matching window with id {window.id}")
                self.state.tracked = window.id
                return window.id

            logger.debug(f'Ignoring window "{window.label()}"')

        return None

    def handle(self, event: Event) -> Optional[MoveWindowCommand]:
        """
        Apply one event to the tracker state.

        Args:
            event: Normalized compositor event

        Returns:
            Move command to send, or None
        """
        if isinstance(event, WorkspaceActivated):
            return self._on_workspace_activated(event)
        elif isinstance(event, WindowOpenedOrChanged):
            self._on_window_opened_or_changed(event.window)
        elif isinstance(event, WindowClosed):
            self._on_window_closed(event.id)

        return None

    def _on_workspace_activated(self, event: WorkspaceActivated) -> Optional[MoveWindowCommand]:
        if event.focused and self.state.tracked is not None:
            window_id = self.state.tracked
            logger.info(f"Workspace {event.workspace_id} focused. Moving window {window_id}")
            return MoveWindowCommand(
                window_id=window_id,
                workspace_id=event.workspace_id,
                focus=False,
            )

        if event.focused:
            logger.debug(f"Workspace {event.workspace_id} focused but no window was detected")
        return None

    def _on_window_opened_or_changed(self, window: WindowDescriptor) -> None:
        # A tracked window that stops matching stays tracked until it closes
        if self.matcher.matches(window) and self.state.tracked != window.id:
            logger.info(f"Window {window.id} matched patterns")
            self.state.tracked = window.id

    def _on_window_closed(self, window_id: WindowId) -> None:
        if self.state.tracked is not None and self.state.tracked == window_id:
            logger.info(f"Window {window_id} got closed")
            self.state.tracked = None
